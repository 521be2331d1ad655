import os
from pathlib import Path
from types import ModuleType
from typing import Any

import openpyxl
from loguru import logger

from ._optional_deps import import_optional_module
from .conf import BYTES_MAGIC_OLE2, BYTES_MAGIC_ZIP, TUP_EXTS_OLE2, TUP_EXTS_ZIP
from .errors import NoSheetError, SheetReadError, SourceOpenError
from .spec import CellError, EnumWorkbookFormat, ExcelDateSerial, SheetGrid
from .value_conversion import normalize_row

################################################################################
# #region FormatDetection


def detect_workbook_format(path: os.PathLike[str] | str) -> EnumWorkbookFormat:
    """
    Tell the zip-packaged format from the legacy binary one.

    The leading magic bytes decide; the file extension is only consulted when
    the signature is unknown.

    Raises:
        SourceOpenError: If the file cannot be read or neither the signature
            nor the extension is recognized.
    """
    path = Path(path)
    try:
        with path.open("rb") as fh:
            v_head = fh.read(len(BYTES_MAGIC_OLE2))
    except OSError as exc:
        raise SourceOpenError(
            f"Cannot open the source file: {exc.strerror or exc}", path=path
        ) from exc

    if v_head.startswith(BYTES_MAGIC_ZIP):
        return EnumWorkbookFormat.XLSX
    if v_head.startswith(BYTES_MAGIC_OLE2):
        return EnumWorkbookFormat.XLS

    c_suffix = path.suffix.lower()
    if c_suffix in TUP_EXTS_ZIP:
        return EnumWorkbookFormat.XLSX
    if c_suffix in TUP_EXTS_OLE2:
        return EnumWorkbookFormat.XLS
    raise SourceOpenError("Unrecognized spreadsheet format", path=path)


# #endregion
################################################################################
# #region SheetReaders


def _trim_trailing_empty_rows(rows: list[list[str]]) -> list[list[str]]:
    n_rows_kept = len(rows)
    while n_rows_kept > 0 and not rows[n_rows_kept - 1]:
        n_rows_kept -= 1
    return rows[:n_rows_kept]


def _convert_openpyxl_cell(cell: Any) -> Any:
    if getattr(cell, "data_type", None) == "e":
        return CellError(code=str(cell.value))
    return cell.value


def _read_rows_xlsx(path: Path) -> tuple[str, list[list[str]]]:
    try:
        fh = path.open("rb")
    except OSError as exc:
        raise SourceOpenError(
            f"Cannot open the source file: {exc.strerror or exc}", path=path
        ) from exc

    with fh:
        # A file handle bypasses openpyxl's extension check.
        try:
            wb = openpyxl.load_workbook(fh, read_only=True, data_only=True)
        except Exception as exc:
            raise SourceOpenError(
                f"Cannot parse the workbook: {exc}", path=path
            ) from exc

        try:
            if not wb.sheetnames:
                raise NoSheetError("The workbook contains no sheet", path=path)
            c_sheet_name = wb.sheetnames[0]
            try:
                ws = wb[c_sheet_name]
                # The stored dimension can be stale; read every parsed cell.
                ws.reset_dimensions()
                l_rows = [
                    normalize_row(_convert_openpyxl_cell(_cell) for _cell in _row)
                    for _row in ws.iter_rows()
                ]
            except Exception as exc:
                raise SheetReadError(
                    f"Cannot read the sheet: {exc}", path=path, sheet_name=c_sheet_name
                ) from exc
        finally:
            wb.close()
    return c_sheet_name, l_rows


def _convert_xlrd_cell(cell: Any, *, datemode: int, xlrd: ModuleType) -> Any:
    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
        return None
    if cell.ctype == xlrd.XL_CELL_DATE:
        return ExcelDateSerial(serial=float(cell.value), datemode=datemode)
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if cell.ctype == xlrd.XL_CELL_ERROR:
        return CellError(
            code=xlrd.error_text_from_code.get(cell.value, f"0x{cell.value:02x}")
        )
    return cell.value


def _read_rows_xls(path: Path) -> tuple[str, list[list[str]]]:
    xlrd = import_optional_module(
        "xlrd",
        feature="Reading legacy .xls workbooks",
        extras=("xls",),
        required_modules=("xlrd",),
    )
    try:
        book = xlrd.open_workbook(os.fspath(path), on_demand=True)
    except Exception as exc:
        raise SourceOpenError(f"Cannot parse the workbook: {exc}", path=path) from exc

    try:
        if book.nsheets == 0:
            raise NoSheetError("The workbook contains no sheet", path=path)
        c_sheet_name = book.sheet_names()[0]
        try:
            sheet = book.sheet_by_index(0)
            l_rows = [
                normalize_row(
                    _convert_xlrd_cell(_cell, datemode=book.datemode, xlrd=xlrd)
                    for _cell in sheet.row(_row_idx)
                )
                for _row_idx in range(sheet.nrows)
            ]
        except Exception as exc:
            raise SheetReadError(
                f"Cannot read the sheet: {exc}", path=path, sheet_name=c_sheet_name
            ) from exc
    finally:
        book.release_resources()
    return c_sheet_name, l_rows


# #endregion
################################################################################
# #region Public


def read_first_sheet(
    path: os.PathLike[str] | str, *, fmt: EnumWorkbookFormat | None = None
) -> SheetGrid:
    """
    Read the first sheet of a workbook into a grid of normalized text.

    Rows start at the sheet's first row so grid coordinates match cell
    references. Trailing cells and trailing rows without content are dropped.

    Args:
        path: Source workbook (.xlsx family or legacy .xls).
        fmt: Container format if already known; detected otherwise.

    Raises:
        SourceOpenError: The file cannot be opened or parsed.
        NoSheetError: The workbook has no sheet.
        SheetReadError: The first sheet cannot be materialized.
    """
    path = Path(path)
    if fmt is None:
        fmt = detect_workbook_format(path)

    if fmt is EnumWorkbookFormat.XLSX:
        c_sheet_name, l_rows = _read_rows_xlsx(path)
    else:
        c_sheet_name, l_rows = _read_rows_xls(path)

    l_rows = _trim_trailing_empty_rows(l_rows)
    logger.debug(
        f"Read {len(l_rows)} row(s) from sheet {c_sheet_name!r} of {path.name} ({fmt})"
    )
    return SheetGrid.from_rows(c_sheet_name, l_rows)


# #endregion
################################################################################
