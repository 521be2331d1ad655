from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest
import xlsxwriter

# Ensure src-layout imports work when running tests from repo checkout.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from sheetsplit import reader as reader_module  # noqa: E402
from sheetsplit.errors import NoSheetError, SheetReadError, SourceOpenError  # noqa: E402
from sheetsplit.reader import (  # noqa: E402
    _convert_openpyxl_cell,
    _convert_xlrd_cell,
    detect_workbook_format,
    read_first_sheet,
)
from sheetsplit.spec import CellError, EnumWorkbookFormat, ExcelDateSerial  # noqa: E402


def _write_typed_workbook(path: Path) -> Path:
    wb = xlsxwriter.Workbook(path.as_posix())
    fmt_date = wb.add_format({"num_format": "yyyy-mm-dd"})
    ws = wb.add_worksheet("First")
    # row 0 left empty on purpose
    ws.write_string(1, 0, "name")
    ws.write_string(1, 1, "qty")
    ws.write_string(2, 0, "apple")
    ws.write_number(2, 1, 3)
    ws.write_number(2, 2, 2.5)
    ws.write_boolean(3, 0, True)
    ws.write_datetime(3, 2, datetime(2024, 3, 5), fmt_date)
    ws.write_formula(4, 3, "=1+1", None, 2)
    wb.add_worksheet("Second").write_string(0, 0, "ignored")
    wb.close()
    return path


def test_read_first_sheet_normalizes_values(tmp_path: Path) -> None:
    grid = read_first_sheet(_write_typed_workbook(tmp_path / "typed.xlsx"))

    assert grid.sheet_name == "First"
    assert grid.height == 5
    assert grid.width == 4
    assert list(grid.iter_rows()) == [
        ("", "", "", ""),
        ("name", "qty", "", ""),
        ("apple", "3", "2.5", ""),
        ("TRUE", "", "2024-03-05 00:00:00", ""),
        ("", "", "", "2"),
    ]


def test_read_first_sheet_ignores_extension(tmp_path: Path) -> None:
    path_xlsx = _write_typed_workbook(tmp_path / "typed.xlsx")
    path_renamed = path_xlsx.rename(tmp_path / "typed.bin")

    assert detect_workbook_format(path_renamed) is EnumWorkbookFormat.XLSX
    assert read_first_sheet(path_renamed).sheet_name == "First"


def test_read_first_sheet_empty_sheet(tmp_path: Path) -> None:
    path_xlsx = tmp_path / "empty.xlsx"
    wb = xlsxwriter.Workbook(path_xlsx.as_posix())
    wb.add_worksheet("Blank")
    wb.close()

    grid = read_first_sheet(path_xlsx)
    assert grid.sheet_name == "Blank"
    assert grid.height == 0


def test_detect_workbook_format_by_extension(tmp_path: Path) -> None:
    path_xls = tmp_path / "legacy.xls"
    path_xls.write_bytes(b"not a signature")
    assert detect_workbook_format(path_xls) is EnumWorkbookFormat.XLS

    path_ole = tmp_path / "legacy.dat"
    path_ole.write_bytes(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1rest")
    assert detect_workbook_format(path_ole) is EnumWorkbookFormat.XLS


def test_detect_workbook_format_rejects_unknown(tmp_path: Path) -> None:
    path_txt = tmp_path / "notes.txt"
    path_txt.write_text("hello")
    with pytest.raises(SourceOpenError):
        detect_workbook_format(path_txt)

    with pytest.raises(SourceOpenError) as exc_info:
        detect_workbook_format(tmp_path / "missing.xlsx")
    assert exc_info.value.path == tmp_path / "missing.xlsx"


def test_read_first_sheet_rejects_garbage_zip(tmp_path: Path) -> None:
    path_xlsx = tmp_path / "garbage.xlsx"
    path_xlsx.write_bytes(b"PK\x03\x04garbage")
    with pytest.raises(SourceOpenError):
        read_first_sheet(path_xlsx)


def test_convert_openpyxl_error_cell() -> None:
    cell_err = SimpleNamespace(data_type="e", value="#DIV/0!")
    cell_num = SimpleNamespace(data_type="n", value=4)
    assert _convert_openpyxl_cell(cell_err) == CellError(code="#DIV/0!")
    assert _convert_openpyxl_cell(cell_num) == 4


def test_convert_xlrd_cells() -> None:
    xlrd = pytest.importorskip("xlrd")
    Cell = xlrd.sheet.Cell

    assert _convert_xlrd_cell(Cell(xlrd.XL_CELL_EMPTY, ""), datemode=0, xlrd=xlrd) is None
    assert _convert_xlrd_cell(Cell(xlrd.XL_CELL_BOOLEAN, 1), datemode=0, xlrd=xlrd) is True
    assert _convert_xlrd_cell(
        Cell(xlrd.XL_CELL_DATE, 45000.5), datemode=1, xlrd=xlrd
    ) == ExcelDateSerial(serial=45000.5, datemode=1)
    assert _convert_xlrd_cell(
        Cell(xlrd.XL_CELL_ERROR, 0x07), datemode=0, xlrd=xlrd
    ) == CellError(code="#DIV/0!")
    assert _convert_xlrd_cell(Cell(xlrd.XL_CELL_NUMBER, 2.0), datemode=0, xlrd=xlrd) == 2.0


class _FakeOpenpyxlWorkbook:
    def __init__(self, dict_sheets: dict[str, object]) -> None:
        self._dict_sheets = dict_sheets
        self.closed = False

    @property
    def sheetnames(self) -> list[str]:
        return list(self._dict_sheets)

    def __getitem__(self, name: str) -> object:
        return self._dict_sheets[name]

    def close(self) -> None:
        self.closed = True


class _FailingSheet:
    def reset_dimensions(self) -> None:
        pass

    def iter_rows(self):
        raise ValueError("bad row record")


def _patch_openpyxl(
    monkeypatch: pytest.MonkeyPatch, wb: _FakeOpenpyxlWorkbook
) -> None:
    monkeypatch.setattr(
        reader_module.openpyxl, "load_workbook", lambda *args, **kwargs: wb
    )


def test_read_xlsx_without_sheets_raises_no_sheet(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path_xlsx = tmp_path / "empty_book.xlsx"
    path_xlsx.write_bytes(b"PK\x03\x04")
    wb = _FakeOpenpyxlWorkbook({})
    _patch_openpyxl(monkeypatch, wb)

    with pytest.raises(NoSheetError) as exc_info:
        read_first_sheet(path_xlsx, fmt=EnumWorkbookFormat.XLSX)
    assert exc_info.value.path == path_xlsx
    assert wb.closed


def test_read_xlsx_sheet_failure_raises_sheet_read_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path_xlsx = tmp_path / "broken.xlsx"
    path_xlsx.write_bytes(b"PK\x03\x04")
    wb = _FakeOpenpyxlWorkbook({"Data": _FailingSheet(), "Other": _FailingSheet()})
    _patch_openpyxl(monkeypatch, wb)

    with pytest.raises(SheetReadError, match="bad row record") as exc_info:
        read_first_sheet(path_xlsx, fmt=EnumWorkbookFormat.XLSX)
    assert exc_info.value.sheet_name == "Data"
    assert isinstance(exc_info.value.__cause__, ValueError)
    assert wb.closed


def _fake_xlrd(book: SimpleNamespace) -> SimpleNamespace:
    return SimpleNamespace(open_workbook=lambda *args, **kwargs: book)


def test_read_xls_without_sheets_raises_no_sheet(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path_xls = tmp_path / "empty_book.xls"
    path_xls.write_bytes(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1")
    l_released: list[bool] = []
    book = SimpleNamespace(
        nsheets=0, release_resources=lambda: l_released.append(True)
    )
    monkeypatch.setitem(sys.modules, "xlrd", _fake_xlrd(book))

    with pytest.raises(NoSheetError):
        read_first_sheet(path_xls, fmt=EnumWorkbookFormat.XLS)
    assert l_released == [True]


def test_read_xls_sheet_failure_raises_sheet_read_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path_xls = tmp_path / "broken.xls"
    path_xls.write_bytes(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1")

    def sheet_by_index(n_idx: int) -> None:
        raise IndexError(f"sheet {n_idx} record truncated")

    book = SimpleNamespace(
        nsheets=1,
        datemode=0,
        sheet_names=lambda: ["Legacy"],
        sheet_by_index=sheet_by_index,
        release_resources=lambda: None,
    )
    monkeypatch.setitem(sys.modules, "xlrd", _fake_xlrd(book))

    with pytest.raises(SheetReadError, match="record truncated") as exc_info:
        read_first_sheet(path_xls, fmt=EnumWorkbookFormat.XLS)
    assert exc_info.value.sheet_name == "Legacy"
    assert exc_info.value.path == path_xls
