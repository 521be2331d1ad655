import os
from collections.abc import Iterable, Sequence
from pathlib import Path
from types import TracebackType
from typing import Any

import polars as pl
import xlsxwriter
import xlsxwriter.exceptions
import xlsxwriter.format
import xlsxwriter.worksheet
from loguru import logger

from .conf import DEFAULT_MERGE_FORMAT
from .errors import WriteError
from .service import format_cell_ref, sanitize_sheet_name
from .spec import SpecCellFormat, SpecChunkMerge

# xlsxwriter return codes
_N_RC_OUT_OF_RANGE = -1
_N_RC_STRING_TRUNCATED = -2


class XlsxChunkWriter:
    """
    Write one output chunk, rows as text, to a fresh single-sheet XLSX file.

    Wraps :class:`xlsxwriter.Workbook`; merged blocks are applied after the
    rows, so the workbook is kept in normal (not constant-memory) mode. Use it
    as a context manager or call :meth:`close` to save::

        with XlsxChunkWriter("report_part1.xlsx") as writer:
            writer.write_rows(header_rows, row_start=0)
            writer.write_rows(data_rows, row_start=len(header_rows))
            writer.apply_merges(merges)

    Parameters
    ----------
    file_out:
        Destination path; overwritten if it exists.
    sheet_name:
        Worksheet name, sanitized for Excel. ``None`` keeps ``Sheet1``.
    fmt_merge:
        Format applied to merged blocks.
    """

    def __init__(
        self,
        file_out: os.PathLike[str] | str,
        *,
        sheet_name: str | None = None,
        fmt_merge: SpecCellFormat | None = None,
    ):
        self.file_out = Path(file_out)
        self.wb = xlsxwriter.Workbook(self.file_out.as_posix())
        self.ws: xlsxwriter.worksheet.Worksheet = self.wb.add_worksheet(
            sanitize_sheet_name(sheet_name) if sheet_name is not None else None
        )
        self.fmt_merge = DEFAULT_MERGE_FORMAT if fmt_merge is None else fmt_merge
        self._format_cache: dict[SpecCellFormat, xlsxwriter.format.Format] = {}
        self._is_closed = False

    def __enter__(self) -> "XlsxChunkWriter":
        return self

    def __exit__(
        self, exc_type: type | None, exc: BaseException | None, tb: TracebackType | None
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._is_closed:
            return
        self._is_closed = True
        try:
            self.wb.close()
        except (xlsxwriter.exceptions.XlsxWriterException, OSError) as e:
            raise WriteError(f"Cannot save the output file: {e}", path=self.file_out) from e

    def _create_format_cached(self, spec: SpecCellFormat) -> xlsxwriter.format.Format:
        fmt = self._format_cache.get(spec)
        if fmt is None:
            fmt = self.wb.add_format(spec.to_xlsxwriter())
            self._format_cache[spec] = fmt
        return fmt

    def _check_return_code(self, rc: int, *, row_idx: int, col_idx: int) -> None:
        if rc == _N_RC_OUT_OF_RANGE:
            raise WriteError(
                f"Cell {format_cell_ref(row_idx, col_idx)} is outside the worksheet limits",
                path=self.file_out,
            )
        if rc == _N_RC_STRING_TRUNCATED:
            logger.warning(
                f"Text in cell {format_cell_ref(row_idx, col_idx)} exceeds the Excel "
                f"string limit and was truncated ({self.file_out.name})"
            )

    def write_rows(self, rows: Iterable[Sequence[Any]], *, row_start: int) -> int:
        """
        Write rows of text starting at zero-based ``row_start``.

        Empty strings are skipped. Returns the number of rows consumed.
        """
        n_rows_written = 0
        for _row_offset, _row_val in enumerate(rows):
            n_row_idx_ = row_start + _row_offset
            for _col_idx, _col_val in enumerate(_row_val):
                if not _col_val:
                    continue
                rc = self.ws.write_string(n_row_idx_, _col_idx, str(_col_val))
                self._check_return_code(rc, row_idx=n_row_idx_, col_idx=_col_idx)
            n_rows_written += 1
        return n_rows_written

    def apply_merges(self, merges: Sequence[SpecChunkMerge]) -> None:
        """Re-create merged blocks, each showing its anchor text."""
        if not merges:
            return
        cfg_fmt_merge = self._create_format_cached(self.fmt_merge)
        for _merge in merges:
            if _merge.is_single_cell:
                # A 1x1 block is not a valid merge; keep just the anchor text.
                if _merge.text:
                    rc = self.ws.write_string(
                        _merge.row_start, _merge.col_start, _merge.text
                    )
                    self._check_return_code(
                        rc, row_idx=_merge.row_start, col_idx=_merge.col_start
                    )
                continue
            try:
                rc = self.ws.merge_range(
                    _merge.row_start,
                    _merge.col_start,
                    _merge.row_end,
                    _merge.col_end,
                    _merge.text,
                    cfg_fmt_merge,
                )
            except xlsxwriter.exceptions.XlsxWriterException as e:
                c_ref = (
                    f"{format_cell_ref(_merge.row_start, _merge.col_start)}:"
                    f"{format_cell_ref(_merge.row_end, _merge.col_end)}"
                )
                raise WriteError(
                    f"Cannot merge {c_ref}: {e}", path=self.file_out
                ) from e
            self._check_return_code(
                rc, row_idx=_merge.row_end, col_idx=_merge.col_end
            )


def write_chunk(
    destination: os.PathLike[str] | str,
    header_frame: pl.DataFrame,
    data_frame: pl.DataFrame,
    merges: Sequence[SpecChunkMerge],
    *,
    sheet_name: str | None = None,
    fmt_merge: SpecCellFormat | None = None,
) -> int:
    """
    Write header rows, then data rows, then merged blocks into ``destination``.

    Returns the total number of rows written.

    Raises:
        WriteError: On any cell, merge, or save failure. A partially written
            file may be left behind.
    """
    with XlsxChunkWriter(
        destination, sheet_name=sheet_name, fmt_merge=fmt_merge
    ) as writer:
        n_rows_header = writer.write_rows(header_frame.iter_rows(), row_start=0)
        n_rows_data = writer.write_rows(
            data_frame.iter_rows(), row_start=n_rows_header
        )
        writer.apply_merges(merges)
    return n_rows_header + n_rows_data
