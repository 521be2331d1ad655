import os
from pathlib import Path

from ..conf import (
    C_OUTPUT_EXT,
    C_OUTPUT_STEM_FALLBACK,
    N_LEN_EXCEL_SHEET_NAME_MAX,
    N_NROWS_EXCEL_MAX,
    TUP_EXCEL_ILLEGAL,
)
from ..errors import InvalidParameterError, RowCountBelowHeaderError
from ..spec import SpecChunkPlan


def _validate_positive_int(value: object, *, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameterError(
            f"{name} must be an integer, got {type(value).__name__}."
        )
    if value <= 0:
        raise InvalidParameterError(f"{name} must be > 0, got {value}.")
    return value


def validate_split_parameters(*, chunk_size: int, header_rows: int) -> None:
    """
    Check the split parameters before any file is touched.

    Raises:
        InvalidParameterError: If either value is not a positive integer, if
            ``chunk_size <= header_rows``, or if ``chunk_size`` exceeds the
            output row limit.
    """
    _validate_positive_int(chunk_size, name="chunk_size")
    _validate_positive_int(header_rows, name="header_rows")
    if chunk_size <= header_rows:
        raise InvalidParameterError(
            f"chunk_size must be greater than header_rows, "
            f"got chunk_size={chunk_size}, header_rows={header_rows}."
        )
    if chunk_size > N_NROWS_EXCEL_MAX:
        raise InvalidParameterError(
            f"chunk_size={chunk_size} exceeds the Excel row limit ({N_NROWS_EXCEL_MAX})."
        )


def plan_chunks(
    *, total_rows: int, header_rows: int, chunk_size: int
) -> list[SpecChunkPlan]:
    """
    Partition the data rows of a sheet into consecutive chunks.

    Every chunk holds ``chunk_size - header_rows`` data rows except possibly the
    last one. A sheet without data rows still yields a single empty chunk so
    the header is written once.

    Args:
        total_rows (int): Rows in the sheet, header included.
        header_rows (int): Leading rows repeated in every chunk.
        chunk_size (int): Maximum rows per output file, header included.

    Returns:
        list[SpecChunkPlan]: 1-indexed plans in emission order; slices are
        half-open and index into the data rows only.

    Raises:
        InvalidParameterError: See :func:`validate_split_parameters`.
        RowCountBelowHeaderError: If ``total_rows < header_rows``.

    Examples:
        >>> [p.data_rows for p in plan_chunks(total_rows=1206, header_rows=3, chunk_size=500)]
        [497, 497, 209]
    """
    validate_split_parameters(chunk_size=chunk_size, header_rows=header_rows)
    if total_rows < header_rows:
        raise RowCountBelowHeaderError(
            f"The sheet has {total_rows} row(s), fewer than header_rows={header_rows}."
        )

    n_rows_data = total_rows - header_rows
    n_data_capacity = chunk_size - header_rows
    if n_rows_data == 0:
        return [SpecChunkPlan(index=1, data_start=0, data_end=0)]

    l_plans: list[SpecChunkPlan] = []
    n_row_cursor = 0
    n_idx_part = 1
    while n_row_cursor < n_rows_data:
        n_row_end = min(n_rows_data, n_row_cursor + n_data_capacity)
        l_plans.append(
            SpecChunkPlan(index=n_idx_part, data_start=n_row_cursor, data_end=n_row_end)
        )
        n_row_cursor = n_row_end
        n_idx_part += 1
    return l_plans


def build_output_path(
    source: os.PathLike[str] | str,
    index: int,
    *,
    dir_out: os.PathLike[str] | str | None = None,
    suffix_part: str = "_part",
) -> Path:
    path_source = Path(source)
    dir_parent = Path(dir_out) if dir_out is not None else path_source.parent
    c_stem = path_source.stem or C_OUTPUT_STEM_FALLBACK
    return dir_parent / f"{c_stem}{suffix_part}{index}{C_OUTPUT_EXT}"


def sanitize_sheet_name(name: str, *, replace_to: str = "_") -> str:
    for ch in TUP_EXCEL_ILLEGAL:
        name = name.replace(ch, replace_to)
    name = name.strip() or "Sheet"
    return name[:N_LEN_EXCEL_SHEET_NAME_MAX]
