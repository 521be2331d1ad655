from collections.abc import Sequence

import polars as pl

from ..conf import N_NCOLS_EXCEL_MAX
from ..spec import SpecChunkMerge, SpecChunkPlan, SpecMergeRange


def is_row_in_chunk(row: int, *, header_rows: int, plan: SpecChunkPlan) -> bool:
    """Header rows belong to every chunk; data rows only to the chunk covering them."""
    if row < header_rows:
        return True
    return plan.data_start <= row - header_rows < plan.data_end


def map_row_to_chunk(row: int, *, header_rows: int, plan: SpecChunkPlan) -> int:
    if row < header_rows:
        return row
    return row - plan.data_start


def _get_frame_text(frame: pl.DataFrame, row: int, col: int) -> str:
    if not (0 <= row < frame.height and 0 <= col < frame.width):
        return ""
    return frame.item(row, col) or ""


def get_anchor_text(
    row: int,
    col: int,
    *,
    header_rows: int,
    header_frame: pl.DataFrame,
    data_frame: pl.DataFrame,
) -> str:
    """Text of source cell ``(row, col)``, looked up in the header or data rows."""
    if row < header_rows:
        return _get_frame_text(header_frame, row, col)
    return _get_frame_text(data_frame, row - header_rows, col)


def remap_chunk_merges(
    merges: Sequence[SpecMergeRange],
    *,
    header_rows: int,
    plan: SpecChunkPlan,
    header_frame: pl.DataFrame,
    data_frame: pl.DataFrame,
) -> list[SpecChunkMerge]:
    """
    Translate source merge ranges into one chunk's local coordinates.

    A range survives only if both its first and last row fall inside the chunk
    (header rows always do) and its columns fit the output sheet. Ranges that
    straddle a chunk boundary are dropped: neither output file can hold them.

    Args:
        merges: Source ranges, zero-based inclusive.
        header_rows: Number of header rows.
        plan: Data-row slice of this chunk.
        header_frame: The header rows of the source grid.
        data_frame: All data rows of the source grid (not only this chunk's),
            indexed from the first data row.

    Returns:
        list[SpecChunkMerge]: Kept ranges in input order, each with the anchor
        text of its source top-left cell.
    """
    l_chunk_merges: list[SpecChunkMerge] = []
    for _merge in merges:
        if not (
            is_row_in_chunk(_merge.row_start, header_rows=header_rows, plan=plan)
            and is_row_in_chunk(_merge.row_end, header_rows=header_rows, plan=plan)
        ):
            continue
        if _merge.col_end >= N_NCOLS_EXCEL_MAX:
            continue
        l_chunk_merges.append(
            SpecChunkMerge(
                row_start=map_row_to_chunk(
                    _merge.row_start, header_rows=header_rows, plan=plan
                ),
                row_end=map_row_to_chunk(
                    _merge.row_end, header_rows=header_rows, plan=plan
                ),
                col_start=_merge.col_start,
                col_end=_merge.col_end,
                text=get_anchor_text(
                    _merge.row_start,
                    _merge.col_start,
                    header_rows=header_rows,
                    header_frame=header_frame,
                    data_frame=data_frame,
                ),
            )
        )
    return l_chunk_merges
