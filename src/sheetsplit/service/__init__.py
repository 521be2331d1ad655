from .cell_ref import (
    convert_column_index_to_label,
    convert_column_label_to_index,
    format_cell_ref,
    parse_cell_ref,
    parse_range_ref,
)
from .chunk_plan import (
    build_output_path,
    plan_chunks,
    sanitize_sheet_name,
    validate_split_parameters,
)
from .merge_remap import (
    get_anchor_text,
    is_row_in_chunk,
    map_row_to_chunk,
    remap_chunk_merges,
)

__all__ = [
    "convert_column_index_to_label",
    "convert_column_label_to_index",
    "format_cell_ref",
    "parse_cell_ref",
    "parse_range_ref",
    "build_output_path",
    "plan_chunks",
    "sanitize_sheet_name",
    "validate_split_parameters",
    "get_anchor_text",
    "is_row_in_chunk",
    "map_row_to_chunk",
    "remap_chunk_merges",
]
