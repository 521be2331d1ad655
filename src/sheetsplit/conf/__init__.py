from .constant import (
    BYTES_MAGIC_OLE2,
    BYTES_MAGIC_ZIP,
    C_DIR_WORKBOOK,
    C_OUTPUT_EXT,
    C_OUTPUT_STEM_FALLBACK,
    C_PART_WORKBOOK,
    C_PART_WORKBOOK_RELS,
    N_LEN_EXCEL_SHEET_NAME_MAX,
    N_NCOLS_EXCEL_MAX,
    N_NROWS_EXCEL_MAX,
    TUP_EXCEL_ILLEGAL,
    TUP_EXTS_OLE2,
    TUP_EXTS_ZIP,
)
from .default import (
    DEFAULT_MERGE_FORMAT,
    DEFAULT_SPLIT_OPTIONS,
    N_CHUNK_SIZE_DEFAULT,
    N_HEADER_ROWS_DEFAULT,
)

__all__ = [
    "BYTES_MAGIC_OLE2",
    "BYTES_MAGIC_ZIP",
    "C_DIR_WORKBOOK",
    "C_OUTPUT_EXT",
    "C_OUTPUT_STEM_FALLBACK",
    "C_PART_WORKBOOK",
    "C_PART_WORKBOOK_RELS",
    "N_LEN_EXCEL_SHEET_NAME_MAX",
    "N_NCOLS_EXCEL_MAX",
    "N_NROWS_EXCEL_MAX",
    "TUP_EXCEL_ILLEGAL",
    "TUP_EXTS_OLE2",
    "TUP_EXTS_ZIP",
    "DEFAULT_MERGE_FORMAT",
    "DEFAULT_SPLIT_OPTIONS",
    "N_CHUNK_SIZE_DEFAULT",
    "N_HEADER_ROWS_DEFAULT",
]
