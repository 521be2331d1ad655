# Strategy/Preference/Adjustable Parameters for splitting.

from ..spec import SpecCellFormat, SpecSplitOptions

N_HEADER_ROWS_DEFAULT = 1
N_CHUNK_SIZE_DEFAULT = 500

DEFAULT_MERGE_FORMAT = SpecCellFormat()
DEFAULT_SPLIT_OPTIONS = SpecSplitOptions()
