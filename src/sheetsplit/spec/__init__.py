from .cell import CellError, ExcelDateSerial, SpecCellFormat
from .merge import SpecChunkMerge, SpecMergeRange
from .sheet import EnumWorkbookFormat, SheetGrid
from .split import SpecChunkPlan, SpecSplitChunk, SpecSplitOptions, SpecSplitResult

__all__ = [
    "CellError",
    "ExcelDateSerial",
    "SpecCellFormat",
    "SpecChunkMerge",
    "SpecMergeRange",
    "EnumWorkbookFormat",
    "SheetGrid",
    "SpecChunkPlan",
    "SpecSplitChunk",
    "SpecSplitOptions",
    "SpecSplitResult",
]
