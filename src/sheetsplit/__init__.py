from __future__ import annotations

from importlib import import_module
from importlib.metadata import PackageNotFoundError, version
from typing import TYPE_CHECKING, Any

__all__ = [
    "__version__",
    "split_workbook",
    "SpecSplitOptions",
    "SpecSplitResult",
    "SpecSplitChunk",
    "SheetSplitError",
]

try:
    __version__ = version("sheetsplit")
except PackageNotFoundError:
    __version__ = "0.0.0"

if TYPE_CHECKING:
    from .errors import SheetSplitError
    from .spec import SpecSplitChunk, SpecSplitOptions, SpecSplitResult
    from .split import split_workbook

_ALIAS_ATTRS: dict[str, tuple[str, str]] = {
    "split_workbook": ("sheetsplit.split", "split_workbook"),
    "SpecSplitOptions": ("sheetsplit.spec", "SpecSplitOptions"),
    "SpecSplitResult": ("sheetsplit.spec", "SpecSplitResult"),
    "SpecSplitChunk": ("sheetsplit.spec", "SpecSplitChunk"),
    "SheetSplitError": ("sheetsplit.errors", "SheetSplitError"),
}


def __getattr__(name: str) -> Any:
    target = _ALIAS_ATTRS.get(name)
    if target is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, attr_name = target
    attr_loaded = getattr(import_module(module_name), attr_name)
    globals()[name] = attr_loaded
    return attr_loaded


def __dir__() -> list[str]:
    return sorted(set(globals()) | set(__all__))
