from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sheetsplit._optional_deps import import_optional_module

__all__ = ["main", "build_parser", "CliHeadings"]

if TYPE_CHECKING:
    from .app import build_parser, main
    from .console import CliHeadings

_ATTR_MODULES: dict[str, str] = {
    "main": ".app",
    "build_parser": ".app",
    "CliHeadings": ".console",
}


def __getattr__(name: str) -> Any:
    module_name = _ATTR_MODULES.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module = import_optional_module(
        module_name,
        package=__name__,
        feature="The sheetsplit command line",
        extras=("cli",),
        required_modules=("rich_argparse", "rich"),
    )
    # Bind every export of the submodule at once; later lookups skip __getattr__.
    for c_attr, c_module in _ATTR_MODULES.items():
        if c_module == module_name:
            globals()[c_attr] = getattr(module, c_attr)
    return globals()[name]


def __dir__() -> list[str]:
    return sorted(set(globals()) | set(__all__))
