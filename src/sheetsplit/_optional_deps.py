"""Imports for features shipped behind an install extra (``xls``, ``cli``)."""

from __future__ import annotations

from collections.abc import Sequence
from importlib import import_module
from types import ModuleType

_C_DIST_NAME = "sheetsplit"


def format_install_hint(extras: Sequence[str]) -> str:
    c_extras = ",".join(dict.fromkeys(extras))
    return (
        f'`pip install "{_C_DIST_NAME}[{c_extras}]"` '
        f'(from a checkout: `pip install -e ".[{c_extras}]"`)'
    )


def _is_required_missing(
    exc: ModuleNotFoundError, required_modules: Sequence[str]
) -> bool:
    if not required_modules:
        return True
    set_missing = set((exc.name or "").split("."))
    return any(set_missing & set(_mod.split(".")) for _mod in required_modules)


def import_optional_module(
    module_name: str,
    *,
    feature: str,
    extras: Sequence[str],
    required_modules: Sequence[str] = (),
    package: str | None = None,
) -> ModuleType:
    """
    Import ``module_name``; if one of ``required_modules`` is missing, raise a
    ``ModuleNotFoundError`` telling which extra provides it.

    Other import failures propagate unchanged. With no ``required_modules``
    any missing module is reported against the extra.
    """
    try:
        return import_module(module_name, package=package)
    except ModuleNotFoundError as exc:
        if not _is_required_missing(exc, required_modules):
            raise
        c_missing = f" (missing module `{exc.name}`)" if exc.name else ""
        raise ModuleNotFoundError(
            f"{feature} is unavailable{c_missing}. "
            f"Install it with {format_install_hint(extras)}.",
            name=exc.name,
        ) from exc
