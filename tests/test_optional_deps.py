from __future__ import annotations

import re
import sys
from pathlib import Path

import pytest

# Ensure src-layout imports work when running tests from repo checkout.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

import sheetsplit  # noqa: E402
from sheetsplit._optional_deps import import_optional_module  # noqa: E402
from sheetsplit.reader import read_first_sheet  # noqa: E402
from sheetsplit.spec import EnumWorkbookFormat  # noqa: E402


def test_missing_xls_reader_names_the_extra() -> None:
    with pytest.raises(ModuleNotFoundError) as exc_info:
        import_optional_module(
            module_name="sheetsplit_missing_xls_reader",
            package=None,
            feature="Reading legacy .xls workbooks",
            extras=("xls",),
            required_modules=("sheetsplit_missing_xls_reader",),
        )

    message = str(exc_info.value)
    assert "Reading legacy .xls workbooks is unavailable" in message
    assert re.search(r'pip install "sheetsplit\[xls\]"', message)
    assert 'pip install -e ".[xls]"' in message
    assert "pdm" not in message


def test_unrelated_missing_module_propagates_unchanged() -> None:
    with pytest.raises(ModuleNotFoundError) as exc_info:
        import_optional_module(
            module_name="sheetsplit_missing_inner",
            package=None,
            feature="sheetsplit.cli",
            extras=("cli",),
            required_modules=("rich",),
        )
    assert "pip install" not in str(exc_info.value)


def test_read_xls_without_xlrd_raises_install_hint(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setitem(sys.modules, "xlrd", None)
    path_xls = tmp_path / "legacy.xls"
    path_xls.write_bytes(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 504)

    with pytest.raises(ModuleNotFoundError, match=r"sheetsplit\[xls\]"):
        read_first_sheet(path_xls, fmt=EnumWorkbookFormat.XLS)


def test_package_exports_resolve_lazily() -> None:
    assert callable(sheetsplit.split_workbook)
    assert issubclass(sheetsplit.SheetSplitError, Exception)
    assert sheetsplit.SpecSplitOptions().suffix_part == "_part"
    with pytest.raises(AttributeError):
        getattr(sheetsplit, "not_exported")
