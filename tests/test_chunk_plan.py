from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure src-layout imports work when running tests from repo checkout.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from sheetsplit.errors import (  # noqa: E402
    InvalidParameterError,
    RowCountBelowHeaderError,
    SheetSplitError,
)
from sheetsplit.service import (  # noqa: E402
    build_output_path,
    plan_chunks,
    sanitize_sheet_name,
    validate_split_parameters,
)
from sheetsplit.spec import SpecChunkPlan  # noqa: E402


def test_plan_chunks_fills_each_chunk_to_capacity() -> None:
    l_plans = plan_chunks(total_rows=1206, header_rows=3, chunk_size=500)

    assert [p.data_rows for p in l_plans] == [497, 497, 209]
    assert [p.index for p in l_plans] == [1, 2, 3]
    assert l_plans[0] == SpecChunkPlan(index=1, data_start=0, data_end=497)
    assert l_plans[-1].data_end == 1203


def test_plan_chunks_covers_data_rows_without_gaps() -> None:
    l_plans = plan_chunks(total_rows=101, header_rows=1, chunk_size=11)

    assert len(l_plans) == 10
    for _prev, _next in zip(l_plans, l_plans[1:]):
        assert _prev.data_end == _next.data_start
    assert sum(p.data_rows for p in l_plans) == 100


def test_plan_chunks_exact_multiple_has_no_empty_tail() -> None:
    l_plans = plan_chunks(total_rows=9, header_rows=1, chunk_size=5)
    assert [p.data_rows for p in l_plans] == [4, 4]


def test_plan_chunks_header_only_sheet_yields_one_empty_chunk() -> None:
    assert plan_chunks(total_rows=2, header_rows=2, chunk_size=10) == [
        SpecChunkPlan(index=1, data_start=0, data_end=0)
    ]


def test_plan_chunks_rejects_sheet_shorter_than_header() -> None:
    with pytest.raises(RowCountBelowHeaderError) as exc_info:
        plan_chunks(total_rows=1, header_rows=3, chunk_size=10)
    assert isinstance(exc_info.value, ValueError)


@pytest.mark.parametrize(
    ("chunk_size", "header_rows"),
    [
        (0, 1),
        (10, 0),
        (-5, 1),
        (5, 5),
        (3, 5),
        (10.0, 1),
        (True, 0),
        (10, True),
        ("10", 1),
        (1_048_577, 1),
    ],
)
def test_validate_split_parameters_rejects(chunk_size: object, header_rows: object) -> None:
    with pytest.raises(InvalidParameterError) as exc_info:
        validate_split_parameters(chunk_size=chunk_size, header_rows=header_rows)  # type: ignore[arg-type]
    assert isinstance(exc_info.value, SheetSplitError)
    assert isinstance(exc_info.value, ValueError)


def test_validate_split_parameters_accepts_row_limit() -> None:
    validate_split_parameters(chunk_size=1_048_576, header_rows=1)


def test_build_output_path_defaults_next_to_source(tmp_path: Path) -> None:
    path_source = tmp_path / "report.data.xlsx"
    assert build_output_path(path_source, 3) == tmp_path / "report.data_part3.xlsx"


def test_build_output_path_honors_dir_and_suffix(tmp_path: Path) -> None:
    path_out = build_output_path(
        tmp_path / "src" / "sales.xls", 1, dir_out=tmp_path / "out", suffix_part="-"
    )
    assert path_out == tmp_path / "out" / "sales-1.xlsx"


def test_sanitize_sheet_name() -> None:
    assert sanitize_sheet_name("a/b:c") == "a_b_c"
    assert sanitize_sheet_name("   ") == "Sheet"
    assert len(sanitize_sheet_name("x" * 40)) == 31
