"""Time ``split_workbook`` on synthetic workbooks and record the results as JSON.

    python scripts/benchmark_split.py --repeat 5 --profile huge
"""

from __future__ import annotations

import argparse
import json
import platform
import statistics
import sys
import tempfile
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from importlib import metadata
from pathlib import Path
from time import perf_counter

import xlsxwriter
from loguru import logger
from openpyxl import load_workbook

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from sheetsplit import SpecSplitOptions, SpecSplitResult, split_workbook  # noqa: E402


@dataclass(frozen=True, slots=True)
class SpecScenario:
    name: str
    n_rows: int
    n_cols: int
    chunk_size: int
    header_rows: int = 1
    # vertical two-row merges in the column right of the data
    n_merges: int = 0


@dataclass(slots=True)
class SpecTimings:
    scenario: SpecScenario
    n_files: int = 0
    source_bytes: int = 0
    l_seconds: list[float] = field(default_factory=list)

    def summary(self) -> dict[str, float]:
        return {
            "median": statistics.median(self.l_seconds),
            "mean": statistics.fmean(self.l_seconds),
            "min": min(self.l_seconds),
            "max": max(self.l_seconds),
        }


DICT_PROFILES: dict[str, tuple[SpecScenario, ...]] = {
    "default": (
        SpecScenario("tall_default_chunk", 20_000, 8, 500),
        SpecScenario("wide_merged", 5_000, 30, 2_000, header_rows=3, n_merges=200),
    ),
    "huge": (
        SpecScenario("huge_tall", 200_000, 12, 50_000),
        SpecScenario(
            "huge_many_chunks", 100_000, 6, 1_000, header_rows=2, n_merges=2_000
        ),
    ),
}


def write_source(path_xlsx: Path, scenario: SpecScenario) -> None:
    wb = xlsxwriter.Workbook(path_xlsx.as_posix(), {"constant_memory": True})
    ws = wb.add_worksheet("bench")
    for n_row in range(scenario.header_rows):
        ws.write_row(n_row, 0, [f"c{_col}_h{n_row}" for _col in range(scenario.n_cols)])

    n_step = max(2, scenario.n_rows // scenario.n_merges) if scenario.n_merges else 0
    for n_idx in range(scenario.n_rows):
        n_row = scenario.header_rows + n_idx
        l_vals = [
            n_idx * (_col + 1) / 7.0 if _col % 3 else f"g{_col}_{n_idx % 997}"
            for _col in range(scenario.n_cols)
        ]
        ws.write_row(n_row, 0, l_vals)
        # constant_memory flushes rows in order, so the merge goes in with its first row
        if n_step and n_idx % n_step == 0 and n_idx + 1 < scenario.n_rows:
            ws.merge_range(n_row, scenario.n_cols, n_row + 1, scenario.n_cols, "m")
    wb.close()


def check_result(result: SpecSplitResult, scenario: SpecScenario) -> None:
    n_data = sum(_chunk.data_rows for _chunk in result.chunks)
    if n_data != scenario.n_rows:
        raise RuntimeError(f"{scenario.name}: wrote {n_data} data rows, expected {scenario.n_rows}")

    # full readback only on the last chunk; it is the one that holds the remainder
    chunk = result.chunks[-1]
    wb = load_workbook(chunk.file_path, read_only=True)
    try:
        n_rows_read = wb.worksheets[0].max_row
    finally:
        wb.close()
    if n_rows_read != chunk.total_rows:
        raise RuntimeError(
            f"{chunk.file_path.name}: {n_rows_read} rows on disk, expected {chunk.total_rows}"
        )


def run_scenario(
    scenario: SpecScenario, *, repeat: int, warmup: int, path_dir_tmp: Path
) -> SpecTimings:
    path_src = path_dir_tmp / f"{scenario.name}.xlsx"
    write_source(path_src, scenario)
    timings = SpecTimings(scenario, source_bytes=path_src.stat().st_size)

    for n_run in range(warmup + repeat):
        path_dir_out = path_dir_tmp / f"{scenario.name}_{n_run}"
        n_t0 = perf_counter()
        result = split_workbook(
            path_src,
            scenario.chunk_size,
            scenario.header_rows,
            options=SpecSplitOptions(dir_out=path_dir_out),
        )
        n_elapsed = perf_counter() - n_t0
        check_result(result, scenario)
        if n_run >= warmup:
            timings.l_seconds.append(n_elapsed)
        timings.n_files = len(result.chunks)

    logger.info(
        f"{scenario.name}: median {timings.summary()['median']:.3f}s "
        f"over {repeat} run(s), {timings.n_files} file(s)"
    )
    return timings


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--repeat", type=int, default=3)
    parser.add_argument("--warmup", type=int, default=1)
    parser.add_argument("--profile", choices=sorted(DICT_PROFILES), default="default")
    parser.add_argument(
        "--out-dir", type=Path, default=PROJECT_ROOT / "benchmarks" / "results"
    )
    args = parser.parse_args()
    if args.repeat < 1 or args.warmup < 0:
        parser.error("--repeat must be >= 1 and --warmup >= 0")

    with tempfile.TemporaryDirectory(prefix="sheetsplit_bench_") as c_dir_tmp:
        l_timings = [
            run_scenario(
                _scenario,
                repeat=args.repeat,
                warmup=args.warmup,
                path_dir_tmp=Path(c_dir_tmp),
            )
            for _scenario in DICT_PROFILES[args.profile]
        ]

    ts = datetime.now(timezone.utc)
    payload = {
        "timestamp_utc": ts.isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "versions": {
            _dist: metadata.version(_dist)
            for _dist in ("polars", "openpyxl", "xlsxwriter")
        },
        "profile": args.profile,
        "scenarios": [
            {
                **asdict(_t.scenario),
                "n_files": _t.n_files,
                "source_bytes": _t.source_bytes,
                "seconds": _t.l_seconds,
                **_t.summary(),
            }
            for _t in l_timings
        ],
    }

    args.out_dir.mkdir(parents=True, exist_ok=True)
    path_json = args.out_dir / f"split_{ts:%Y%m%dT%H%M%SZ}.json"
    path_json.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    logger.success(f"Wrote {path_json}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
