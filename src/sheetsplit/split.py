import os
from pathlib import Path

from loguru import logger

from .conf import DEFAULT_SPLIT_OPTIONS
from .errors import WriteError
from .merge_extract import extract_merge_ranges
from .reader import detect_workbook_format, read_first_sheet
from .service import (
    build_output_path,
    plan_chunks,
    remap_chunk_merges,
    validate_split_parameters,
)
from .spec import SpecSplitChunk, SpecSplitOptions, SpecSplitResult
from .writer import write_chunk


def split_workbook(
    path: os.PathLike[str] | str,
    chunk_size: int,
    header_rows: int,
    *,
    options: SpecSplitOptions | None = None,
) -> SpecSplitResult:
    """
    Split the first sheet of a workbook into several XLSX files.

    Every output file repeats the first ``header_rows`` rows, followed by a
    contiguous slice of at most ``chunk_size - header_rows`` data rows. Merged
    ranges lying wholly inside one output file are re-applied there; ranges
    crossing a file boundary are dropped.

    Files are named ``<stem>_part<N>.xlsx`` (N from 1) next to the source
    unless ``options`` says otherwise. Existing files with the same names are
    overwritten.

    Args:
        path: Source workbook, zip-packaged (.xlsx family) or legacy (.xls).
        chunk_size: Maximum rows per output file, header included.
        header_rows: Number of leading rows treated as header.
        options: Output directory, naming and format knobs.

    Returns:
        SpecSplitResult: Source row counts and one entry per written file.

    Raises:
        InvalidParameterError: ``chunk_size``/``header_rows`` are not positive
            integers or ``chunk_size <= header_rows``.
        RowCountBelowHeaderError: The sheet has fewer rows than ``header_rows``.
        SourceOpenError, NoSheetError, SheetReadError: The source cannot be read.
        ContainerEntryMissingError, MalformedContainerError,
        RelationshipNotFoundError: Merge metadata cannot be located.
        WriteError: An output file cannot be written.
    """
    validate_split_parameters(chunk_size=chunk_size, header_rows=header_rows)
    options = DEFAULT_SPLIT_OPTIONS if options is None else options
    path = Path(path)

    fmt = detect_workbook_format(path)
    grid = read_first_sheet(path, fmt=fmt)
    l_plans = plan_chunks(
        total_rows=grid.height, header_rows=header_rows, chunk_size=chunk_size
    )
    l_merges = extract_merge_ranges(path, grid.sheet_name, fmt=fmt)

    if options.dir_out is not None:
        try:
            Path(options.dir_out).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WriteError(
                f"Cannot create the output directory: {exc.strerror or exc}",
                path=options.dir_out,
            ) from exc

    df_header = grid.slice_rows(0, header_rows)
    df_data = grid.slice_rows(header_rows)

    l_chunks: list[SpecSplitChunk] = []
    for _plan in l_plans:
        l_chunk_merges_ = remap_chunk_merges(
            l_merges,
            header_rows=header_rows,
            plan=_plan,
            header_frame=df_header,
            data_frame=df_data,
        )
        path_out_ = build_output_path(
            path,
            _plan.index,
            dir_out=options.dir_out,
            suffix_part=options.suffix_part,
        )
        write_chunk(
            path_out_,
            df_header,
            df_data.slice(offset=_plan.data_start, length=_plan.data_rows),
            l_chunk_merges_,
            sheet_name=options.sheet_name_out,
            fmt_merge=options.fmt_merge,
        )
        logger.debug(
            f"Wrote part {_plan.index}: data rows [{_plan.data_start}, {_plan.data_end}), "
            f"{len(l_chunk_merges_)}/{len(l_merges)} merge(s) kept -> {path_out_}"
        )
        l_chunks.append(
            SpecSplitChunk(
                file_path=path_out_,
                total_rows=header_rows + _plan.data_rows,
                data_rows=_plan.data_rows,
                index=_plan.index,
                merges=len(l_chunk_merges_),
            )
        )

    result = SpecSplitResult(
        total_rows=grid.height, header_rows=header_rows, chunks=tuple(l_chunks)
    )
    logger.info(
        f"Split {path.name}: {result.total_rows} rows into {len(result.chunks)} file(s)"
    )
    return result
