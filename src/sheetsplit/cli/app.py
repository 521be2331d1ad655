"""Command-line entry point: ``sheetsplit FILE [-n ROWS] [-H HEADER_ROWS] ...``."""

import argparse
import sys
from collections.abc import Sequence

from loguru import logger
from rich_argparse import ArgumentDefaultsRichHelpFormatter, RawTextRichHelpFormatter

from ..conf import N_CHUNK_SIZE_DEFAULT, N_HEADER_ROWS_DEFAULT, TUP_EXTS_OLE2, TUP_EXTS_ZIP
from ..errors import SheetSplitError
from ..spec import SpecSplitOptions
from ..split import split_workbook
from .actions import IntRangeAction, PathAction
from .console import CliHeadings

_C_LOG_FORMAT = "<level>{level: <8}</level> | {message}"


class SmartFormatter(ArgumentDefaultsRichHelpFormatter, RawTextRichHelpFormatter):
    """
    Keep manual newlines/indentation AND show (default: ...) in help.
    """


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sheetsplit",
        description=(
            "Split the first sheet of an Excel workbook into several .xlsx files.\n"
            "Each file repeats the header rows; merged blocks are kept when they\n"
            "fit inside one file."
        ),
        formatter_class=SmartFormatter,
    )
    parser.add_argument(
        "file_in",
        metavar="FILE",
        action=PathAction.file(exts=TUP_EXTS_ZIP + TUP_EXTS_OLE2),
        help="Source workbook (.xlsx, .xlsm, .xltx, .xltm or .xls).",
    )

    group_split = parser.add_argument_group("splitting")
    group_split.add_argument(
        "-n",
        "--rows",
        dest="chunk_size",
        metavar="ROWS",
        action=IntRangeAction.positive(),
        default=N_CHUNK_SIZE_DEFAULT,
        help="Maximum rows per output file, header rows included.",
    )
    group_split.add_argument(
        "-H",
        "--header-rows",
        dest="header_rows",
        metavar="HEADER_ROWS",
        action=IntRangeAction.positive(),
        default=N_HEADER_ROWS_DEFAULT,
        help="Leading rows repeated at the top of every output file.",
    )

    group_out = parser.add_argument_group("output")
    group_out.add_argument(
        "--dir-out",
        dest="dir_out",
        metavar="DIR",
        action=PathAction.dir(if_must_exist=False),
        default=None,
        help="Directory for the output files.\nDefaults to the source file's directory.",
    )
    group_out.add_argument(
        "--sheet-name",
        dest="sheet_name_out",
        metavar="NAME",
        default=None,
        help="Worksheet name in the output files (default: Sheet1).",
    )

    group_log = parser.add_mutually_exclusive_group()
    group_log.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug details."
    )
    group_log.add_argument(
        "-q", "--quiet", action="store_true", help="Only log warnings and errors."
    )
    return parser


def _configure_logging(*, verbose: bool, quiet: bool) -> None:
    c_level = "DEBUG" if verbose else "WARNING" if quiet else "INFO"
    logger.remove()
    logger.add(sys.stderr, level=c_level, format=_C_LOG_FORMAT)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(verbose=args.verbose, quiet=args.quiet)

    options = SpecSplitOptions(
        dir_out=args.dir_out, sheet_name_out=args.sheet_name_out
    )
    try:
        result = split_workbook(
            args.file_in, args.chunk_size, args.header_rows, options=options
        )
    except SheetSplitError as exc:
        logger.error(str(exc))
        return 1

    if not args.quiet:
        CliHeadings().render_split_result(result)
    logger.success(result.format())
    return 0


if __name__ == "__main__":
    sys.exit(main())
