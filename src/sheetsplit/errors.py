"""Error taxonomy raised by :func:`sheetsplit.split_workbook`.

Every error is terminal for the current split call. Context fields (``path``,
``sheet_name``, ``entry``) are kept on the instance so callers can render their
own messages; ``str(err)`` already reads as user-facing text.
"""

from __future__ import annotations

import os
from pathlib import Path


class SheetSplitError(Exception):
    def __init__(
        self,
        message: str,
        *,
        path: os.PathLike[str] | str | None = None,
        sheet_name: str | None = None,
        entry: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None
        self.sheet_name = sheet_name
        self.entry = entry

    def __str__(self) -> str:
        l_context: list[str] = []
        if self.path is not None:
            l_context.append(f"file={self.path}")
        if self.sheet_name is not None:
            l_context.append(f"sheet={self.sheet_name!r}")
        if self.entry is not None:
            l_context.append(f"entry={self.entry!r}")
        if not l_context:
            return self.message
        return f"{self.message} ({', '.join(l_context)})"


################################################################################
# #region Parameters
class InvalidParameterError(SheetSplitError, ValueError):
    """Zero, negative, non-integer, or inverted chunk_size/header_rows."""


class RowCountBelowHeaderError(SheetSplitError, ValueError):
    """The sheet has fewer rows than the requested header rows."""


# #endregion
################################################################################
# #region Source
class SourceOpenError(SheetSplitError):
    """The source file cannot be opened or parsed as a workbook."""


class NoSheetError(SheetSplitError):
    """The workbook contains no sheet."""


class SheetReadError(SheetSplitError):
    """The first sheet's cell grid cannot be materialized."""


# #endregion
################################################################################
# #region Container
class ContainerEntryMissingError(SheetSplitError):
    """A required part is absent from the zip container."""


class MalformedContainerError(SheetSplitError):
    """A container part is not parseable XML, or the archive itself is broken."""


class RelationshipNotFoundError(SheetSplitError):
    """The sheet -> relationship id -> part path lookup has no match."""


# #endregion
################################################################################
# #region Output
class WriteError(SheetSplitError):
    """An output chunk could not be written or saved."""


# #endregion
################################################################################
