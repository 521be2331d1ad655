"""Argparse actions validating the command-line inputs of ``sheetsplit``.

Both actions normalize at parse time and also normalize a non-``None``
default, since argparse never routes defaults through the action.
"""

import argparse
import os
from collections.abc import Iterable
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Any, Literal


def _take_single(action: argparse.Action, values: Any, c_opt: str) -> Any:
    if isinstance(values, (list, tuple)):
        if len(values) != 1:
            raise argparse.ArgumentError(
                action, f"[{c_opt}]: Expected one value, got {len(values)}."
            )
        return values[0]
    if values is None:
        raise argparse.ArgumentError(action, f"[{c_opt}]: Missing value.")
    return values


################################################################################
# #region Paths


@dataclass(frozen=True, slots=True)
class SpecPathRule:
    """
    Attributes:
        kind: ``"file"`` or ``"dir"``.
        exts: Accepted file extensions, lowercase without the dot; empty
            accepts any.
        if_must_exist: Reject paths that do not exist yet.
    """

    kind: Literal["file", "dir"] = "file"
    exts: tuple[str, ...] = ()
    if_must_exist: bool = True


class PathAction(argparse.Action):
    """
    Resolve a path argument to an absolute :class:`pathlib.Path`.

    Use the factories::

        parser.add_argument("file_in", action=PathAction.file(exts=(".xlsx",)))
        parser.add_argument("--dir-out", action=PathAction.dir(if_must_exist=False))
    """

    def __init__(
        self,
        option_strings: list[str],
        dest: str,
        *,
        rule: SpecPathRule,
        **kwargs: Any,
    ) -> None:
        super().__init__(option_strings, dest, **kwargs)
        self.rule = rule
        if self.default is not None and self.default is not argparse.SUPPRESS:
            self.default = self._resolve(self.default, c_opt=f"{dest} (default)")

    @classmethod
    def file(cls, *, exts: Iterable[str] = (), if_must_exist: bool = True):
        tup_exts = tuple(_ext.lower().lstrip(".") for _ext in exts)
        return partial(
            cls, rule=SpecPathRule("file", tup_exts, if_must_exist=if_must_exist)
        )

    @classmethod
    def dir(cls, *, if_must_exist: bool = True):
        return partial(cls, rule=SpecPathRule("dir", if_must_exist=if_must_exist))

    def _fail(self, c_opt: str, message: str) -> argparse.ArgumentError:
        return argparse.ArgumentError(self, f"[{c_opt}]: {message}")

    def _resolve(self, value: Any, *, c_opt: str) -> Path:
        if not isinstance(value, (str, os.PathLike)):
            raise self._fail(c_opt, f"Expected a path, got {type(value).__name__}.")
        c_raw = os.fsdecode(value).strip()
        if not c_raw:
            raise self._fail(c_opt, "Path cannot be empty.")
        try:
            path = Path(c_raw).expanduser().resolve()
        except (OSError, RuntimeError) as exc:
            raise self._fail(c_opt, f"Cannot resolve {c_raw!r}: {exc}")

        if self.rule.kind == "dir":
            if path.exists() and not path.is_dir():
                raise self._fail(c_opt, f"Not a directory: {path}")
            if self.rule.if_must_exist and not path.exists():
                raise self._fail(c_opt, f"Directory does not exist: {path}")
            return path

        c_ext = path.suffix.lower().lstrip(".")
        if self.rule.exts and c_ext not in self.rule.exts:
            c_allowed = ", ".join(f".{_ext}" for _ext in self.rule.exts)
            raise self._fail(
                c_opt,
                f"Unsupported extension {path.suffix or '(none)'!r}; "
                f"expected one of {c_allowed}.",
            )
        if self.rule.if_must_exist:
            if not path.is_file():
                raise self._fail(c_opt, f"File does not exist: {path}")
            if not os.access(path, os.R_OK):
                raise self._fail(c_opt, f"File is not readable: {path}")
        return path

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Any,
        option_string: str | None = None,
    ) -> None:
        c_opt = option_string or self.dest
        value = _take_single(self, values, c_opt)
        setattr(namespace, self.dest, self._resolve(value, c_opt=c_opt))


# #endregion
################################################################################
# #region Integers


class IntRangeAction(argparse.Action):
    """
    Parse an integer and check it against inclusive bounds.

        parser.add_argument("--rows", action=IntRangeAction.positive(), default=500)
    """

    def __init__(
        self,
        option_strings: list[str],
        dest: str,
        *,
        min_value: int | None = None,
        max_value: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(option_strings, dest, **kwargs)
        if min_value is not None and max_value is not None and min_value > max_value:
            raise ValueError(f"[{dest}]: min_value {min_value} > max_value {max_value}")
        self.min_value = min_value
        self.max_value = max_value
        if self.default is not None and self.default is not argparse.SUPPRESS:
            self.default = self._parse(self.default, c_opt=f"{dest} (default)")

    @classmethod
    def positive(cls, *, max_value: int | None = None):
        return partial(cls, min_value=1, max_value=max_value)

    def _parse(self, value: Any, *, c_opt: str) -> int:
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise argparse.ArgumentError(
                self, f"[{c_opt}]: Expected an integer, got {type(value).__name__}."
            )
        try:
            n_val = int(str(value).strip())
        except ValueError:
            raise argparse.ArgumentError(self, f"[{c_opt}]: Not an integer: {value!r}.")

        if self.min_value is not None and n_val < self.min_value:
            raise argparse.ArgumentError(
                self, f"[{c_opt}]: Must be >= {self.min_value}, got {n_val}."
            )
        if self.max_value is not None and n_val > self.max_value:
            raise argparse.ArgumentError(
                self, f"[{c_opt}]: Must be <= {self.max_value}, got {n_val}."
            )
        return n_val

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Any,
        option_string: str | None = None,
    ) -> None:
        c_opt = option_string or self.dest
        value = _take_single(self, values, c_opt)
        setattr(namespace, self.dest, self._parse(value, c_opt=c_opt))


# #endregion
################################################################################
