import re

from ..spec import SpecMergeRange

_RE_CELL_REF = re.compile(r"^\$?([A-Za-z]+)\$?([0-9]+)$")


def convert_column_label_to_index(label: str) -> int:
    """
    Decode a bijective base-26 column label into a zero-based index.

    Examples:
        >>> convert_column_label_to_index("A")
        0
        >>> convert_column_label_to_index("AA")
        26

    Raises:
        ValueError: If ``label`` is empty or holds anything but ASCII letters.
    """
    if not label or not label.isascii() or not label.isalpha():
        raise ValueError(f"Invalid column label: {label!r}")
    n_value = 0
    for _chr in label.upper():
        n_value = n_value * 26 + (ord(_chr) - ord("A") + 1)
    return n_value - 1


def convert_column_index_to_label(index: int) -> str:
    """
    Encode a zero-based column index as a bijective base-26 label.

    Examples:
        >>> convert_column_index_to_label(25)
        'Z'
        >>> convert_column_index_to_label(52)
        'BA'
    """
    if index < 0:
        raise ValueError(f"Column index must be >= 0, got {index}.")
    l_chrs: list[str] = []
    n_rest = index + 1
    while n_rest > 0:
        n_rest, n_digit = divmod(n_rest - 1, 26)
        l_chrs.append(chr(ord("A") + n_digit))
    return "".join(reversed(l_chrs))


def parse_cell_ref(ref: str) -> tuple[int, int] | None:
    """Decode ``"B3"`` (or ``"$B$3"``) into zero-based ``(row, col)``; ``None`` if invalid."""
    m = _RE_CELL_REF.fullmatch(ref.strip())
    if m is None:
        return None
    n_row = int(m.group(2)) - 1
    if n_row < 0:
        return None
    return n_row, convert_column_label_to_index(m.group(1))


def parse_range_ref(ref: str) -> SpecMergeRange | None:
    """
    Decode a range reference such as ``"B2:C4"`` into a normalized merge range.

    A single endpoint (``"B2"``) describes a one-cell range. Any undecodable
    endpoint discards the whole range.
    """
    l_parts = ref.split(":")
    c_start = l_parts[0]
    c_end = l_parts[1] if len(l_parts) > 1 else c_start

    tup_start = parse_cell_ref(c_start)
    tup_end = parse_cell_ref(c_end)
    if tup_start is None or tup_end is None:
        return None
    return SpecMergeRange.from_corners(tup_start, tup_end)


def format_cell_ref(row: int, col: int) -> str:
    return f"{convert_column_index_to_label(col)}{row + 1}"
