import math
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any

from .spec import CellError, ExcelDateSerial

_DT_EPOCH_1900 = datetime(1899, 12, 30)
_DT_EPOCH_1904 = datetime(1904, 1, 1)
_N_MS_PER_DAY = 86_400_000


def convert_float_to_str(x: float) -> str:
    """
    Render a float as display text.

    Integral values print without decimals; other values print the shortest
    round-trip digits positionally, with trailing zeros stripped down to one
    fractional digit. NaN/Inf print as ``nan``/``inf``/``-inf``.

    Examples:
        >>> convert_float_to_str(2.0)
        '2'
        >>> convert_float_to_str(1.50)
        '1.5'
        >>> convert_float_to_str(1e-05)
        '0.00001'
    """
    if not math.isfinite(x):
        return repr(x)
    if x.is_integer():
        return f"{x:.0f}"

    # repr() is the shortest round-trip form; Decimal keeps it out of exponent form.
    c_repr = format(Decimal(repr(x)), "f")
    if "." in c_repr:
        c_repr = c_repr.rstrip("0")
        if c_repr.endswith("."):
            c_repr += "0"
    return c_repr


def convert_serial_to_datetime(serial: float, datemode: int = 0) -> datetime | None:
    """
    Convert an Excel serial day number to calendar fields.

    Returns ``None`` when the serial has no calendar equivalent (negative or
    out of ``datetime`` range).
    """
    if not math.isfinite(serial) or serial < 0:
        return None
    if datemode == 1:
        dt_epoch = _DT_EPOCH_1904
        n_days = serial
    else:
        # 1900 calendar: serials before the phantom 1900-02-29 are one day late.
        dt_epoch = _DT_EPOCH_1900
        n_days = serial if serial >= 60 else serial + 1
    try:
        return dt_epoch + timedelta(milliseconds=round(n_days * _N_MS_PER_DAY))
    except OverflowError:
        return None


def _format_datetime(dt: datetime) -> str:
    return dt.replace(tzinfo=None).isoformat(sep=" ", timespec="seconds")


def _format_serial(serial: float, datemode: int) -> str:
    dt = convert_serial_to_datetime(serial, datemode)
    if dt is None:
        return convert_float_to_str(float(serial))
    return _format_datetime(dt)


def normalize_cell_value(value: Any) -> str:
    """
    Convert one typed cell value into its canonical display text.

    Never raises: unknown objects fall back to ``str()``.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return convert_float_to_str(value)
    if isinstance(value, datetime):
        return _format_datetime(value)
    if isinstance(value, date):
        return _format_datetime(datetime.combine(value, time()))
    if isinstance(value, time):
        n_serial = (
            value.hour * 3_600 + value.minute * 60 + value.second
        ) / 86_400 + value.microsecond / (_N_MS_PER_DAY * 1_000)
        return _format_serial(n_serial, 0)
    if isinstance(value, timedelta):
        return _format_serial(value.total_seconds() / 86_400, 0)
    if isinstance(value, ExcelDateSerial):
        return _format_serial(value.serial, value.datemode)
    if isinstance(value, CellError):
        return f"#ERROR({value.code})"
    return str(value)


def normalize_row(values: Any) -> list[str]:
    """Normalize a row of typed values and drop its trailing empty cells."""
    l_row = [normalize_cell_value(_val) for _val in values]
    while l_row and not l_row[-1]:
        l_row.pop()
    return l_row
