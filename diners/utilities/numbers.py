"""Number helpers shared by the rule engine, the grid and the exporters.

Cell values reach the engine as ints, floats, numeric strings (possibly
with thousands separators) or blanks. ``parse_number`` is the lenient
reader used for arithmetic; ``try_parse_number`` is the strict one used
when user input must be validated.
"""
import math
from typing import Any, Optional, Union

Number = Union[int, float]

__all__ = ["parse_number", "try_parse_number", "round_half_up", "format_number"]


def _coerce(value: float) -> Number:
    return int(value) if value.is_integer() else value


def try_parse_number(value: Any) -> Optional[Number]:
    """Return the numeric value of ``value`` or None if it is blank or not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) or math.isinf(value) else _coerce(value)
    text = str(value).strip().replace(",", "")
    if not text:
        return None
    try:
        parsed = float(text)
    except ValueError:
        return None
    if math.isnan(parsed) or math.isinf(parsed):
        return None
    return _coerce(parsed)


def parse_number(value: Any) -> Number:
    """Lenient parse: blank, None and garbage all read as 0."""
    parsed = try_parse_number(value)
    return 0 if parsed is None else parsed


def round_half_up(value: float) -> int:
    # 2.5 -> 3, -2.5 -> -2
    return int(math.floor(value + 0.5))


def format_number(value: Any) -> str:
    if value is None or value == "":
        return ""
    n = parse_number(value)
    if isinstance(n, float):
        return f"{n:,.2f}".rstrip("0").rstrip(".")
    return f"{n:,}"
