import math


def parse_float(value: object) -> float:
    """Parse a number typed into a form field. Anything unparseable becomes NaN."""
    if isinstance(value, str):
        value = value.strip()
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def parse_int(value: object) -> int | float:
    """
    Parse an integer typed into a form field.

    Fractional input is truncated ("12.7" -> 12). Unparseable or non-finite
    input becomes NaN, so the result is either an int or NaN.
    """
    number = parse_float(value)
    if not math.isfinite(number):
        return math.nan
    return int(number)


def is_positive_int(value: object) -> bool:
    """True for ints (or integral floats) greater than zero."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value > 0
    if isinstance(value, float):
        return math.isfinite(value) and value.is_integer() and value > 0
    return False
