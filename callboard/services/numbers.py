"""
Numeric helpers shared by the report builders.

Report values are rounded half up (2.5 -> 3) to stay identical to the values
the dashboard has always shown. Python's round() uses banker's rounding
(2.5 -> 2) and must not be used for report output.
"""

import math
from decimal import Decimal
from typing import Any, Union


Number = Union[int, float]


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round a value half up to ``ndigits`` decimal places.

    Args:
        value: Value to round.
        ndigits: Number of decimal places to keep.

    Returns:
        The rounded value as a float.

    Example:
        >>> round_half_up(2.5)
        3.0
        >>> round_half_up(7.125, 2)
        7.13
    """
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def to_number(value: Any) -> Number:
    """
    Coerce a driver value (Decimal, int, float, None) to a plain number.

    Aggregates such as SUM over bigint come back as Decimal; they must reach the
    JSON layer as ordinary numbers.

    Returns:
        int for integral values, float otherwise, 0 for None.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    return float(value)
