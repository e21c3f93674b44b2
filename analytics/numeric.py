"""
Numeric helpers shared by the analytics calculations.
"""

import math
import numbers
from typing import Any, Mapping


def is_number(value: Any) -> bool:
    """True for real numbers (ints, floats, numpy scalars); booleans are not numbers."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def is_list(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def price_change_24h(asset: Mapping[str, Any]) -> float:
    """
    24h price change of an enriched asset.

    Absent, None, NaN and non-numeric values (including numeric strings and
    booleans) count as 0, so every calculation reads the field the same way.

    Args:
        asset: Enriched asset dictionary

    Returns:
        Signed percentage change
    """
    change = asset.get('price_change_percentage_24h')
    if not is_number(change) or math.isnan(change):
        return 0.0
    return change


def round_half_up(value: float, places: int = 2) -> float:
    """
    Round with halves going up (0.125 -> 0.13, -0.125 -> -0.12).

    Matches the dashboard's display rounding rather than round()'s
    round-half-to-even.
    """
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor
