"""
Shared numeric helpers for the scoring and cost services.
"""
from __future__ import annotations

import math
from typing import Any


def clamp(value: float, low: float, high: float) -> float:
    """
    Clamp a float value to the range [low, high].

    Args:
        value: Input float value
        low: Lower bound
        high: Upper bound

    Returns:
        Value clamped to [low, high]
    """
    return max(low, min(high, value))


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round with ties going up, e.g. 2.5 -> 3 and 8.25 -> 8.3.

    Python's round() rounds ties to even, which would move published
    scores and costs by one unit on exact halves.
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round_to_int(value: float) -> int:
    """Round half up to an integer."""
    return int(math.floor(value + 0.5))


def round_to_hundred(value: float) -> int:
    """Round half up to the nearest 100."""
    return round_to_int(value / 100) * 100


def is_number(value: Any) -> bool:
    """True for finite int/float values that are not booleans."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
