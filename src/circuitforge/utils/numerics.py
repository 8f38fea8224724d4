"""Scalar rounding helpers used when deriving waypoint attributes."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, rounding ties up.

    Python's built-in ``round`` uses banker's rounding, which would make a
    width of ``12.5`` round down. Waypoint attributes always round ties up.

    Args:
        value: Value to round.

    Returns:
        Nearest integer, ties rounded up.
    """
    return int(math.floor(value + 0.5))


def round_to_step(value: float, step: float) -> float:
    """Round a value to the nearest multiple of ``step`` (ties up).

    Args:
        value: Value to round.
        step: Positive rounding increment.

    Returns:
        Rounded value.
    """
    return round_half_up(value / step) * step


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp ``value`` into the closed interval ``[lower, upper]``."""
    return max(lower, min(upper, value))
