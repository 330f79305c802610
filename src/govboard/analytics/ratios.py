"""Zero-guarded ratio helpers."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def percentage(part: float, whole: float) -> int:
    """part / whole as a rounded percentage; 0 when whole is not positive."""
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)


def round2(value: float) -> float:
    """Round to two decimals."""
    return round(value, 2)


def density(part: float, whole: float, per: float = 10) -> float:
    """part per ``per`` units of whole, rounded to two decimals; 0 when whole is 0."""
    if whole <= 0:
        return 0.0
    return round2(part / whole * per)
