"""Technical indicators (pure math, no I/O)."""

from core.indicators.indicators import (
    atr,
    highest,
    lowest,
    pivot_levels,
    swing_levels,
    true_range,
)

__all__ = [
    "atr",
    "highest",
    "lowest",
    "pivot_levels",
    "swing_levels",
    "true_range",
]
