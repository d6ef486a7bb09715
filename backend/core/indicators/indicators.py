"""Technical indicators for signal generation.

Pure Decimal arithmetic over chronological (oldest first) price series.
"""

from decimal import Decimal
from typing import Sequence

from core.errors import InsufficientDataError
from core.models.signal import PriceLevels


def highest(values: Sequence[Decimal], period: int) -> Decimal:
    """Maximum of the most recent ``period`` values (fewer if shorter)."""
    if not values:
        raise InsufficientDataError("highest", 1, 0)
    return max(values[-period:])


def lowest(values: Sequence[Decimal], period: int) -> Decimal:
    """Minimum of the most recent ``period`` values (fewer if shorter)."""
    if not values:
        raise InsufficientDataError("lowest", 1, 0)
    return min(values[-period:])


def swing_levels(
    highs: Sequence[Decimal],
    lows: Sequence[Decimal],
    window: int = 20,
) -> tuple[Decimal, Decimal]:
    """Recent swing high and swing low.

    Uses the last ``window`` candles, or all of them when the history is
    shorter. Only an empty series is rejected.

    Returns:
        Tuple of (swing_high, swing_low)
    """
    if not highs or not lows:
        raise InsufficientDataError("swing levels", 1, 0)
    return highest(highs, window), lowest(lows, window)


def true_range(
    highs: Sequence[Decimal],
    lows: Sequence[Decimal],
    closes: Sequence[Decimal],
) -> list[Decimal]:
    """Per-candle true range.

    The first candle has no previous close; its own high stands in,
    which reduces its true range to high - low.
    """
    result = []
    for i in range(len(highs)):
        prev_close = closes[i - 1] if i > 0 else highs[i]
        hl = highs[i] - lows[i]
        hc = abs(highs[i] - prev_close)
        lc = abs(lows[i] - prev_close)
        result.append(max(hl, hc, lc))
    return result


def atr(
    highs: Sequence[Decimal],
    lows: Sequence[Decimal],
    closes: Sequence[Decimal],
    period: int = 10,
) -> Decimal:
    """Arithmetic mean of the last ``period`` true ranges."""
    if len(highs) < period:
        raise InsufficientDataError("ATR", period, len(highs))

    tr = true_range(highs, lows, closes)
    return sum(tr[-period:], Decimal("0")) / period


def pivot_levels(
    swing_high: Decimal,
    swing_low: Decimal,
    last_close: Decimal,
) -> PriceLevels:
    """Classic pivot point with two support and resistance bands.

    A flat range (swing_high == swing_low == last_close) collapses every
    band onto the pivot.
    """
    pivot = (swing_high + swing_low + last_close) / 3
    swing_range = swing_high - swing_low
    return PriceLevels(
        swing_high=swing_high,
        swing_low=swing_low,
        pivot=pivot,
        r1=2 * pivot - swing_low,
        s1=2 * pivot - swing_high,
        r2=pivot + swing_range,
        s2=pivot - swing_range,
    )
