"""Supertrend-like trend classification."""

from decimal import Decimal

from core.models.config import DEFAULT_CONFIG, SignalEngineConfig
from core.models.signal import TrendVerdict


def classify_trend(
    price: Decimal,
    pivot: Decimal,
    config: SignalEngineConfig = DEFAULT_CONFIG,
) -> TrendVerdict:
    """Classify the trend from current price vs. pivot.

    Memoryless: there is no prior trend state and no flip hysteresis. Above
    the pivot the band sits below price (bullish); at or below the pivot it
    sits above price (bearish).
    """
    if price > pivot:
        band = price * config.trend_band_below_mult
    else:
        band = price * config.trend_band_above_mult
    return TrendVerdict(is_bullish=price > band, band=band)
