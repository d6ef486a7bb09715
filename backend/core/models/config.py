"""Signal engine configuration.

Every multiplier and window used by the scoring pipeline lives here so the
policy can be swapped without touching the pipeline itself. The defaults
are fixed heuristics, not fitted parameters.
"""

from __future__ import annotations

from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field

ZoneMultipliers = tuple[Decimal, Decimal]


class SignalEngineConfig(BaseModel):
    """Scoring policy parameters."""

    model_config = ConfigDict(frozen=True)

    # Lookback windows (candles)
    swing_window: int = Field(default=20, ge=1)
    atr_period: int = Field(default=10, ge=1)
    volume_window: int = Field(default=10, ge=1)

    # Trend band: price x below_mult when price > pivot, else price x above_mult
    trend_band_below_mult: Decimal = Decimal("0.98")
    trend_band_above_mult: Decimal = Decimal("1.02")

    # Zone multipliers applied to the current price, keyed by trend direction
    demand_zone_bullish: ZoneMultipliers = (Decimal("0.98"), Decimal("0.988"))
    demand_zone_bearish: ZoneMultipliers = (Decimal("1.01"), Decimal("1.018"))
    supply_zone_bullish: ZoneMultipliers = (Decimal("1.015"), Decimal("1.025"))
    supply_zone_bearish: ZoneMultipliers = (Decimal("0.97"), Decimal("0.98"))
    fvg_zone_bullish: ZoneMultipliers = (Decimal("0.975"), Decimal("0.98"))
    fvg_zone_bearish: ZoneMultipliers = (Decimal("1.02"), Decimal("1.025"))

    # Fixed buy/sell split of recent volume (not order-book derived)
    buy_volume_share: Decimal = Decimal("0.55")
    sell_volume_share: Decimal = Decimal("0.45")

    # Trade parameters as fractional offsets from the current price
    entry_offset: Decimal = Decimal("0.01")
    stop_loss_offset: Decimal = Decimal("0.03")
    take_profit_offsets: tuple[Decimal, Decimal, Decimal] = (
        Decimal("0.03"),
        Decimal("0.06"),
        Decimal("0.10"),
    )
    value_area_offset: Decimal = Decimal("0.03")
    liquidity_pool_offset: Decimal = Decimal("0.04")

    # Confluence count -> confidence tier (minimum count for each tier)
    very_high_min_factors: int = 6
    high_min_factors: int = 4
    medium_min_factors: int = 2

    pattern_catalog: tuple[str, ...] = (
        "Horseshoe",
        "Bullish Engulfing Variant",
        "Multi-Reversal",
        "4-Candle Reversal",
    )

    # Multi-timeframe alignment
    timeframes: tuple[str, ...] = ("5M", "15M", "30M", "1H", "4H", "1D")
    mtf_bullish_threshold: float = 0.5  # draw > threshold -> Bullish
    mtf_fvg_threshold: float = 0.7  # draw > threshold -> "FVG Present"
    mtf_ob_threshold: float = 0.7  # draw > threshold -> "OB Detected"


DEFAULT_CONFIG = SignalEngineConfig()
