"""Confluence scoring and confidence tiers."""

from decimal import Decimal

from core.models.config import DEFAULT_CONFIG, SignalEngineConfig
from core.models.signal import (
    ConfidenceTier,
    ConfluenceResult,
    PriceLevels,
    SignalZones,
    TrendVerdict,
    VolumeAnalysis,
)

TREND_CONFIRMED = "Supertrend Confirmed (Bullish Structure)"
ABOVE_SWING_LOW = "Price Above Swing Low (Support Holding)"
BELOW_SWING_HIGH = "Price Below Swing High (Resistance Test)"
BUYER_DOMINANCE = "Buyer Dominance Detected"
PATTERN_PREFIX = "Pattern: "
FVG_PRESENT = "Fair Value Gap (FVG) Present"
DEMAND_ACTIVE = "Strong Demand Zone Active"
SUPPLY_AHEAD = "Major Supply Zone Ahead"

MAX_FACTORS = 8


def confidence_tier(
    count: int,
    config: SignalEngineConfig = DEFAULT_CONFIG,
) -> ConfidenceTier:
    """Map a confluence count to its tier (0-1 Low, 2-3 Medium, 4-5 High, 6+ Very High)."""
    if count >= config.very_high_min_factors:
        return ConfidenceTier.VERY_HIGH
    if count >= config.high_min_factors:
        return ConfidenceTier.HIGH
    if count >= config.medium_min_factors:
        return ConfidenceTier.MEDIUM
    return ConfidenceTier.LOW


def score_confluence(
    price: Decimal,
    trend: TrendVerdict,
    levels: PriceLevels,
    volume: VolumeAnalysis,
    zones: SignalZones,
    pattern: str | None,
    config: SignalEngineConfig = DEFAULT_CONFIG,
) -> ConfluenceResult:
    """Evaluate the eight confluence checks.

    Each passing check contributes its label; order follows the checks
    below. A zone counts when it is a non-empty band.
    """
    checks = [
        (trend.is_bullish, TREND_CONFIRMED),
        (price > levels.swing_low, ABOVE_SWING_LOW),
        (price < levels.swing_high, BELOW_SWING_HIGH),
        (volume.buy_volume > volume.sell_volume, BUYER_DOMINANCE),
        (bool(pattern), f"{PATTERN_PREFIX}{pattern}"),
        (zones.fvg_zone.width > 0, FVG_PRESENT),
        (zones.demand_zone.width > 0, DEMAND_ACTIVE),
        (zones.supply_zone.width > 0, SUPPLY_AHEAD),
    ]
    factors = tuple(label for passed, label in checks if passed)
    return ConfluenceResult(
        factors=factors,
        tier=confidence_tier(len(factors), config),
    )
