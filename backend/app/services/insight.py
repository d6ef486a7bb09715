"""Template-based prose insight for a trading signal.

Used when no language model is available (the default). The wording is
fixed; only the numbers and the bullish/bearish branches change.
"""

from decimal import Decimal

from pydantic import BaseModel

from core.models import ConfidenceTier, TradingSignal, Zone
from core.strategy import signal_risk_reward

DEFAULT_CONFIDENCE = 95


class Insight(BaseModel):
    """Prose analysis of a signal."""

    analysis: str
    confidence: int = DEFAULT_CONFIDENCE


def _money(value: Decimal) -> str:
    return f"${value:,.2f}"


def _band(zone: Zone) -> str:
    return f"{_money(zone.low)}-{_money(zone.high)}"


_CONFIDENCE_PHRASES = {
    ConfidenceTier.VERY_HIGH: "very high",
    ConfidenceTier.HIGH: "high",
    ConfidenceTier.MEDIUM: "moderate",
    ConfidenceTier.LOW: "low",
}


def _risk_reward_phrase(ratio: Decimal) -> str:
    if ratio > 2:
        return "offering an exceptional risk-reward profile"
    if ratio > Decimal("1.5"):
        return "providing a solid risk-reward opportunity"
    return "presenting a marginal risk-reward setup that requires tight risk management"


def generate_fallback_insight(
    signal: TradingSignal,
    risk_reward: Decimal | None = None,
) -> Insight:
    """Build the template insight paragraph for ``signal``.

    ``risk_reward`` is computed from the signal when not supplied.
    """
    if risk_reward is None:
        risk_reward = signal_risk_reward(signal)

    bullish = signal.is_bullish
    sentiment = "bullish" if bullish else "bearish"
    count = signal.confluence_count

    if signal.volume.buy_volume > signal.volume.sell_volume:
        volume_phrase = "significant institutional accumulation"
    else:
        volume_phrase = "distribution by large market participants"

    if bullish:
        zone_phrase = (
            f"Price is approaching a strong demand zone between "
            f"{_band(signal.zones.demand_zone)}, where institutional buyers "
            f"have historically entered the market"
        )
        exposure = "long"
    else:
        zone_phrase = (
            f"Price is approaching a significant supply zone between "
            f"{_band(signal.zones.supply_zone)}, where institutional sellers "
            f"have historically entered the market"
        )
        exposure = "short"

    fvg_phrase = (
        f"The Fair Value Gap at {_band(signal.zones.fvg_zone)} represents an "
        f"unfilled liquidity zone that price is likely to revisit, creating a "
        f"high-probability entry opportunity"
    )
    conclusion = (
        f"This {signal.symbol} setup presents a high-conviction opportunity for "
        f"institutional-grade {exposure} exposure with defined risk parameters. "
        f"Monitor price action as it approaches the entry zone for confirmation."
    )

    analysis = (
        f"Strong {sentiment} setup presents itself in {signal.symbol} at "
        f"{_money(signal.price)}. The market structure shows "
        f"{_CONFIDENCE_PHRASES[signal.confidence_tier]} confidence with {count} confluence factors "
        f"aligning. {zone_phrase}. {fvg_phrase}. Volume analysis reveals "
        f"{volume_phrase}, confirming the directional bias. "
        f"{_risk_reward_phrase(risk_reward).capitalize()}. {conclusion}"
    )
    return Insight(analysis=analysis)
