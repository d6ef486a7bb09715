"""Smart signal strategy: levels, trend, zones, volume, confluence, risk."""

from core.strategy.smart_signal.confluence import (
    MAX_FACTORS,
    confidence_tier,
    score_confluence,
)
from core.strategy.smart_signal.generator import SmartSignalEngine, generate_signal
from core.strategy.smart_signal.risk import risk_reward_ratio, signal_risk_reward
from core.strategy.smart_signal.trend import classify_trend
from core.strategy.smart_signal.volume import analyze_volume
from core.strategy.smart_signal.zones import calculate_zones, validate_zone

__all__ = [
    "MAX_FACTORS",
    "SmartSignalEngine",
    "analyze_volume",
    "calculate_zones",
    "classify_trend",
    "confidence_tier",
    "generate_signal",
    "risk_reward_ratio",
    "score_confluence",
    "signal_risk_reward",
    "validate_zone",
]
