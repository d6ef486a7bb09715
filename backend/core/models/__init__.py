"""Engine input/output models and configuration."""

from core.models.config import DEFAULT_CONFIG, SignalEngineConfig
from core.models.market import Candle, MarketSnapshot, OrderBook
from core.models.signal import (
    Action,
    ConfidenceTier,
    ConfluenceResult,
    PriceLevels,
    SignalZones,
    TakeProfit,
    TradingSignal,
    TrendVerdict,
    VolumeAnalysis,
    VolumeProfile,
    Zone,
)

__all__ = [
    "DEFAULT_CONFIG",
    "SignalEngineConfig",
    "Candle",
    "MarketSnapshot",
    "OrderBook",
    "Action",
    "ConfidenceTier",
    "ConfluenceResult",
    "PriceLevels",
    "SignalZones",
    "TakeProfit",
    "TradingSignal",
    "TrendVerdict",
    "VolumeAnalysis",
    "VolumeProfile",
    "Zone",
]
