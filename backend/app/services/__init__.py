"""Business services."""

from app.services.insight import Insight, generate_fallback_insight
from app.services.market_data import (
    MarketDataError,
    MarketDataProvider,
    interval_to_timedelta,
    synthetic_candles,
    synthetic_order_book,
)
from app.services.signal_service import SignalReport, SignalService

__all__ = [
    "Insight",
    "generate_fallback_insight",
    "MarketDataError",
    "MarketDataProvider",
    "interval_to_timedelta",
    "synthetic_candles",
    "synthetic_order_book",
    "SignalReport",
    "SignalService",
]
