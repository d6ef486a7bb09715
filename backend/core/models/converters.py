"""Converters between engine models and plain wire/storage representations.

Inbound (exchange payloads):
- Binance kline rows are ``[open_time_ms, open, high, low, close, volume, ...]``
  with prices as strings
- Binance depth ladders are ``[[price, size], ...]`` with strings

Outbound:
- ``signal_to_dict``: JSON-ready dict (floats, ISO timestamps)
- ``signal_to_record``: flat row for the signal store
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Sequence

from core.models.market import Candle, OrderBook
from core.models.signal import Action, TradingSignal, Zone


# =============================================================================
# Timestamp conversion
# =============================================================================

def millis_to_datetime(ms: int | float) -> datetime:
    """Convert Unix epoch milliseconds to UTC datetime."""
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)


# =============================================================================
# Exchange payloads -> engine models
# =============================================================================

def candle_from_row(row: Sequence[Any]) -> Candle:
    """Convert one Binance kline row to a Candle."""
    return Candle(
        timestamp=millis_to_datetime(row[0]),
        open=Decimal(str(row[1])),
        high=Decimal(str(row[2])),
        low=Decimal(str(row[3])),
        close=Decimal(str(row[4])),
        volume=Decimal(str(row[5])),
    )


def order_book_from_depth(data: dict[str, Any]) -> OrderBook:
    """Convert a Binance depth payload to an OrderBook."""
    return OrderBook(
        bids=tuple((Decimal(str(p)), Decimal(str(q))) for p, q in data.get("bids", [])),
        asks=tuple((Decimal(str(p)), Decimal(str(q))) for p, q in data.get("asks", [])),
    )


# =============================================================================
# Signal -> plain dicts
# =============================================================================

def _zone_pair(zone: Zone) -> list[float]:
    return [float(zone.low), float(zone.high)]


def signal_to_dict(signal: TradingSignal) -> dict[str, Any]:
    """Convert a TradingSignal to a JSON-serializable dict.

    Decimals become floats, zones become ``[low, high]`` pairs and the
    timestamp is ISO 8601.
    """
    levels = signal.levels
    return {
        "symbol": signal.symbol,
        "price": float(signal.price),
        "action": signal.action.label,
        "entry": float(signal.entry),
        "stop_loss": float(signal.stop_loss),
        "take_profit": {
            "tp1": float(signal.take_profit.tp1),
            "tp2": float(signal.take_profit.tp2),
            "tp3": float(signal.take_profit.tp3),
        },
        "confidence": signal.confidence_tier.label,
        "confluence_factors": list(signal.confluence_factors),
        "levels": {
            "swing_high": float(levels.swing_high),
            "swing_low": float(levels.swing_low),
            "pivot": float(levels.pivot),
            "support": {"s1": float(levels.s1), "s2": float(levels.s2)},
            "resistance": {"r1": float(levels.r1), "r2": float(levels.r2)},
        },
        "volume": {
            "buy_volume": float(signal.volume.buy_volume),
            "sell_volume": float(signal.volume.sell_volume),
            "imbalance": signal.volume.imbalance_label,
        },
        "zones": {
            "demand_zone": _zone_pair(signal.zones.demand_zone),
            "supply_zone": _zone_pair(signal.zones.supply_zone),
            "fvg_zone": _zone_pair(signal.zones.fvg_zone),
        },
        "volume_profile": {
            "vah": float(signal.volume_profile.vah),
            "val": float(signal.volume_profile.val),
            "poc": float(signal.volume_profile.poc),
        },
        "liquidity_pool": float(signal.liquidity_pool),
        "market_structure": signal.market_structure,
        "mtfa": list(signal.multi_timeframe_alignment),
        "pattern": signal.pattern,
        "atr": float(signal.atr),
        "timestamp": signal.timestamp.isoformat(),
    }


def signal_to_record(
    signal: TradingSignal, ai_insight: str | None = None
) -> dict[str, Any]:
    """Flatten a TradingSignal into the signal store row layout.

    The store keeps headline trade fields as columns and the rest as
    JSON blobs (``technical_data`` and ``market_data``). The owning user
    id is filled in by the store.
    """
    full = signal_to_dict(signal)
    return {
        "symbol": signal.symbol,
        "signal_type": "bullish" if signal.action is Action.BUY_ON_PULLBACK else "bearish",
        "entry_price": float(signal.entry),
        "stop_loss": float(signal.stop_loss),
        "take_profit_1": float(signal.take_profit.tp1),
        "take_profit_2": float(signal.take_profit.tp2),
        "take_profit_3": float(signal.take_profit.tp3),
        "confidence_level": signal.confidence_tier.label.lower().replace(" ", "_"),
        "confluence_count": signal.confluence_count,
        "ai_insight": ai_insight,
        "technical_data": {
            "levels": full["levels"],
            "zones": full["zones"],
            "volume_profile": full["volume_profile"],
            "confluence_factors": full["confluence_factors"],
            "market_structure": full["market_structure"],
            "mtfa": full["mtfa"],
            "atr": full["atr"],
        },
        "market_data": {
            "price": full["price"],
            "volume": full["volume"],
            "liquidity_pool": full["liquidity_pool"],
            "timestamp": full["timestamp"],
        },
        "status": "active",
    }
