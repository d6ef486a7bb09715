"""Market data provider.

Fetches price, candles and order book for one symbol and packs them into
a MarketSnapshot for the signal engine. When the exchange is unreachable
the provider can substitute synthetic data so the UI still has something
to show; that policy lives here, not in the engine.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import httpx
import numpy as np

from app.clients import BinanceRestClient
from core.models import Candle, MarketSnapshot, OrderBook

logger = logging.getLogger(__name__)

# Interval suffix to seconds; "M" is a calendar month, taken as 30 days
INTERVAL_UNIT_SECONDS = {
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86400,
    "w": 604800,
    "M": 2592000,
}

_CENT = Decimal("0.01")


class MarketDataError(Exception):
    """Market data could not be fetched or synthesized."""


def interval_to_timedelta(interval: str) -> timedelta:
    """Parse a kline interval such as "1s", "15m", "4h" or "1M"."""
    try:
        count = int(interval[:-1])
        if count <= 0:
            raise ValueError(interval)
        return timedelta(seconds=count * INTERVAL_UNIT_SECONDS[interval[-1]])
    except (KeyError, ValueError, IndexError):
        raise ValueError(f"Unsupported interval: {interval}") from None


def _to_price(value: float) -> Decimal:
    return Decimal(str(value)).quantize(_CENT)


def synthetic_candles(
    base_price: float,
    count: int,
    interval: timedelta,
    rng: np.random.Generator,
    end_time: datetime | None = None,
) -> list[Candle]:
    """Random-walk candles ending at ``end_time``.

    Each candle opens at the previous close, closes within +/-1% and
    stretches up to 2% above and below its open.
    """
    if end_time is None:
        end_time = datetime.now(timezone.utc)

    candles = []
    current = base_price
    for i in range(count):
        open_ = current
        close = open_ * (0.99 + rng.random() * 0.02)
        high = max(open_ * (1 + rng.random() * 0.02), open_, close)
        low = min(open_ * (1 - rng.random() * 0.02), open_, close)
        volume = rng.random() * 10000
        current = close
        candles.append(
            Candle(
                timestamp=end_time - (count - i) * interval,
                open=_to_price(open_),
                high=_to_price(high),
                low=_to_price(low),
                close=_to_price(close),
                volume=_to_price(volume),
            )
        )
    return candles


def synthetic_order_book(
    base_price: float,
    rng: np.random.Generator,
    depth: int = 10,
) -> OrderBook:
    """Symmetric ladder stepping 0.1% per level away from ``base_price``."""
    bids = []
    asks = []
    for i in range(depth):
        bids.append((_to_price(base_price * (1 - 0.001 * i)), _to_price(rng.random() * 1000)))
        asks.append((_to_price(base_price * (1 + 0.001 * i)), _to_price(rng.random() * 1000)))
    return OrderBook(bids=tuple(bids), asks=tuple(asks))


class MarketDataProvider:
    """Build MarketSnapshots from the Binance REST API."""

    def __init__(
        self,
        client: BinanceRestClient,
        quote_asset: str = "USDT",
        interval: str = "15m",
        kline_limit: int = 50,
        order_book_depth: int = 100,
        synthetic_fallback: bool = True,
        rng: np.random.Generator | None = None,
    ):
        self.client = client
        self.quote_asset = quote_asset
        self.interval = interval
        self.kline_limit = kline_limit
        self.order_book_depth = order_book_depth
        self.synthetic_fallback = synthetic_fallback
        self.rng = rng if rng is not None else np.random.default_rng()

    def pair(self, symbol: str) -> str:
        """Exchange pair for a base symbol ("BTC" -> "BTCUSDT")."""
        symbol = symbol.upper()
        if symbol.endswith(self.quote_asset):
            return symbol
        return f"{symbol}{self.quote_asset}"

    def _check_fallback(self, what: str, pair: str, exc: BaseException) -> None:
        """Re-raise non-HTTP errors, or HTTP errors when fallback is off."""
        if not isinstance(exc, httpx.HTTPError):
            raise exc
        if not self.synthetic_fallback:
            raise MarketDataError(f"Failed to fetch {what} for {pair}: {exc}") from exc
        logger.warning("Failed to fetch %s for %s (%s), using synthetic data", what, pair, exc)

    async def get_snapshot(self, symbol: str) -> MarketSnapshot:
        """
        Fetch price, candles and order book concurrently.

        Each part falls back to synthetic data on its own. Synthetic data
        is anchored on whatever real price information did arrive.

        Raises:
            MarketDataError: A fetch failed and synthetic fallback is off,
                or the interval cannot be used to synthesize klines
        """
        pair = self.pair(symbol)
        price, candles, order_book = await asyncio.gather(
            self.client.get_price(pair),
            self.client.get_klines(pair, self.interval, self.kline_limit),
            self.client.get_order_book(pair, self.order_book_depth),
            return_exceptions=True,
        )

        if isinstance(price, BaseException):
            self._check_fallback("price", pair, price)
            price = None
        if isinstance(candles, BaseException):
            self._check_fallback("klines", pair, candles)
            candles = None
        if isinstance(order_book, BaseException):
            self._check_fallback("order book", pair, order_book)
            order_book = None

        if price is None and candles:
            price = candles[-1].close
        if price is None:
            price = _to_price(float(self.rng.uniform(1000, 50000)))
        if candles is None:
            try:
                step = interval_to_timedelta(self.interval)
            except ValueError as e:
                raise MarketDataError(f"Cannot synthesize klines for {pair}: {e}") from e
            candles = synthetic_candles(float(price), self.kline_limit, step, self.rng)
        if order_book is None:
            order_book = synthetic_order_book(float(price), self.rng)

        logger.info(
            "%s snapshot: price=%s candles=%d bid=%s ask=%s spread=%s",
            pair,
            price,
            len(candles),
            order_book.best_bid,
            order_book.best_ask,
            order_book.spread,
        )
        return MarketSnapshot(
            symbol=symbol.upper(),
            price=price,
            candles=tuple(candles),
            order_book=order_book,
        )
