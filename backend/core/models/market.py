"""Market data input models (candles, order book, snapshot)."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Candle(BaseModel):
    """OHLCV candle for one interval."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal


class OrderBook(BaseModel):
    """Order book snapshot as (price, size) ladders.

    Accepted by the engine but not used for scoring yet.
    """

    model_config = ConfigDict(frozen=True)

    bids: tuple[tuple[Decimal, Decimal], ...] = ()
    asks: tuple[tuple[Decimal, Decimal], ...] = ()

    @property
    def best_bid(self) -> Decimal | None:
        """Highest bid price, if any."""
        return max((price for price, _ in self.bids), default=None)

    @property
    def best_ask(self) -> Decimal | None:
        """Lowest ask price, if any."""
        return min((price for price, _ in self.asks), default=None)

    @property
    def spread(self) -> Decimal | None:
        """Ask minus bid, or None when either side is empty."""
        if self.best_bid is None or self.best_ask is None:
            return None
        return self.best_ask - self.best_bid


class MarketSnapshot(BaseModel):
    """Everything the engine needs for one symbol at one instant."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    price: Decimal = Field(gt=0)
    candles: tuple[Candle, ...]
    order_book: OrderBook = OrderBook()

    @field_validator("candles")
    @classmethod
    def _chronological(cls, candles: tuple[Candle, ...]) -> tuple[Candle, ...]:
        for prev, cur in zip(candles, candles[1:]):
            if cur.timestamp < prev.timestamp:
                raise ValueError("candles must be ordered oldest first")
        return candles

    def get_highs(self) -> list[Decimal]:
        """Get list of high prices."""
        return [c.high for c in self.candles]

    def get_lows(self) -> list[Decimal]:
        """Get list of low prices."""
        return [c.low for c in self.candles]

    def get_closes(self) -> list[Decimal]:
        """Get list of close prices."""
        return [c.close for c in self.candles]

    def get_volumes(self) -> list[Decimal]:
        """Get list of volumes."""
        return [c.volume for c in self.candles]
