"""Trading signal output models."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict


class Action(str, Enum):
    """Trade action suggested by the signal."""

    BUY_ON_PULLBACK = "BuyOnPullback"
    SELL_ON_RALLY = "SellOnRally"

    @property
    def label(self) -> str:
        """Human readable label."""
        if self is Action.BUY_ON_PULLBACK:
            return "Buy on Pullback"
        return "Sell on Rally"


class ConfidenceTier(str, Enum):
    """Confidence bucket derived from the confluence count."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    VERY_HIGH = "VeryHigh"

    @property
    def label(self) -> str:
        """Human readable label."""
        if self is ConfidenceTier.VERY_HIGH:
            return "Very High"
        return self.value


class PriceLevels(BaseModel):
    """Swing extremes plus classic pivot support/resistance."""

    model_config = ConfigDict(frozen=True)

    swing_high: Decimal
    swing_low: Decimal
    pivot: Decimal
    r1: Decimal
    r2: Decimal
    s1: Decimal
    s2: Decimal


class TrendVerdict(BaseModel):
    """Memoryless trend call from price vs. pivot."""

    model_config = ConfigDict(frozen=True)

    is_bullish: bool
    band: Decimal


class Zone(BaseModel):
    """Price band ``[low, high)``."""

    model_config = ConfigDict(frozen=True)

    low: Decimal
    high: Decimal

    @classmethod
    def from_bounds(cls, a: Decimal, b: Decimal) -> "Zone":
        """Build a zone from two bounds in any order."""
        return cls(low=min(a, b), high=max(a, b))

    @property
    def width(self) -> Decimal:
        return self.high - self.low


class SignalZones(BaseModel):
    """Demand, supply, and fair-value-gap zones."""

    model_config = ConfigDict(frozen=True)

    demand_zone: Zone
    supply_zone: Zone
    fvg_zone: Zone


class VolumeAnalysis(BaseModel):
    """Estimated buy/sell split of recent volume."""

    model_config = ConfigDict(frozen=True)

    buy_volume: Decimal
    sell_volume: Decimal
    imbalance_label: str


class ConfluenceResult(BaseModel):
    """Labeled confluence factors that evaluated true, in declaration order."""

    model_config = ConfigDict(frozen=True)

    factors: tuple[str, ...]
    tier: ConfidenceTier

    @property
    def count(self) -> int:
        return len(self.factors)


class TakeProfit(BaseModel):
    """Three staged take-profit targets."""

    model_config = ConfigDict(frozen=True)

    tp1: Decimal
    tp2: Decimal
    tp3: Decimal


class VolumeProfile(BaseModel):
    """Value area high/low and point of control."""

    model_config = ConfigDict(frozen=True)

    vah: Decimal
    val: Decimal
    poc: Decimal


class TradingSignal(BaseModel):
    """Assembled trading signal. Created once per call, never mutated."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    price: Decimal
    action: Action
    entry: Decimal
    stop_loss: Decimal
    take_profit: TakeProfit
    confidence_tier: ConfidenceTier
    confluence_factors: tuple[str, ...]
    levels: PriceLevels
    volume: VolumeAnalysis
    zones: SignalZones
    volume_profile: VolumeProfile
    liquidity_pool: Decimal
    market_structure: str
    multi_timeframe_alignment: tuple[str, ...]
    pattern: str
    atr: Decimal
    timestamp: datetime

    @property
    def is_bullish(self) -> bool:
        return self.action is Action.BUY_ON_PULLBACK

    @property
    def confluence_count(self) -> int:
        return len(self.confluence_factors)

    @property
    def risk_amount(self) -> Decimal:
        """Get the risk amount (distance to stop loss)."""
        if self.is_bullish:
            return self.entry - self.stop_loss
        return self.stop_loss - self.entry

    @property
    def reward_amount(self) -> Decimal:
        """Get the reward amount (distance to the first take profit)."""
        if self.is_bullish:
            return self.take_profit.tp1 - self.entry
        return self.entry - self.take_profit.tp1
