"""Signal service: market data -> engine -> insight."""

import logging
from dataclasses import dataclass
from decimal import Decimal

import numpy as np

from app.services.insight import Insight, generate_fallback_insight
from app.services.market_data import MarketDataProvider
from core.errors import DivisionByZeroError
from core.models import TradingSignal
from core.strategy import SmartSignalEngine, signal_risk_reward

logger = logging.getLogger(__name__)


@dataclass
class SignalReport:
    """Signal plus derived presentation data.

    Attributes:
        signal: Assembled trading signal.
        risk_reward: Reward:risk to tp1, or None when entry equals stop loss.
        insight: Prose analysis of the signal.
    """

    signal: TradingSignal
    risk_reward: Decimal | None
    insight: Insight


class SignalService:
    """Analyze symbols end to end.

    Engine errors (e.g. InsufficientDataError) propagate to the caller;
    only an undefined risk/reward is turned into ``None``.
    """

    def __init__(
        self,
        provider: MarketDataProvider,
        engine: SmartSignalEngine | None = None,
        rng: np.random.Generator | None = None,
    ):
        self.provider = provider
        self.engine = engine or SmartSignalEngine()
        self.rng = rng if rng is not None else np.random.default_rng()

    async def analyze(self, symbol: str) -> SignalReport:
        """Fetch a snapshot for ``symbol`` and build its report."""
        snapshot = await self.provider.get_snapshot(symbol)
        signal = self.engine.generate_from_snapshot(snapshot, rng=self.rng)

        try:
            risk_reward = signal_risk_reward(signal)
        except DivisionByZeroError as e:
            logger.warning("%s: %s", signal.symbol, e)
            risk_reward = None

        insight = generate_fallback_insight(
            signal, risk_reward if risk_reward is not None else Decimal("0")
        )

        logger.info(
            "%s: %s @ %s, confluence %d (%s), R:R %s",
            signal.symbol,
            signal.action.label,
            signal.entry,
            signal.confluence_count,
            signal.confidence_tier.label,
            f"{risk_reward:.2f}" if risk_reward is not None else "n/a",
        )
        return SignalReport(signal=signal, risk_reward=risk_reward, insight=insight)
