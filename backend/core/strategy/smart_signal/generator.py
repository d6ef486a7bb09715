"""Smart signal engine: market snapshot in, trading signal out.

This module is pure business logic with no I/O dependencies. Market data
is passed in by the caller and the only sources of variety (pattern pick
and per-timeframe alignment labels) come from an injected
``numpy.random.Generator``, so a seeded generator makes the output
reproducible.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

import numpy as np

from core.indicators import atr, pivot_levels, swing_levels
from core.models.config import DEFAULT_CONFIG, SignalEngineConfig
from core.models.market import Candle, MarketSnapshot, OrderBook
from core.models.signal import (
    Action,
    TakeProfit,
    TradingSignal,
    VolumeAnalysis,
    VolumeProfile,
)
from core.strategy.smart_signal.confluence import score_confluence
from core.strategy.smart_signal.trend import classify_trend
from core.strategy.smart_signal.volume import analyze_volume
from core.strategy.smart_signal.zones import calculate_zones

logger = logging.getLogger(__name__)

BULLISH_STRUCTURE = "Bullish (Higher Low Confirmed)"
BEARISH_STRUCTURE = "Bearish (Lower High Confirmed)"

_ONE = Decimal("1")


class SmartSignalEngine:
    """
    Derive a trading signal from price, candles and order book.

    Pipeline (each stage only sees the stages above it):
    - Swing high/low over the last ``swing_window`` candles
    - ATR over the last ``atr_period`` candles
    - Pivot point with R1/R2/S1/S2
    - Trend verdict from price vs. pivot
    - Demand/supply/FVG zones keyed by trend
    - Fixed-share volume split
    - Confluence count and confidence tier
    - Trade parameters, volume profile, liquidity pool, MTF alignment

    The engine holds only its (immutable) config, so one instance can
    serve concurrent callers.
    """

    def __init__(self, config: SignalEngineConfig = DEFAULT_CONFIG):
        self.config = config

    # ------------------------------------------------------------------
    # Trade parameters
    # ------------------------------------------------------------------

    def trade_parameters(
        self, price: Decimal, is_bullish: bool
    ) -> tuple[Action, Decimal, Decimal, TakeProfit]:
        """
        Entry, stop loss and take profits as fixed offsets from price.

        Bullish: buy a pullback below price, stop below, targets above.
        Bearish: sell a rally above price, stop above, targets below.

        Returns:
            Tuple of (action, entry, stop_loss, take_profit)
        """
        cfg = self.config
        tp1_off, tp2_off, tp3_off = cfg.take_profit_offsets

        if is_bullish:
            return (
                Action.BUY_ON_PULLBACK,
                price * (_ONE - cfg.entry_offset),
                price * (_ONE - cfg.stop_loss_offset),
                TakeProfit(
                    tp1=price * (_ONE + tp1_off),
                    tp2=price * (_ONE + tp2_off),
                    tp3=price * (_ONE + tp3_off),
                ),
            )
        return (
            Action.SELL_ON_RALLY,
            price * (_ONE + cfg.entry_offset),
            price * (_ONE + cfg.stop_loss_offset),
            TakeProfit(
                tp1=price * (_ONE - tp1_off),
                tp2=price * (_ONE - tp2_off),
                tp3=price * (_ONE - tp3_off),
            ),
        )

    def volume_profile(self, price: Decimal) -> VolumeProfile:
        offset = self.config.value_area_offset
        return VolumeProfile(
            vah=price * (_ONE + offset),
            val=price * (_ONE - offset),
            poc=price,
        )

    def liquidity_pool(self, price: Decimal, is_bullish: bool) -> Decimal:
        """Resting liquidity below price in an uptrend, above it in a downtrend."""
        offset = self.config.liquidity_pool_offset
        if is_bullish:
            return price * (_ONE - offset)
        return price * (_ONE + offset)

    # ------------------------------------------------------------------
    # Randomized sub-choices
    # ------------------------------------------------------------------

    def select_pattern(self, rng: np.random.Generator) -> str:
        """Pick a pattern name uniformly from the catalog."""
        catalog = self.config.pattern_catalog
        return catalog[int(rng.integers(len(catalog)))]

    def timeframe_alignment(self, rng: np.random.Generator) -> tuple[str, ...]:
        """One label per timeframe, e.g. ``"1H: Bullish | FVG Present"``.

        Draws three values per timeframe, in order: verdict, FVG tag, OB tag.
        """
        cfg = self.config
        labels = []
        for tf in cfg.timeframes:
            verdict = "Bullish" if rng.random() > cfg.mtf_bullish_threshold else "Bearish"
            parts = [f"{tf}: {verdict}"]
            if rng.random() > cfg.mtf_fvg_threshold:
                parts.append("FVG Present")
            if rng.random() > cfg.mtf_ob_threshold:
                parts.append("OB Detected")
            labels.append(" | ".join(parts))
        return tuple(labels)

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    def generate_signal(
        self,
        symbol: str,
        price: Decimal,
        candles: Sequence[Candle],
        order_book: OrderBook | None = None,
        *,
        rng: np.random.Generator | None = None,
        pattern: str | None = None,
        timestamp: datetime | None = None,
    ) -> TradingSignal:
        """
        Run the full pipeline for one symbol.

        Args:
            symbol: Trading symbol (e.g., "BTC")
            price: Current price (must be positive)
            candles: Chronological OHLCV candles, oldest first
            order_book: Order book snapshot (accepted, not scored)
            rng: Random source for the pattern and MTF draws.
                A fresh unseeded generator is used when omitted.
            pattern: Pin the detected pattern instead of drawing it
            timestamp: Pin the signal timestamp (defaults to now, UTC)

        Raises:
            InsufficientDataError: No candles, or fewer than ``atr_period``
            InvariantViolation: A zone came out empty
        """
        snapshot = MarketSnapshot(
            symbol=symbol,
            price=price,
            candles=tuple(candles),
            order_book=order_book if order_book is not None else OrderBook(),
        )
        return self.generate_from_snapshot(
            snapshot, rng=rng, pattern=pattern, timestamp=timestamp
        )

    def generate_from_snapshot(
        self,
        snapshot: MarketSnapshot,
        *,
        rng: np.random.Generator | None = None,
        pattern: str | None = None,
        timestamp: datetime | None = None,
    ) -> TradingSignal:
        """Run the full pipeline on a validated snapshot."""
        cfg = self.config
        if rng is None:
            rng = np.random.default_rng()

        price = snapshot.price
        highs = snapshot.get_highs()
        lows = snapshot.get_lows()
        closes = snapshot.get_closes()

        swing_high, swing_low = swing_levels(highs, lows, cfg.swing_window)
        atr_value = atr(highs, lows, closes, cfg.atr_period)
        levels = pivot_levels(swing_high, swing_low, closes[-1])
        trend = classify_trend(price, levels.pivot, cfg)
        zones = calculate_zones(price, trend.is_bullish, cfg)
        volume = analyze_volume(snapshot.get_volumes(), cfg)

        logger.debug(
            "%s levels: swing=[%s, %s] pivot=%s atr=%s band=%s bullish=%s",
            snapshot.symbol,
            swing_low,
            swing_high,
            levels.pivot,
            atr_value,
            trend.band,
            trend.is_bullish,
        )

        if pattern is None:
            pattern = self.select_pattern(rng)
        confluence = score_confluence(
            price, trend, levels, volume, zones, pattern, cfg
        )
        action, entry, stop_loss, take_profit = self.trade_parameters(
            price, trend.is_bullish
        )

        signal = TradingSignal(
            symbol=snapshot.symbol,
            price=price,
            action=action,
            entry=entry,
            stop_loss=stop_loss,
            take_profit=take_profit,
            confidence_tier=confluence.tier,
            confluence_factors=confluence.factors,
            levels=levels,
            volume=VolumeAnalysis(
                buy_volume=volume.buy_volume.quantize(_ONE, rounding=ROUND_HALF_UP),
                sell_volume=volume.sell_volume.quantize(_ONE, rounding=ROUND_HALF_UP),
                imbalance_label=volume.imbalance_label,
            ),
            zones=zones,
            volume_profile=self.volume_profile(price),
            liquidity_pool=self.liquidity_pool(price, trend.is_bullish),
            market_structure=BULLISH_STRUCTURE if trend.is_bullish else BEARISH_STRUCTURE,
            multi_timeframe_alignment=self.timeframe_alignment(rng),
            pattern=pattern,
            atr=atr_value,
            timestamp=timestamp or datetime.now(timezone.utc),
        )

        logger.debug(
            "%s signal: %s entry=%s confluence=%d (%s)",
            signal.symbol,
            signal.action.value,
            signal.entry,
            signal.confluence_count,
            signal.confidence_tier.value,
        )
        return signal


_default_engine = SmartSignalEngine()


def generate_signal(
    symbol: str,
    price: Decimal,
    candles: Sequence[Candle],
    order_book: OrderBook | None = None,
    *,
    rng: np.random.Generator | None = None,
    pattern: str | None = None,
    timestamp: datetime | None = None,
) -> TradingSignal:
    """Generate a signal with the default configuration."""
    return _default_engine.generate_signal(
        symbol,
        price,
        candles,
        order_book,
        rng=rng,
        pattern=pattern,
        timestamp=timestamp,
    )
