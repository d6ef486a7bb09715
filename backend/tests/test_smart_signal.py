"""Tests for the smart signal pipeline stages and engine."""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import numpy as np

from core.errors import DivisionByZeroError, InsufficientDataError, InvariantViolation
from core.indicators import pivot_levels
from core.models import (
    Action,
    Candle,
    ConfidenceTier,
    OrderBook,
    PriceLevels,
    SignalEngineConfig,
    SignalZones,
    TrendVerdict,
    VolumeAnalysis,
    Zone,
)
from core.strategy.smart_signal import (
    MAX_FACTORS,
    SmartSignalEngine,
    analyze_volume,
    calculate_zones,
    classify_trend,
    confidence_tier,
    generate_signal,
    risk_reward_ratio,
    score_confluence,
    signal_risk_reward,
    validate_zone,
)
from core.strategy.smart_signal.confluence import (
    ABOVE_SWING_LOW,
    BELOW_SWING_HIGH,
    BUYER_DOMINANCE,
    DEMAND_ACTIVE,
    FVG_PRESENT,
    SUPPLY_AHEAD,
    TREND_CONFIRMED,
)
from core.strategy.smart_signal.generator import BEARISH_STRUCTURE, BULLISH_STRUCTURE
from core.strategy.smart_signal.volume import NET_BUYING, NET_SELLING

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)
FIXED_TS = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def D(value) -> Decimal:
    return Decimal(str(value))


def make_candles(
    count: int,
    high: str = "105",
    low: str = "95",
    close: str = "100",
    volume: str = "100",
) -> list[Candle]:
    """Flat candles with identical OHLCV, 15 minutes apart."""
    return [
        Candle(
            timestamp=BASE_TIME + timedelta(minutes=15 * i),
            open=D(close),
            high=D(high),
            low=D(low),
            close=D(close),
            volume=D(volume),
        )
        for i in range(count)
    ]


def make_levels(swing_high="105", swing_low="95", last_close="100") -> PriceLevels:
    return pivot_levels(D(swing_high), D(swing_low), D(last_close))


# =============================================================================
# TrendClassifier
# =============================================================================

class TestClassifyTrend:
    """Tests for the memoryless trend band."""

    def test_price_above_pivot_is_bullish(self):
        verdict = classify_trend(D(110), D(100))

        assert verdict.is_bullish
        assert verdict.band == D("107.80")

    def test_price_below_pivot_is_bearish(self):
        verdict = classify_trend(D(90), D(100))

        assert not verdict.is_bullish
        assert verdict.band == D("91.80")

    def test_price_at_pivot_is_bearish(self):
        verdict = classify_trend(D(100), D(100))

        assert not verdict.is_bullish
        assert verdict.band == D("102.00")

    def test_no_memory_between_calls(self):
        """Same inputs give the same verdict regardless of call history."""
        first = classify_trend(D(90), D(100))
        classify_trend(D(110), D(100))
        again = classify_trend(D(90), D(100))

        assert first == again


# =============================================================================
# ZoneCalculator
# =============================================================================

class TestCalculateZones:
    """Tests for price-relative zones."""

    def test_bullish_zones(self):
        zones = calculate_zones(D(1000), True)

        assert zones.demand_zone == Zone(low=D(980), high=D(988))
        assert zones.supply_zone == Zone(low=D(1015), high=D(1025))
        assert zones.fvg_zone == Zone(low=D(975), high=D(980))

    def test_bearish_zones(self):
        zones = calculate_zones(D(1000), False)

        assert zones.demand_zone == Zone(low=D(1010), high=D(1018))
        assert zones.supply_zone == Zone(low=D(970), high=D(980))
        assert zones.fvg_zone == Zone(low=D(1020), high=D(1025))

    def test_reversed_multipliers_are_normalized(self):
        config = SignalEngineConfig(demand_zone_bullish=(D("0.988"), D("0.98")))

        zones = calculate_zones(D(1000), True, config)

        assert zones.demand_zone.low == D(980)
        assert zones.demand_zone.high == D(988)

    def test_collapsed_zone_raises(self):
        config = SignalEngineConfig(fvg_zone_bearish=(D("1.02"), D("1.02")))

        with pytest.raises(InvariantViolation):
            calculate_zones(D(1000), False, config)

    def test_all_default_zones_are_valid(self):
        for price in (D("0.5"), D(1), D(30000)):
            for bullish in (True, False):
                zones = calculate_zones(price, bullish)
                for zone in (zones.demand_zone, zones.supply_zone, zones.fvg_zone):
                    assert zone.low < zone.high

    def test_validate_zone_rejects_inverted(self):
        with pytest.raises(InvariantViolation):
            validate_zone("demand", Zone(low=D(10), high=D(5)))


# =============================================================================
# VolumeAnalyzer
# =============================================================================

class TestAnalyzeVolume:
    """Tests for the fixed buy/sell split."""

    def test_reference_example(self):
        volumes = [D(100)] * 10

        result = analyze_volume(volumes)

        assert result.buy_volume == D(550)
        assert result.sell_volume == D(450)
        assert result.imbalance_label == NET_BUYING == "Net Buying Pressure"

    def test_only_last_ten_count(self):
        volumes = [D(99999)] * 5 + [D(100)] * 10

        result = analyze_volume(volumes)

        assert result.buy_volume + result.sell_volume == D(1000)

    def test_zero_volume_is_defined(self):
        result = analyze_volume([D(0)] * 10)

        assert result.buy_volume == 0
        assert result.sell_volume == 0
        assert result.imbalance_label == NET_SELLING

    def test_custom_split(self):
        config = SignalEngineConfig(
            buy_volume_share=D("0.4"), sell_volume_share=D("0.6")
        )

        result = analyze_volume([D(100)] * 10, config)

        assert result.imbalance_label == NET_SELLING


# =============================================================================
# ConfluenceScorer
# =============================================================================

class TestConfidenceTier:
    """Tests for count -> tier mapping."""

    @pytest.mark.parametrize(
        "count,tier",
        [
            (0, ConfidenceTier.LOW),
            (1, ConfidenceTier.LOW),
            (2, ConfidenceTier.MEDIUM),
            (3, ConfidenceTier.MEDIUM),
            (4, ConfidenceTier.HIGH),
            (5, ConfidenceTier.HIGH),
            (6, ConfidenceTier.VERY_HIGH),
            (7, ConfidenceTier.VERY_HIGH),
            (8, ConfidenceTier.VERY_HIGH),
        ],
    )
    def test_mapping(self, count, tier):
        assert confidence_tier(count) == tier


class TestScoreConfluence:
    """Tests for the eight confluence checks."""

    def _score(self, price, is_bullish, pattern="Horseshoe", volume=None):
        price = D(price)
        levels = make_levels()
        trend = TrendVerdict(is_bullish=is_bullish, band=price)
        zones = calculate_zones(price, is_bullish)
        volume = volume or analyze_volume([D(100)] * 10)
        return score_confluence(price, trend, levels, volume, zones, pattern)

    def test_all_checks_pass(self):
        result = self._score("100", True)

        assert result.factors == (
            TREND_CONFIRMED,
            ABOVE_SWING_LOW,
            BELOW_SWING_HIGH,
            BUYER_DOMINANCE,
            "Pattern: Horseshoe",
            FVG_PRESENT,
            DEMAND_ACTIVE,
            SUPPLY_AHEAD,
        )
        assert result.count == MAX_FACTORS
        assert result.tier == ConfidenceTier.VERY_HIGH

    def test_bearish_above_swing_high(self):
        """Price above the swing high fails trend and resistance checks."""
        result = self._score("120", False)

        assert TREND_CONFIRMED not in result.factors
        assert BELOW_SWING_HIGH not in result.factors
        assert ABOVE_SWING_LOW in result.factors
        assert result.count == 6

    def test_no_pattern_and_selling_volume(self):
        selling = VolumeAnalysis(
            buy_volume=D(0), sell_volume=D(0), imbalance_label=NET_SELLING
        )

        result = self._score("100", True, pattern=None, volume=selling)

        assert BUYER_DOMINANCE not in result.factors
        assert not any(f.startswith("Pattern:") for f in result.factors)
        assert result.count == 6

    def test_count_bounds_and_no_duplicates(self):
        for price in ("50", "100", "200"):
            for bullish in (True, False):
                result = self._score(price, bullish)
                assert 0 <= result.count <= MAX_FACTORS
                assert len(set(result.factors)) == len(result.factors)

    def test_empty_zones_do_not_count(self):
        empty = Zone(low=D(100), high=D(100))
        result = score_confluence(
            D(200),
            TrendVerdict(is_bullish=False, band=D(204)),
            make_levels(),
            VolumeAnalysis(buy_volume=D(0), sell_volume=D(0), imbalance_label=NET_SELLING),
            SignalZones(demand_zone=empty, supply_zone=empty, fvg_zone=empty),
            None,
        )

        # Only "above swing low" holds
        assert result.factors == (ABOVE_SWING_LOW,)
        assert result.tier == ConfidenceTier.LOW


# =============================================================================
# RiskRewardCalculator
# =============================================================================

class TestRiskReward:
    """Tests for reward:risk ratio."""

    def test_sell_reference_example(self):
        ratio = risk_reward_ratio(Action.SELL_ON_RALLY, D(101), D(103), D(97))
        assert ratio == D(2)

    def test_buy_ratio(self):
        ratio = risk_reward_ratio(Action.BUY_ON_PULLBACK, D(29700), D(29100), D(30900))
        assert ratio == D(2)

    def test_positive_for_consistent_trades(self):
        assert risk_reward_ratio(Action.BUY_ON_PULLBACK, D(10), D(9), D("10.5")) > 0
        assert risk_reward_ratio(Action.SELL_ON_RALLY, D(10), D(11), D("9.5")) > 0

    def test_entry_equals_stop_raises(self):
        with pytest.raises(DivisionByZeroError):
            risk_reward_ratio(Action.BUY_ON_PULLBACK, D(100), D(100), D(110))

    def test_error_is_zero_division(self):
        with pytest.raises(ZeroDivisionError):
            risk_reward_ratio(Action.SELL_ON_RALLY, D(100), D(100), D(90))


# =============================================================================
# SignalAssembler / engine
# =============================================================================

class TestTradeParameters:
    """Tests for entry/stop/targets."""

    def test_bullish_reference_example(self):
        engine = SmartSignalEngine()

        action, entry, stop, tp = engine.trade_parameters(D(30000), True)

        assert action == Action.BUY_ON_PULLBACK
        assert entry == D("29700.0")
        assert stop == D("29100.0")
        assert tp.tp1 == D("30900.0")
        assert tp.tp2 == D("31800.0")
        assert tp.tp3 == D("33000.0")

    def test_bearish_parameters(self):
        engine = SmartSignalEngine()

        action, entry, stop, tp = engine.trade_parameters(D(100), False)

        assert action == Action.SELL_ON_RALLY
        assert entry == D(101)
        assert stop == D(103)
        assert (tp.tp1, tp.tp2, tp.tp3) == (D(97), D(94), D(90))

    def test_volume_profile_and_liquidity(self):
        engine = SmartSignalEngine()

        profile = engine.volume_profile(D(100))

        assert (profile.vah, profile.val, profile.poc) == (D(103), D(97), D(100))
        assert engine.liquidity_pool(D(100), True) == D(96)
        assert engine.liquidity_pool(D(100), False) == D(104)


class TestTimeframeAlignment:
    """Tests for multi-timeframe labels."""

    def test_one_label_per_timeframe_in_order(self):
        engine = SmartSignalEngine()

        labels = engine.timeframe_alignment(np.random.default_rng(1))

        assert [label.split(":")[0] for label in labels] == [
            "5M", "15M", "30M", "1H", "4H", "1D",
        ]
        for label in labels:
            verdict = label.split(": ")[1].split(" | ")[0]
            assert verdict in ("Bullish", "Bearish")
            for tag in label.split(" | ")[1:]:
                assert tag in ("FVG Present", "OB Detected")

    def test_same_seed_same_labels(self):
        engine = SmartSignalEngine()

        first = engine.timeframe_alignment(np.random.default_rng(42))
        second = engine.timeframe_alignment(np.random.default_rng(42))

        assert first == second

    def test_thresholds_control_tags(self):
        config = SignalEngineConfig(
            mtf_bullish_threshold=-1.0, mtf_fvg_threshold=-1.0, mtf_ob_threshold=2.0
        )
        engine = SmartSignalEngine(config)

        labels = engine.timeframe_alignment(np.random.default_rng(0))

        assert all(label.endswith(": Bullish | FVG Present") for label in labels)

    def test_select_pattern_from_catalog(self):
        engine = SmartSignalEngine()
        rng = np.random.default_rng(3)

        picks = {engine.select_pattern(rng) for _ in range(50)}

        assert picks <= set(engine.config.pattern_catalog)


class TestGenerateSignal:
    """End-to-end tests for generate_signal."""

    def test_bullish_signal(self):
        candles = make_candles(25)

        signal = generate_signal(
            "BTC",
            D(30000),
            candles,
            OrderBook(),
            rng=np.random.default_rng(7),
            pattern="Multi-Reversal",
            timestamp=FIXED_TS,
        )

        assert signal.symbol == "BTC"
        assert signal.action == Action.BUY_ON_PULLBACK
        assert signal.entry == D(29700)
        assert signal.stop_loss == D(29100)
        assert signal.take_profit.tp1 == D(30900)
        assert signal.levels.pivot == D(100)
        assert signal.levels.r1 == D(105)
        assert signal.levels.s2 == D(90)
        assert signal.atr == D(10)
        assert signal.market_structure == BULLISH_STRUCTURE
        assert signal.liquidity_pool == D(28800)
        assert signal.pattern == "Multi-Reversal"
        assert "Pattern: Multi-Reversal" in signal.confluence_factors
        assert signal.volume.buy_volume == D(550)
        assert signal.volume.sell_volume == D(450)
        assert len(signal.multi_timeframe_alignment) == 6
        assert signal.timestamp == FIXED_TS

    def test_bearish_signal(self):
        candles = make_candles(25)

        signal = generate_signal(
            "ETH", D(90), candles, pattern="Horseshoe", timestamp=FIXED_TS
        )

        assert signal.action == Action.SELL_ON_RALLY
        assert signal.market_structure == BEARISH_STRUCTURE
        assert signal.entry == D("90.90")
        assert signal.stop_loss == D("92.70")
        assert signal.zones.supply_zone == Zone(low=D("87.30"), high=D("88.20"))
        assert TREND_CONFIRMED not in signal.confluence_factors
        # Price below the swing low
        assert ABOVE_SWING_LOW not in signal.confluence_factors
        assert signal_risk_reward(signal) == D(2)

    def test_confidence_matches_count(self):
        signal = generate_signal(
            "BTC", D(100), make_candles(20), rng=np.random.default_rng(0)
        )
        assert signal.confidence_tier == confidence_tier(signal.confluence_count)

    def test_volume_is_rounded(self):
        signal = generate_signal(
            "BTC", D(100), make_candles(10, volume="0.33"), pattern="Horseshoe"
        )
        # total 3.3 -> 1.815 / 1.485
        assert signal.volume.buy_volume == D(2)
        assert signal.volume.sell_volume == D(1)

    def test_idempotent_with_same_seed(self):
        candles = make_candles(30)

        first = generate_signal(
            "BTC", D(100), candles, rng=np.random.default_rng(11), timestamp=FIXED_TS
        )
        second = generate_signal(
            "BTC", D(100), candles, rng=np.random.default_rng(11), timestamp=FIXED_TS
        )

        assert first == second
        assert first.model_dump() == second.model_dump()

    def test_empty_candles_raise(self):
        with pytest.raises(InsufficientDataError):
            generate_signal("BTC", D(100), [])

    def test_fewer_than_atr_period_raise(self):
        with pytest.raises(InsufficientDataError) as exc:
            generate_signal("BTC", D(100), make_candles(9))
        assert exc.value.stage == "ATR"

    def test_custom_config(self):
        config = SignalEngineConfig(atr_period=3, swing_window=5)
        engine = SmartSignalEngine(config)

        signal = engine.generate_signal(
            "BTC", D(100), make_candles(3), pattern="Horseshoe", timestamp=FIXED_TS
        )

        assert signal.atr == D(10)

    def test_engine_is_reusable(self):
        """One engine instance yields independent signals."""
        engine = SmartSignalEngine()
        candles = make_candles(20)

        a = engine.generate_signal("BTC", D(200), candles, pattern="Horseshoe", timestamp=FIXED_TS)
        b = engine.generate_signal("ETH", D(50), candles, pattern="Horseshoe", timestamp=FIXED_TS)

        assert a.symbol == "BTC" and b.symbol == "ETH"
        assert a.is_bullish and not b.is_bullish
