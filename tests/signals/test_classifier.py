"""Tests for signal classifiers."""

from decimal import Decimal

import pytest

from ta_core.indicators.moving_average import moving_average
from ta_core.indicators.series import Series
from ta_core.signals.base_signal import Signal
from ta_core.signals.classifier import (
    bullish_bearish_signal,
    compare_signal,
    rsi_signal,
    volatility_signal,
)


class TestCompareSignal:
    """Tests for zero-line crossing classification."""

    @pytest.mark.parametrize("current, previous, expected", [
        (1, -1, Signal.BULLISH),
        (1, 0, Signal.BULLISH),
        (-1, 1, Signal.BEARISH),
        (-1, 0, Signal.BEARISH),
        (1, 1, Signal.NONE),
        (-1, -1, Signal.NONE),
        (0, 0, Signal.NONE),
        (0, 5, Signal.NONE),
    ])
    def test_crossings(self, current, previous, expected):
        assert compare_signal(current, previous) is expected

    @pytest.mark.parametrize("current, previous", [
        (1, -1), (2, 0), (-3, 1), (0, 0), (5, 5), (Decimal("0.5"), Decimal("-0.25")),
    ])
    def test_antisymmetric(self, current, previous):
        """Negating both deltas mirrors the result."""
        assert compare_signal(-current, -previous) is compare_signal(current, previous).mirror()

    def test_reverse(self):
        assert compare_signal(1, -1, reverse=True) is Signal.BEARISH
        assert compare_signal(-1, 1, reverse=True) is Signal.BULLISH
        assert compare_signal(1, 1, reverse=True) is Signal.NONE

    def test_strict_ignores_move_off_flat(self):
        assert compare_signal(1, 0, strict=True) is Signal.NONE
        assert compare_signal(1, -1, strict=True) is Signal.BULLISH

    def test_close_crossing_its_average(self):
        """Close crossing above its 3-bar SMA at bar 6 is bullish."""
        close = Series([10, 11, 12, 11, 10, 9, 10, 11, 12, 13])
        sma = moving_average("simple", 3, close)
        signals = [
            compare_signal(close.get(i) - sma.get(i), close.get(i - 1) - sma.get(i - 1))
            for i in range(len(close))
        ]
        assert signals[6] is Signal.BULLISH
        assert signals[3] is Signal.BEARISH
        assert signals[7] is Signal.NONE


class TestRsiSignal:
    """Tests for threshold-band classification."""

    def test_overbought(self):
        assert rsi_signal(7, 5, 72, 65, 70, 30) is Signal.OVERBOUGHT

    def test_oversold(self):
        assert rsi_signal(-7, -5, 28, 35, 70, 30) is Signal.OVERSOLD

    def test_already_overbought_falls_back(self):
        """Staying above the band defers to compare_signal."""
        assert rsi_signal(1, -1, 75, 72, 70, 30) is Signal.BULLISH
        assert rsi_signal(1, 1, 75, 72, 70, 30) is Signal.NONE

    def test_crossing_takes_precedence(self):
        """A band crossing wins over a directional delta on the same bar."""
        assert rsi_signal(1, -1, 72, 65, 70, 30) is Signal.OVERBOUGHT

    def test_negative_scale(self):
        assert rsi_signal(-5, 0, -85, -75, -20, -80) is Signal.OVERSOLD


class TestVolatilitySignal:
    """Tests for volatility breakout classification."""

    def test_expansion_above_threshold(self):
        assert volatility_signal(1, -1, 50, Decimal("38.2")) is Signal.VOLATILITY_EXPANSION

    def test_directional_at_or_below_threshold(self):
        assert volatility_signal(1, -1, Decimal("38.2"), Decimal("38.2")) is Signal.BULLISH
        assert volatility_signal(-1, 1, 10, Decimal("38.2")) is Signal.BEARISH

    def test_no_crossing(self):
        assert volatility_signal(1, 1, 90, Decimal("38.2")) is Signal.NONE


class TestBullishBearishSignal:
    """Tests for breakout against companion lines."""

    def test_bullish_breakout(self):
        assert bullish_bearish_signal(1, -1, 3, 2) is Signal.BULLISH

    def test_bearish_breakdown(self):
        assert bullish_bearish_signal(-3, -2, -1, 1) is Signal.BEARISH

    def test_continuation(self):
        assert bullish_bearish_signal(1, 1, 3, 3) is Signal.NONE
        assert bullish_bearish_signal(-3, -3, -1, -1) is Signal.NONE
