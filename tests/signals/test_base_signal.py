"""Tests for the signal taxonomy."""

from ta_core.signals.base_signal import Signal, count_signals


class TestSignal:
    """Tests for Signal enum."""

    def test_signal_values(self):
        """Test signal string values."""
        assert Signal.BULLISH == "bullish"
        assert Signal.BEARISH == "bearish"
        assert Signal.OVERBOUGHT == "overbought"
        assert Signal.OVERSOLD == "oversold"
        assert Signal.VOLATILITY_EXPANSION == "volatility_expansion"
        assert Signal.NONE == "none"

    def test_signal_is_bullish(self):
        """Test bullish signal detection."""
        assert Signal.BULLISH.is_bullish()
        assert not Signal.OVERSOLD.is_bullish()
        assert not Signal.NONE.is_bullish()

    def test_signal_is_bearish(self):
        """Test bearish signal detection."""
        assert Signal.BEARISH.is_bearish()
        assert not Signal.OVERBOUGHT.is_bearish()

    def test_directional(self):
        assert Signal.BULLISH.is_directional()
        assert Signal.BEARISH.is_directional()
        assert not Signal.VOLATILITY_EXPANSION.is_directional()
        assert not Signal.NONE.is_directional()

    def test_mirror(self):
        """Test mirror swaps opposite members and is an involution."""
        assert Signal.BULLISH.mirror() is Signal.BEARISH
        assert Signal.OVERBOUGHT.mirror() is Signal.OVERSOLD
        assert Signal.NONE.mirror() is Signal.NONE
        assert Signal.VOLATILITY_EXPANSION.mirror() is Signal.VOLATILITY_EXPANSION
        for signal in Signal:
            assert signal.mirror().mirror() is signal


class TestCountSignals:
    """Tests for count_signals."""

    def test_counts_every_member(self):
        counts = count_signals([Signal.BULLISH, Signal.BULLISH, Signal.NONE])
        assert counts[Signal.BULLISH] == 2
        assert counts[Signal.NONE] == 1
        assert counts[Signal.OVERSOLD] == 0
        assert set(counts) == set(Signal)
