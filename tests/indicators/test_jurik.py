"""Tests for the Jurik filters."""

from collections import deque
from decimal import Decimal
from math import log, sqrt

import numpy as np
import pytest

from ta_core.indicators.jurik import JurikFilter, RsxFilter


def jurik_reference(prices, length=7, phase=0.0):
    """Float transcription of the published JMA, one output per bar."""
    half_length = 0.5 * (length - 1)
    pr = 0.5 if phase < -100 else (2.5 if phase > 100 else 1.5 + phase * 0.01)
    length1 = max(log(sqrt(half_length)) / log(2.0) + 2.0, 0.0) if half_length > 0 else 2.0
    pow1 = max(length1 - 2.0, 0.5)
    length2 = length1 * sqrt(half_length) if half_length > 0 else 0.0
    bet = length2 / (length2 + 1.0)
    beta = 0.45 * (length - 1) / (0.45 * (length - 1) + 2.0)

    ma1 = upper = lower = jma = prices[0]
    det0 = det1 = v_sum = 0.0
    volty_buf = deque([0.0], maxlen=10)
    v_sum_history = deque([0.0], maxlen=66)
    outputs = [jma]
    for price in prices[1:]:
        del1 = price - upper
        del2 = price - lower
        volty = max(abs(del1), abs(del2)) if abs(del1) != abs(del2) else 0.0
        old_volty = volty_buf[0] if len(volty_buf) >= 10 else 0.0
        v_sum += (volty - old_volty) / 10
        volty_buf.append(volty)
        v_sum_history.append(v_sum)
        avg_volty = sum(v_sum_history) / len(v_sum_history)
        d_volty = 0.0 if avg_volty == 0.0 else volty / avg_volty
        r_volty = max(1.0, min(length1 ** (1.0 / pow1), d_volty))
        power = r_volty ** pow1
        kv = bet ** sqrt(power)
        upper = price if del1 > 0 else price - kv * del1
        lower = price if del2 < 0 else price - kv * del2
        alpha = beta ** power
        ma1 = (1.0 - alpha) * price + alpha * ma1
        det0 = (1.0 - beta) * (price - ma1) + beta * det0
        ma2 = ma1 + pr * det0
        det1 = (ma2 - jma) * (1.0 - alpha) ** 2 + alpha * alpha * det1
        jma += det1
        outputs.append(jma)
    return outputs


@pytest.fixture
def random_walk():
    """Seeded 120-bar random walk."""
    np.random.seed(7)
    return [float(v) for v in 100 + np.cumsum(np.random.randn(120))]


class TestJurikFilter:
    """Tests for the JMA smoother."""

    def test_seed_is_first_input(self):
        jma = JurikFilter(7)
        assert jma.update(42) == 42
        assert jma.value == 42

    def test_phase_ratio_bounds(self):
        assert JurikFilter(7, phase=-200).phase_ratio == Decimal("0.5")
        assert JurikFilter(7, phase=200).phase_ratio == Decimal("2.5")
        assert JurikFilter(7, phase=0).phase_ratio == Decimal("1.5")

    def test_converges_after_step(self):
        jma = JurikFilter(7)
        for _ in range(10):
            jma.update(10)
        for _ in range(80):
            last = jma.update(20)
        assert abs(last - 20) < 1

    def test_length_constants(self):
        """bet = length2 / (length2 + 1) with length2 = length1 * sqrt((L - 1) / 2)."""
        assert float(JurikFilter(7)._bet) == pytest.approx(0.82867, abs=1e-5)
        assert JurikFilter(1)._length1 == 2

    @pytest.mark.parametrize("length,phase", [(7, 0), (14, 50), (5, -100)])
    def test_matches_published_formula(self, random_walk, length, phase):
        """Every bar agrees with the float listing of the published JMA."""
        jma = JurikFilter(length, phase=phase)
        outputs = [float(jma.update(price)) for price in random_walk]
        expected = jurik_reference(random_walk, length=length, phase=phase)
        assert outputs == pytest.approx(expected, abs=1e-8)

    def test_length_one(self):
        """Degenerate length does not raise."""
        jma = JurikFilter(1)
        for value in [10, 11, 12]:
            jma.update(value)
        assert jma.value > 0


class TestRsxFilter:
    """Tests for the RSX oscillator filter."""

    def test_warm_up_outputs_fifty(self):
        rsx = RsxFilter(14)
        outputs = [rsx.update(100 + i) for i in range(13)]
        assert outputs == [50] * 13

    def test_rising_prices_above_fifty(self):
        rsx = RsxFilter(14)
        outputs = [rsx.update(100 + i) for i in range(40)]
        assert outputs[-1] > 50
        assert all(0 <= v <= 100 for v in outputs)

    def test_falling_prices_below_fifty(self):
        rsx = RsxFilter(14)
        outputs = [rsx.update(100 - i) for i in range(40)]
        assert outputs[-1] < 50

    def test_flat_prices_stay_neutral(self):
        rsx = RsxFilter(14)
        outputs = [rsx.update(100) for _ in range(60)]
        assert outputs == [50] * 60
        assert rsx.last == 50
