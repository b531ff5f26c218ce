"""Jurik-style recursive filters.

Both filters are kept as opaque state machines: the stage order, constants and
seed conditions follow the published formulas and are not generalized.

JurikFilter (JMA):
    Adaptive smoother. A volatility ratio (current band distance over its
    recent average) modulates the smoothing factor between 1 and a
    length-derived bound. Seed: output[0] = input[0].

RsxFilter (RSX):
    Noise-free RSI clone built from three double-smoothed stages of price
    momentum and of absolute momentum. Seed: the first bar only stores the
    price and outputs 50; output stays 50 until the warm-up counter passes
    ``max(length - 1, 5)`` bars.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Deque, Optional

from .series import Number, ONE, ZERO, clamp, safe_divide, to_decimal

_TWO = Decimal(2)
_HALF = Decimal("0.5")
_FIFTY = Decimal(50)
_HUNDRED = Decimal(100)

# JMA volatility windows
_VOLTY_SUM_LENGTH = 10
_VOLTY_AVG_LENGTH = 65


def _power(base: Decimal, exponent: Decimal) -> Decimal:
    if base == 0:
        return ZERO if exponent > 0 else ONE
    return base ** exponent


class JurikFilter:
    """Jurik moving average.

    Args:
        length: Smoothing length
        phase: -100..100, shifts the output between lag and overshoot
    """

    def __init__(self, length: int, phase: Number = 0):
        phase = to_decimal(phase)
        self.length = length
        if phase < -100:
            self.phase_ratio = _HALF
        elif phase > 100:
            self.phase_ratio = Decimal("2.5")
        else:
            self.phase_ratio = phase / _HUNDRED + Decimal("1.5")

        half_length = Decimal(length - 1) * _HALF
        if half_length > 0:
            log_length = half_length.sqrt().ln() / _TWO.ln() + _TWO
            self._length1 = max(log_length, ZERO)
            length2 = self._length1 * half_length.sqrt()
        else:
            self._length1 = _TWO
            length2 = ZERO
        self._pow1 = max(self._length1 - _TWO, _HALF)
        self._bet = length2 / (length2 + ONE)
        beta_base = Decimal("0.45") * Decimal(length - 1)
        self._beta = beta_base / (beta_base + _TWO)
        self._volty_limit = _power(self._length1, ONE / self._pow1)

        self._count = 0
        self._ma1 = ZERO
        self._det0 = ZERO
        self._det1 = ZERO
        self._upper_band = ZERO
        self._lower_band = ZERO
        self._jma = ZERO
        self._volty: Deque[Decimal] = deque(maxlen=_VOLTY_SUM_LENGTH + 1)
        self._volty_sum = ZERO
        self._volty_sums: Deque[Decimal] = deque(maxlen=_VOLTY_AVG_LENGTH + 1)

    @property
    def value(self) -> Decimal:
        return self._jma

    def update(self, value: Number) -> Decimal:
        price = to_decimal(value)
        self._count += 1
        if self._count == 1:
            self._ma1 = self._upper_band = self._lower_band = self._jma = price
            self._volty.append(ZERO)
            self._volty_sums.append(ZERO)
            return self._jma

        del1 = price - self._upper_band
        del2 = price - self._lower_band
        volty = max(abs(del1), abs(del2)) if abs(del1) != abs(del2) else ZERO
        self._volty.append(volty)
        # volty[max(i - 10, 0)] is the oldest entry once the deque is full
        self._volty_sum += (volty - self._volty[0]) / _VOLTY_SUM_LENGTH
        self._volty_sums.append(self._volty_sum)

        avg_volty = sum(self._volty_sums, ZERO) / len(self._volty_sums)
        d_volty = safe_divide(volty, avg_volty)
        r_volty = max(ONE, min(self._volty_limit, d_volty))
        power = _power(r_volty, self._pow1)
        kv = _power(self._bet, power.sqrt())
        self._upper_band = price if del1 > 0 else price - kv * del1
        self._lower_band = price if del2 < 0 else price - kv * del2

        alpha = _power(self._beta, power)
        self._ma1 = (ONE - alpha) * price + alpha * self._ma1
        self._det0 = (price - self._ma1) * (ONE - self._beta) + self._beta * self._det0
        ma2 = self._ma1 + self.phase_ratio * self._det0
        self._det1 = (ma2 - self._jma) * (ONE - alpha) * (ONE - alpha) + alpha * alpha * self._det1
        self._jma = self._jma + self._det1
        return self._jma


@dataclass
class RsxFilter:
    """Jurik RSX oscillator (0..100).

    Stage names follow the published listing (f28/f30 momentum, f58/f60
    absolute momentum, and so on) so the sequence can be audited against it.
    """

    length: int = 14
    f8: Decimal = ZERO
    f28: Decimal = ZERO
    f30: Decimal = ZERO
    f38: Decimal = ZERO
    f40: Decimal = ZERO
    f48: Decimal = ZERO
    f50: Decimal = ZERO
    f58: Decimal = ZERO
    f60: Decimal = ZERO
    f68: Decimal = ZERO
    f70: Decimal = ZERO
    f78: Decimal = ZERO
    f80: Decimal = ZERO
    f88: Decimal = ZERO
    f90: Decimal = ZERO
    f0: Decimal = ZERO
    last: Optional[Decimal] = field(default=None)

    def __post_init__(self):
        self.f18 = Decimal(3) / Decimal(self.length + 2)
        self.f20 = ONE - self.f18

    def _smooth(self, prev: Decimal, source: Decimal) -> Decimal:
        return self.f20 * prev + self.f18 * source

    def update(self, value: Number) -> Decimal:
        price = to_decimal(value)
        v14 = v20 = ZERO

        if self.f90 == 0:
            self.f90 = ONE
            self.f0 = ZERO
            self.f88 = Decimal(self.length - 1) if self.length - 1 >= 5 else Decimal(5)
            self.f8 = _HUNDRED * price
        else:
            self.f90 = self.f88 + ONE if self.f88 <= self.f90 else self.f90 + ONE
            f10 = self.f8
            self.f8 = _HUNDRED * price
            v8 = self.f8 - f10

            self.f28 = self._smooth(self.f28, v8)
            self.f30 = self._smooth(self.f30, self.f28)
            v_c = self.f28 * Decimal("1.5") - self.f30 * _HALF
            self.f38 = self._smooth(self.f38, v_c)
            self.f40 = self._smooth(self.f40, self.f38)
            v10 = self.f38 * Decimal("1.5") - self.f40 * _HALF
            self.f48 = self._smooth(self.f48, v10)
            self.f50 = self._smooth(self.f50, self.f48)
            v14 = self.f48 * Decimal("1.5") - self.f50 * _HALF

            self.f58 = self._smooth(self.f58, abs(v8))
            self.f60 = self._smooth(self.f60, self.f58)
            v18 = self.f58 * Decimal("1.5") - self.f60 * _HALF
            self.f68 = self._smooth(self.f68, v18)
            self.f70 = self._smooth(self.f70, self.f68)
            v1c = self.f68 * Decimal("1.5") - self.f70 * _HALF
            self.f78 = self._smooth(self.f78, v1c)
            self.f80 = self._smooth(self.f80, self.f78)
            v20 = self.f78 * Decimal("1.5") - self.f80 * _HALF

            if self.f88 >= self.f90 and self.f8 != f10:
                self.f0 = ONE
            if self.f88 == self.f90 and self.f0 == 0:
                # flat price through the whole warm-up: start over
                self.f90 = ZERO

        if self.f88 < self.f90 and v20 > 0:
            rsx = clamp((v14 / v20 + ONE) * _FIFTY, _HUNDRED, ZERO)
        else:
            rsx = _FIFTY
        self.last = rsx
        return rsx
