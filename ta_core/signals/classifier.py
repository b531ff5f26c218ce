"""Signal classifiers: numeric bar-to-bar comparisons to a Signal member.

All classifiers are stateless and total. They look at the current and
previous bar only and return ``Signal.NONE`` for zero deltas and equal values.

Conventions:
    - A "delta" is a difference whose sign carries the direction, e.g.
      ``value - signal_line`` or ``value - previous_value``.
    - Thresholds are passed explicitly since oscillators use different
      scales (0..100, -100..100, 0..1).
"""

from decimal import Decimal
from typing import Union

from .base_signal import Signal

Numeric = Union[Decimal, int, float]


def compare_signal(
    current: Numeric,
    previous: Numeric,
    reverse: bool = False,
    strict: bool = False,
) -> Signal:
    """Classify a zero-line crossing of a delta.

    BULLISH when ``current > 0`` and ``previous <= 0``; BEARISH when
    ``current < 0`` and ``previous >= 0``; otherwise NONE.

    Args:
        current: Delta on this bar
        previous: Delta on the previous bar
        reverse: Swap BULLISH and BEARISH, for series where rising is bad
        strict: Also require ``previous != 0`` (a genuine sign reversal), so a
            move off a flat bar does not fire
    """
    if strict and previous == 0:
        signal = Signal.NONE
    elif current > 0 and previous <= 0:
        signal = Signal.BULLISH
    elif current < 0 and previous >= 0:
        signal = Signal.BEARISH
    else:
        signal = Signal.NONE
    return signal.mirror() if reverse else signal


def rsi_signal(
    current_delta: Numeric,
    previous_delta: Numeric,
    current_value: Numeric,
    previous_value: Numeric,
    overbought: Numeric,
    oversold: Numeric,
) -> Signal:
    """Threshold-band classification with a compare-signal fallback.

    A value crossing above ``overbought`` is OVERBOUGHT and a value crossing
    below ``oversold`` is OVERSOLD. A crossing takes precedence over any
    directional reading of the deltas on the same bar; without a crossing the
    deltas are classified by ``compare_signal``.

    Example:
        rsi_signal(7, 5, 72, 65, 70, 30)   # Signal.OVERBOUGHT
        rsi_signal(-7, -5, 28, 35, 70, 30) # Signal.OVERSOLD
    """
    if current_value > overbought and previous_value <= overbought:
        return Signal.OVERBOUGHT
    if current_value < oversold and previous_value >= oversold:
        return Signal.OVERSOLD
    return compare_signal(current_delta, previous_delta)


def volatility_signal(
    current: Numeric,
    previous: Numeric,
    volatility: Numeric,
    threshold: Numeric,
) -> Signal:
    """Directional crossing, upgraded when volatility breaks out.

    The deltas are classified by ``compare_signal``. A directional result on a
    bar whose ``volatility`` exceeds ``threshold`` becomes
    VOLATILITY_EXPANSION; at or below the threshold it is returned as is.
    """
    signal = compare_signal(current, previous)
    if signal.is_directional() and volatility > threshold:
        return Signal.VOLATILITY_EXPANSION
    return signal


def bullish_bearish_signal(
    upper_current: Numeric,
    upper_previous: Numeric,
    lower_current: Numeric,
    lower_previous: Numeric,
) -> Signal:
    """Breakout of a primary line against two companion lines.

    ``upper_*`` is ``primary - max(companions)`` and ``lower_*`` is
    ``primary - min(companions)``. BULLISH when the primary rises above both
    companions on this bar but was not above them before; BEARISH when it
    drops below both and was not below them before.
    """
    if upper_current > 0 and upper_previous <= 0:
        return Signal.BULLISH
    if lower_current < 0 and lower_previous >= 0:
        return Signal.BEARISH
    return Signal.NONE
