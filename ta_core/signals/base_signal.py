"""Signal taxonomy shared by every indicator formula."""

from enum import Enum
from typing import Iterable


class Signal(str, Enum):
    """Per-bar categorical classification of indicator behaviour.

    - BULLISH / BEARISH: directional transition (crossover or turn)
    - OVERBOUGHT / OVERSOLD: value crossed a threshold band
    - VOLATILITY_EXPANSION: directional transition during a volatility breakout
    - NONE: flat, continuing, or degenerate input
    """
    BULLISH = "bullish"
    BEARISH = "bearish"
    OVERBOUGHT = "overbought"
    OVERSOLD = "oversold"
    VOLATILITY_EXPANSION = "volatility_expansion"
    NONE = "none"

    def is_bullish(self) -> bool:
        return self is Signal.BULLISH

    def is_bearish(self) -> bool:
        return self is Signal.BEARISH

    def is_directional(self) -> bool:
        return self in (Signal.BULLISH, Signal.BEARISH)

    def mirror(self) -> "Signal":
        """Swap bullish/bearish and overbought/oversold; other members map to themselves."""
        return _MIRROR.get(self, self)


_MIRROR = {
    Signal.BULLISH: Signal.BEARISH,
    Signal.BEARISH: Signal.BULLISH,
    Signal.OVERBOUGHT: Signal.OVERSOLD,
    Signal.OVERSOLD: Signal.OVERBOUGHT,
}


def count_signals(signals: Iterable[Signal]) -> dict:
    """Tally of each member in a signal sequence, every member present."""
    counts = {member: 0 for member in Signal}
    for signal in signals:
        counts[signal] += 1
    return counts
