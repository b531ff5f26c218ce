"""Per-bar signal classification.

- Signal: categorical taxonomy shared by every formula
- Classifiers: compare, RSI-band, volatility and bullish/bearish breakouts
"""

from .base_signal import Signal, count_signals
from .classifier import (
    compare_signal,
    rsi_signal,
    volatility_signal,
    bullish_bearish_signal,
)

__all__ = [
    "Signal",
    "count_signals",
    "compare_signal",
    "rsi_signal",
    "volatility_signal",
    "bullish_bearish_signal",
]
