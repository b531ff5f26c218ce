"""Streaming-friendly technical analysis core: rolling windows, moving averages,
signal classification and oscillator formulas over Decimal price series."""

__version__ = "0.1.0"
