"""Input series selection: raw OHLCV columns and derived single-value prices."""

from decimal import Decimal
from enum import Enum
from typing import Union

from .errors import IndicatorConfigError
from .series import Series

_TWO = Decimal(2)
_THREE = Decimal(3)
_FOUR = Decimal(4)


class InputName(str, Enum):
    """Named input series exposed by an IndicatorContext."""
    OPEN = "open"
    HIGH = "high"
    LOW = "low"
    CLOSE = "close"
    VOLUME = "volume"
    TYPICAL_PRICE = "typical"            # (H + L + C) / 3
    MEDIAN_PRICE = "median"              # (H + L) / 2
    WEIGHTED_CLOSE = "weighted_close"    # (H + L + 2C) / 4
    FULL_TYPICAL_PRICE = "full_typical"  # (H + L + C + O) / 4

    @classmethod
    def parse(cls, value: Union["InputName", str]) -> "InputName":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if value.lower() == member.value or value.upper() == member.name:
                    return member
        raise IndicatorConfigError(f"Unknown input name: {value!r}")


def typical_price(high: Decimal, low: Decimal, close: Decimal) -> Decimal:
    return (high + low + close) / _THREE


def median_price(high: Decimal, low: Decimal) -> Decimal:
    return (high + low) / _TWO


def weighted_close(high: Decimal, low: Decimal, close: Decimal) -> Decimal:
    return (high + low + _TWO * close) / _FOUR


def full_typical_price(open_: Decimal, high: Decimal, low: Decimal, close: Decimal) -> Decimal:
    return (high + low + close + open_) / _FOUR


def derive_prices(open_: Series, high: Series, low: Series, close: Series) -> dict:
    """Compute every derived price series once, keyed by InputName."""
    typical, median, weighted, full = Series(), Series(), Series(), Series()
    for o, h, l, c in zip(open_, high, low, close):
        typical.append(typical_price(h, l, c))
        median.append(median_price(h, l))
        weighted.append(weighted_close(h, l, c))
        full.append(full_typical_price(o, h, l, c))
    return {
        InputName.TYPICAL_PRICE: typical,
        InputName.MEDIAN_PRICE: median,
        InputName.WEIGHTED_CLOSE: weighted,
        InputName.FULL_TYPICAL_PRICE: full,
    }
