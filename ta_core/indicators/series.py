"""Index-aligned decimal series and the neutral-default helpers built on it.

Every value is a ``decimal.Decimal``. Reads outside the populated range
(negative indices included) return zero instead of raising, so formulas can
look back ``i - 1`` or ``i - 2`` at the first bars without special cases.
"""

from decimal import Decimal
from typing import Any, Iterable, Iterator, List, Optional, Union

import numpy as np
import pandas as pd

ZERO = Decimal(0)
ONE = Decimal(1)

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` rather
    than its binary expansion. NaN and None map to zero.
    """
    if isinstance(value, Decimal):
        return ZERO if value.is_nan() else value
    if value is None:
        return ZERO
    if isinstance(value, (float, np.floating)):
        # np.float64 subclasses float; its repr is "np.float64(...)" on numpy 2
        value = float(value)
        if value != value:
            return ZERO
        return Decimal(repr(value))
    if isinstance(value, (int, np.integer)):
        return Decimal(int(value))
    return Decimal(str(value))


def safe_divide(numerator: Decimal, denominator: Decimal, default: Decimal = ZERO) -> Decimal:
    """``numerator / denominator``, or ``default`` when the denominator is zero."""
    if denominator == 0:
        return default
    return numerator / denominator


def clamp(value: Decimal, upper: Decimal, lower: Decimal) -> Decimal:
    """Bound ``value`` to ``[lower, upper]``."""
    return min(max(value, lower), upper)


class Series:
    """Append-only sequence of Decimals, one per bar.

    Usage:
        s = Series([10, 11, 12])
        s.get(-1)      # Decimal('0')
        s.get(1)       # Decimal('11')
        s.append(13)
        s.take_last(2) # [Decimal('12'), Decimal('13')]
    """

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Iterable[Number]] = None):
        self._values: List[Decimal] = []
        if values is not None:
            self._values.extend(to_decimal(v) for v in values)

    def append(self, value: Number) -> None:
        self._values.append(to_decimal(value))

    def extend(self, values: Iterable[Number]) -> None:
        self._values.extend(to_decimal(v) for v in values)

    def get(self, index: int, default: Decimal = ZERO) -> Decimal:
        """Value at ``index``, or ``default`` when outside ``[0, len)``."""
        if 0 <= index < len(self._values):
            return self._values[index]
        return default

    def last(self, default: Decimal = ZERO) -> Decimal:
        """Most recent value, or ``default`` for an empty series."""
        return self._values[-1] if self._values else default

    def take_last(self, count: int) -> List[Decimal]:
        """Trailing ``count`` values; fewer when the series is shorter."""
        if count <= 0:
            return []
        return self._values[-count:]

    def copy(self) -> "Series":
        clone = Series()
        clone._values = list(self._values)
        return clone

    def to_list(self) -> List[Decimal]:
        return list(self._values)

    def to_numpy(self) -> np.ndarray:
        return np.array([float(v) for v in self._values], dtype=float)

    def to_pandas(self, index: Optional[Any] = None, name: Optional[str] = None) -> pd.Series:
        return pd.Series(self.to_numpy(), index=index, name=name)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Decimal]:
        return iter(self._values)

    def __getitem__(self, index):
        """Slices return a Series; integer reads follow ``get`` (zero outside the range)."""
        if isinstance(index, slice):
            return Series(self._values[index])
        return self.get(index)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Series):
            return self._values == other._values
        if isinstance(other, (list, tuple)):
            return len(other) == len(self._values) and all(
                a == to_decimal(b) for a, b in zip(self._values, other)
            )
        return NotImplemented

    def __repr__(self) -> str:
        return f"Series({[str(v) for v in self._values]})"
