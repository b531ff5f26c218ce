"""
Rolling window statistics: max/min, sum and average over trailing bars.

For bar ``i`` the window is ``series[max(0, i - length + 1) .. i]``: it grows
until ``length`` bars are seen, then slides. Partial windows at the start
produce real statistics, never zero placeholders.

O(1) technique (amortized):
    - Monotonic deque of (value, index) for the max, decreasing by value
    - Monotonic deque of (value, index) for the min, increasing by value
    - Equal values evict older entries, so the extremum is always the most
      recent occurrence (last-seen wins on ties)
    - Running sum kept in an exact decimal context and rounded once on read,
      which makes it numerically identical to summing the trailing slice
"""

from __future__ import annotations

from collections import deque
from decimal import Context, Decimal, MAX_EMAX, MAX_PREC, MIN_EMIN, getcontext
from typing import Deque, Iterable, List, Optional, Tuple

from .errors import validate_length
from .series import Series, ZERO, Number, to_decimal

_EXACT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)


def exact_sum(values: Iterable[Decimal]) -> Decimal:
    """Sum without intermediate rounding."""
    total = ZERO
    for value in values:
        total = _EXACT.add(total, value)
    return total


class RollingWindow:
    """Incremental trailing window over one series (optionally a high/low pair).

    Usage:
        window = RollingWindow(3)
        for value in [4, 7, 5, 7]:
            window.push(value)
        window.maximum   # Decimal('7'), from index 3 (the later 7)
        window.max_age   # 0
        window.total     # Decimal('19')
    """

    def __init__(self, length: int):
        self.length = validate_length(length)
        self._count = 0
        self._window: Deque[Decimal] = deque()
        self._total = ZERO
        # (value, index), decreasing by value
        self._max_deque: Deque[Tuple[Decimal, int]] = deque()
        # (value, index), increasing by value
        self._min_deque: Deque[Tuple[Decimal, int]] = deque()

    def push(self, value: Number, low: Optional[Number] = None) -> None:
        """Add the next bar.

        Args:
            value: Value tracked by the sum and the maximum
            low: Value tracked by the minimum; defaults to ``value``
        """
        high = to_decimal(value)
        low = high if low is None else to_decimal(low)
        current_idx = self._count
        self._count += 1

        # Indices <= window_start have left the window
        window_start = current_idx - self.length
        while self._max_deque and self._max_deque[0][1] <= window_start:
            self._max_deque.popleft()
        while self._min_deque and self._min_deque[0][1] <= window_start:
            self._min_deque.popleft()

        while self._max_deque and self._max_deque[-1][0] <= high:
            self._max_deque.pop()
        self._max_deque.append((high, current_idx))

        while self._min_deque and self._min_deque[-1][0] >= low:
            self._min_deque.pop()
        self._min_deque.append((low, current_idx))

        self._window.append(high)
        self._total = _EXACT.add(self._total, high)
        if len(self._window) > self.length:
            self._total = _EXACT.subtract(self._total, self._window.popleft())

    def reset(self) -> None:
        self._count = 0
        self._window.clear()
        self._total = ZERO
        self._max_deque.clear()
        self._min_deque.clear()

    @property
    def count(self) -> int:
        """Number of bars currently inside the window."""
        return len(self._window)

    @property
    def maximum(self) -> Decimal:
        return self._max_deque[0][0] if self._max_deque else ZERO

    @property
    def minimum(self) -> Decimal:
        return self._min_deque[0][0] if self._min_deque else ZERO

    @property
    def max_age(self) -> int:
        """Bars since the window maximum (0 = current bar)."""
        if not self._max_deque:
            return 0
        return self._count - 1 - self._max_deque[0][1]

    @property
    def min_age(self) -> int:
        """Bars since the window minimum (0 = current bar)."""
        if not self._min_deque:
            return 0
        return self._count - 1 - self._min_deque[0][1]

    @property
    def total(self) -> Decimal:
        return getcontext().plus(self._total)

    @property
    def average(self) -> Decimal:
        if not self._window:
            return ZERO
        return getcontext().divide(self._total, Decimal(len(self._window)))


def rolling_max_min(
    series: Series, length: int, low_series: Optional[Series] = None
) -> Tuple[Series, Series]:
    """Trailing max and min per bar.

    With ``low_series`` the max is taken over ``series`` and the min over
    ``low_series`` (the highest-high / lowest-low form).
    """
    window = RollingWindow(length)
    highest, lowest = Series(), Series()
    for i, value in enumerate(series):
        window.push(value, low_series.get(i) if low_series is not None else None)
        highest.append(window.maximum)
        lowest.append(window.minimum)
    return highest, lowest


def rolling_extremum_age(series: Series, length: int) -> Tuple[Series, Series]:
    """Bars since the trailing max and since the trailing min, per bar."""
    window = RollingWindow(length)
    since_max, since_min = Series(), Series()
    for value in series:
        window.push(value)
        since_max.append(window.max_age)
        since_min.append(window.min_age)
    return since_max, since_min


def rolling_sum(series: Series, length: int) -> Series:
    window = RollingWindow(length)
    result = Series()
    for value in series:
        window.push(value)
        result.append(window.total)
    return result


def rolling_average(series: Series, length: int) -> Series:
    """Trailing sum divided by the actual window size (``<= length`` at the start)."""
    window = RollingWindow(length)
    result = Series()
    for value in series:
        window.push(value)
        result.append(window.average)
    return result


# ---------------------------------------------------------------------------
# Reference semantics: recompute each window from the trailing slice.
# ---------------------------------------------------------------------------

def trailing_slice(values: List[Decimal], index: int, length: int) -> List[Decimal]:
    return values[max(0, index - length + 1): index + 1]


def reference_max_min(series: Series, length: int) -> Tuple[Series, Series]:
    """O(N * length) max/min; ties resolve to the latest index."""
    validate_length(length)
    values = series.to_list()
    highest, lowest = Series(), Series()
    for i in range(len(values)):
        window = trailing_slice(values, i, length)
        hi = lo = window[0]
        for value in window[1:]:
            if value >= hi:
                hi = value
            if value <= lo:
                lo = value
        highest.append(hi)
        lowest.append(lo)
    return highest, lowest


def reference_sum(series: Series, length: int) -> Series:
    validate_length(length)
    values = series.to_list()
    return Series(
        getcontext().plus(exact_sum(trailing_slice(values, i, length)))
        for i in range(len(values))
    )


def reference_average(series: Series, length: int) -> Series:
    validate_length(length)
    values = series.to_list()
    result = Series()
    for i in range(len(values)):
        window = trailing_slice(values, i, length)
        result.append(getcontext().divide(exact_sum(window), Decimal(len(window))))
    return result
