"""
Moving average dispatcher.

``moving_average(ma_type, length, series)`` smooths a series with one of a
closed set of algorithms. Each variant is a small state object with an
``update(value)`` step; the dispatcher feeds it every bar of the input.

Windowed variants compute from the trailing window only:
    SIMPLE, WEIGHTED, TRIANGULAR, VOLUME_WEIGHTED, HULL (nested WMAs)

Recursive variants follow ``out[i] = out[i-1] + alpha * (in[i] - out[i-1])``:
    EXPONENTIAL           alpha = 2 / (length + 1)
    WILDER                alpha = 1 / length
    DOUBLE_EXPONENTIAL    2*e1 - e2
    TRIPLE_EXPONENTIAL    3*e1 - 3*e2 + e3
    ZERO_LAG_EXPONENTIAL  EMA of in[i] + (in[i] - in[i - lag]), lag = (length - 1) // 2
    T3                    six cascaded EMAs blended by the volume factor
    KAUFMAN_ADAPTIVE      alpha from the efficiency ratio (see KaufmanState)
    JURIK                 alpha from the volatility ratio (see jurik.JurikFilter)

Seeds: every recursive stage starts from its own first input,
``out[0] = in[0]``, never from zero. A constant input is therefore a fixed
point of every variant from the first bar.
"""

from __future__ import annotations

import copy
import math
from collections import deque
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Deque, Dict, Optional, Union

from ta_core.utils.logger import get_logger

from .errors import IndicatorConfigError, validate_length
from .jurik import JurikFilter
from .rolling_window import RollingWindow
from .series import Number, ONE, Series, ZERO, safe_divide, to_decimal

logger = get_logger(__name__)

_TWO = Decimal(2)
_THREE = Decimal(3)


class MovingAverageType(str, Enum):
    """Supported smoothing algorithms."""
    SIMPLE = "simple"
    WEIGHTED = "weighted"
    TRIANGULAR = "triangular"
    VOLUME_WEIGHTED = "volume_weighted"
    HULL = "hull"
    EXPONENTIAL = "exponential"
    WILDER = "wilder"
    DOUBLE_EXPONENTIAL = "double_exponential"
    TRIPLE_EXPONENTIAL = "triple_exponential"
    ZERO_LAG_EXPONENTIAL = "zero_lag_exponential"
    T3 = "t3"
    KAUFMAN_ADAPTIVE = "kaufman_adaptive"
    JURIK = "jurik"

    @property
    def is_recursive(self) -> bool:
        return self not in _WINDOWED

    @property
    def requires_volume(self) -> bool:
        return self is MovingAverageType.VOLUME_WEIGHTED

    @classmethod
    def parse(cls, value: Union["MovingAverageType", str]) -> "MovingAverageType":
        """Accept a member, its value (``"simple"``) or its name (``"SIMPLE"``).

        Raises:
            IndicatorConfigError: ``value`` names no supported variant
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip()
            for member in cls:
                if key.lower() == member.value or key.upper() == member.name:
                    return member
        logger.error(f"Unknown moving average type: {value!r}")
        raise IndicatorConfigError(f"Unknown moving average type: {value!r}")


_WINDOWED = frozenset({
    MovingAverageType.SIMPLE,
    MovingAverageType.WEIGHTED,
    MovingAverageType.TRIANGULAR,
    MovingAverageType.VOLUME_WEIGHTED,
    MovingAverageType.HULL,
})


# ---------------------------------------------------------------------------
# Windowed variants
# ---------------------------------------------------------------------------

class SimpleState:
    def __init__(self, length: int):
        self._window = RollingWindow(length)

    def update(self, value: Number) -> Decimal:
        self._window.push(value)
        return self._window.average


class WeightedState:
    """Linear weights ``1..count``, newest bar heaviest."""

    def __init__(self, length: int):
        self._window: Deque[Decimal] = deque(maxlen=length)

    def update(self, value: Number) -> Decimal:
        self._window.append(to_decimal(value))
        weighted = sum((Decimal(w) * v for w, v in enumerate(self._window, start=1)), ZERO)
        count = len(self._window)
        return weighted / Decimal(count * (count + 1) // 2)


class TriangularState:
    """SMA of an SMA; the two lengths overlap to span ``length`` bars."""

    def __init__(self, length: int):
        self._first = SimpleState((length + 1) // 2)
        self._second = SimpleState(length // 2 + 1)

    def update(self, value: Number) -> Decimal:
        return self._second.update(self._first.update(value))


class VolumeWeightedState:
    """Trailing ``sum(price * volume) / sum(volume)``; zero volume gives zero."""

    def __init__(self, length: int):
        self._price_volume = RollingWindow(length)
        self._volume = RollingWindow(length)

    def update(self, value: Number, volume: Number = ZERO) -> Decimal:
        price, volume = to_decimal(value), to_decimal(volume)
        self._price_volume.push(price * volume)
        self._volume.push(volume)
        return safe_divide(self._price_volume.total, self._volume.total)


class HullState:
    def __init__(self, length: int):
        half_length = max(round(length / 2), 1)
        sqrt_length = max(round(math.sqrt(length)), 1)
        self._half = WeightedState(half_length)
        self._full = WeightedState(length)
        self._out = WeightedState(sqrt_length)

    def update(self, value: Number) -> Decimal:
        raw = _TWO * self._half.update(value) - self._full.update(value)
        return self._out.update(raw)


# ---------------------------------------------------------------------------
# Recursive variants
# ---------------------------------------------------------------------------

@dataclass
class EMAState:
    """Constant-alpha recursive filter, shared by EMA and Wilder smoothing.

    EMA    -> alpha = 2 / (length + 1)   via ``ema_state``
    Wilder -> alpha = 1 / length          via ``wilder_state``
    """
    alpha: Decimal
    last: Optional[Decimal] = None

    def update(self, value: Number) -> Decimal:
        x = to_decimal(value)
        if self.last is None:
            self.last = x
        else:
            self.last = self.last + self.alpha * (x - self.last)
        return self.last


def ema_state(length: int) -> EMAState:
    return EMAState(alpha=_TWO / Decimal(length + 1))


def wilder_state(length: int) -> EMAState:
    return EMAState(alpha=ONE / Decimal(length))


class DoubleExponentialState:
    def __init__(self, length: int):
        self._e1 = ema_state(length)
        self._e2 = ema_state(length)

    def update(self, value: Number) -> Decimal:
        e1 = self._e1.update(value)
        e2 = self._e2.update(e1)
        return _TWO * e1 - e2


class TripleExponentialState:
    def __init__(self, length: int):
        self._e1 = ema_state(length)
        self._e2 = ema_state(length)
        self._e3 = ema_state(length)

    def update(self, value: Number) -> Decimal:
        e1 = self._e1.update(value)
        e2 = self._e2.update(e1)
        e3 = self._e3.update(e2)
        return _THREE * e1 - _THREE * e2 + e3


class ZeroLagExponentialState:
    """EMA of a de-lagged input; bars before ``lag`` feed the raw input."""

    def __init__(self, length: int):
        self.lag = (length - 1) // 2
        self._inputs: Deque[Decimal] = deque(maxlen=self.lag + 1)
        self._ema = ema_state(length)

    def update(self, value: Number) -> Decimal:
        x = to_decimal(value)
        self._inputs.append(x)
        if len(self._inputs) > self.lag:
            x = x + (x - self._inputs[0])
        return self._ema.update(x)


class T3State:
    """Tillson T3: weighted blend of EMA stages 3 through 6."""

    def __init__(self, length: int, volume_factor: Number = Decimal("0.7")):
        v = to_decimal(volume_factor)
        self._stages = [ema_state(length) for _ in range(6)]
        self._c1 = -v ** 3
        self._c2 = 3 * v ** 2 + 3 * v ** 3
        self._c3 = -6 * v ** 2 - 3 * v - 3 * v ** 3
        self._c4 = 1 + 3 * v + v ** 3 + 3 * v ** 2

    def update(self, value: Number) -> Decimal:
        x = to_decimal(value)
        outputs = []
        for stage in self._stages:
            x = stage.update(x)
            outputs.append(x)
        e3, e4, e5, e6 = outputs[2:]
        return self._c1 * e6 + self._c2 * e5 + self._c3 * e4 + self._c4 * e3


@dataclass
class KaufmanState:
    """Kaufman adaptive moving average.

    er    = |x - x[length ago]| / sum(|x[j] - x[j-1]|) over the last ``length`` changes
    sc    = (er * (fast_sc - slow_sc) + slow_sc) ** 2
    out   = out[-1] + sc * (x - out[-1])

    At the start the oldest available bar stands in for ``x[length ago]``.
    When the noise sum is zero the previous efficiency ratio is reused.
    """
    length: int
    fast: int = 2
    slow: int = 30
    last: Optional[Decimal] = None
    efficiency: Decimal = ZERO
    inputs: Deque[Decimal] = field(default_factory=deque)
    changes: Deque[Decimal] = field(default_factory=deque)

    def __post_init__(self):
        self.fast = validate_length(self.fast, "fast")
        self.slow = validate_length(self.slow, "slow")
        self.inputs = deque(self.inputs, maxlen=self.length + 1)
        self.changes = deque(self.changes, maxlen=self.length)
        self._fast_sc = _TWO / Decimal(self.fast + 1)
        self._slow_sc = _TWO / Decimal(self.slow + 1)

    def update(self, value: Number) -> Decimal:
        x = to_decimal(value)
        if self.inputs:
            self.changes.append(abs(x - self.inputs[-1]))
        self.inputs.append(x)

        if self.last is None:
            self.last = x
            return self.last

        direction = abs(x - self.inputs[0])
        noise = sum(self.changes, ZERO)
        self.efficiency = safe_divide(direction, noise, self.efficiency)
        sc = (self.efficiency * (self._fast_sc - self._slow_sc) + self._slow_sc) ** 2
        self.last = self.last + sc * (x - self.last)
        return self.last


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

_FACTORIES: Dict[MovingAverageType, Callable[..., Any]] = {
    MovingAverageType.SIMPLE: SimpleState,
    MovingAverageType.WEIGHTED: WeightedState,
    MovingAverageType.TRIANGULAR: TriangularState,
    MovingAverageType.VOLUME_WEIGHTED: VolumeWeightedState,
    MovingAverageType.HULL: HullState,
    MovingAverageType.EXPONENTIAL: ema_state,
    MovingAverageType.WILDER: wilder_state,
    MovingAverageType.DOUBLE_EXPONENTIAL: DoubleExponentialState,
    MovingAverageType.TRIPLE_EXPONENTIAL: TripleExponentialState,
    MovingAverageType.ZERO_LAG_EXPONENTIAL: ZeroLagExponentialState,
    MovingAverageType.T3: T3State,
    MovingAverageType.KAUFMAN_ADAPTIVE: KaufmanState,
    MovingAverageType.JURIK: JurikFilter,
}

# State class each factory builds, for checking a caller-supplied state
_STATE_TYPES: Dict[MovingAverageType, type] = {
    ma_type: (EMAState if factory in (ema_state, wilder_state) else factory)
    for ma_type, factory in _FACTORIES.items()
}

# Extra keyword options each variant accepts
_OPTIONS: Dict[MovingAverageType, frozenset] = {
    MovingAverageType.T3: frozenset({"volume_factor"}),
    MovingAverageType.KAUFMAN_ADAPTIVE: frozenset({"fast", "slow"}),
    MovingAverageType.JURIK: frozenset({"phase"}),
}


def create_state(ma_type: Union[MovingAverageType, str], length: int, **options: Any) -> Any:
    """Build a fresh state object for one variant.

    Raises:
        IndicatorConfigError: Unknown variant, bad length or unsupported option
    """
    ma_type = MovingAverageType.parse(ma_type)
    length = validate_length(length)
    unknown = set(options) - _OPTIONS.get(ma_type, frozenset())
    if unknown:
        logger.error(f"Unsupported options for {ma_type.value}: {sorted(unknown)}")
        raise IndicatorConfigError(
            f"Unsupported options for {ma_type.value}: {sorted(unknown)}"
        )
    return _FACTORIES[ma_type](length, **options)


def _check_state(ma_type: MovingAverageType, state: Any, options: Dict[str, Any]) -> None:
    """Reject a prior state built for another variant, or options that it would ignore."""
    expected = _STATE_TYPES[ma_type]
    if not isinstance(state, expected):
        logger.error(f"{ma_type.value} cannot continue from a {type(state).__name__}")
        raise IndicatorConfigError(
            f"{ma_type.value} needs a {expected.__name__} state, got {type(state).__name__}"
        )
    if options:
        logger.error(f"Options {sorted(options)} conflict with a prior {ma_type.value} state")
        raise IndicatorConfigError(
            f"Options {sorted(options)} cannot be combined with a prior state"
        )


def moving_average(
    ma_type: Union[MovingAverageType, str],
    length: int,
    series: Series,
    volume: Optional[Series] = None,
    state: Optional[Any] = None,
    **options: Any,
) -> Series:
    """Smooth ``series`` with the given algorithm.

    Args:
        ma_type: Variant tag (member, value or name)
        length: Lookback / smoothing length, must be positive
        series: Input series
        volume: Volume series, required by VOLUME_WEIGHTED
        state: Optional prior state to continue from; it is copied, never mutated
        **options: Variant options (``fast``/``slow``, ``phase``, ``volume_factor``)

    Returns:
        Series with the same length and alignment as ``series``

    Raises:
        IndicatorConfigError: Unknown variant, ``length <= 0``, unsupported
            option, missing volume for VOLUME_WEIGHTED, a ``state`` built for
            another variant, or options given together with ``state``
    """
    ma_type = MovingAverageType.parse(ma_type)
    length = validate_length(length)
    if ma_type.requires_volume and volume is None:
        logger.error(f"{ma_type.value} moving average needs a volume series")
        raise IndicatorConfigError(f"{ma_type.value} moving average needs a volume series")

    if state is None:
        state = create_state(ma_type, length, **options)
    else:
        _check_state(ma_type, state, options)
        state = copy.deepcopy(state)
    logger.debug(f"{ma_type.value} moving average: length={length}, bars={len(series)}")

    result = Series()
    if ma_type.requires_volume:
        for i, value in enumerate(series):
            result.append(state.update(value, volume.get(i)))
    else:
        for value in series:
            result.append(state.update(value))
    return result
