"""
Pipeline context: the per-call container indicator formulas read from and
publish into.

A context is built once from bars. Each indicator call reads input series,
computes, then publishes its named outputs, one Signal per bar, a primary
"custom values" series for chaining, and its own name. The same context is
returned so calls compose. Intermediate series are memoised per context so a
formula that needs another indicator's output does not recompute it.

A context is owned by one calling chain; use ``copy()`` to hand independent
contexts to concurrent work.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, Hashable, Iterable, List, NamedTuple, Optional, Union

import pandas as pd

from ta_core.signals.base_signal import Signal
from ta_core.utils.logger import get_logger

from .base_indicator import BaseIndicator, IndicatorResult
from .moving_average import MovingAverageType, moving_average
from .price import InputName, derive_prices
from .series import Number, Series, ZERO, to_decimal

logger = get_logger(__name__)

REQUIRED_COLUMNS = ["open", "high", "low", "close"]


@dataclass(frozen=True)
class Bar:
    """One OHLCV record."""
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal = ZERO
    timestamp: Optional[Any] = None

    @classmethod
    def of(
        cls,
        open: Number,
        high: Number,
        low: Number,
        close: Number,
        volume: Number = 0,
        timestamp: Optional[Any] = None,
    ) -> "Bar":
        return cls(
            to_decimal(open), to_decimal(high), to_decimal(low),
            to_decimal(close), to_decimal(volume), timestamp,
        )


class InputValues(NamedTuple):
    """The selected input plus the raw companions most formulas need."""
    input: Series
    high: Series
    low: Series
    open: Series
    volume: Series


class IndicatorContext:
    """Input series, published outputs and the signal sequence for one chain.

    Usage:
        context = IndicatorContext.from_frame(df, input_name=InputName.TYPICAL_PRICE)
        WilliamsR(length=14)(context)
        context.output("Williams%R")
        context.signals[-1]
    """

    def __init__(
        self,
        inputs: Dict[InputName, Series],
        input_name: Union[InputName, str] = InputName.CLOSE,
        index: Optional[Iterable[Any]] = None,
    ):
        self._inputs: Dict[InputName, Series] = dict(inputs)
        self.input_name = InputName.parse(input_name)
        self.index = list(index) if index is not None else None
        self.outputs: Dict[str, Series] = {}
        self.signals: List[Signal] = []
        self.custom_values = Series()
        self.indicator_name: Optional[str] = None
        self._cache: Dict[Hashable, Any] = {}

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_bars(
        cls, bars: Iterable[Bar], input_name: Union[InputName, str] = InputName.CLOSE
    ) -> "IndicatorContext":
        bars = list(bars)
        raw = {
            InputName.OPEN: Series(b.open for b in bars),
            InputName.HIGH: Series(b.high for b in bars),
            InputName.LOW: Series(b.low for b in bars),
            InputName.CLOSE: Series(b.close for b in bars),
            InputName.VOLUME: Series(b.volume for b in bars),
        }
        index = [b.timestamp for b in bars] if any(b.timestamp is not None for b in bars) else None
        return cls._with_derived(raw, input_name, index)

    @classmethod
    def from_frame(
        cls, df: pd.DataFrame, input_name: Union[InputName, str] = InputName.CLOSE
    ) -> "IndicatorContext":
        """Build from an OHLCV DataFrame.

        ``volume`` is optional; without it the context has no volume input.

        Raises:
            ValueError: A price column is missing
        """
        missing = set(REQUIRED_COLUMNS) - set(df.columns)
        if missing:
            raise ValueError(f"Missing required columns: {sorted(missing)}")

        raw = {InputName(column): Series(df[column].tolist()) for column in REQUIRED_COLUMNS}
        if "volume" in df.columns:
            raw[InputName.VOLUME] = Series(df["volume"].tolist())
        return cls._with_derived(raw, input_name, df.index)

    @classmethod
    def _with_derived(cls, raw, input_name, index) -> "IndicatorContext":
        inputs = dict(raw)
        inputs.update(derive_prices(
            raw[InputName.OPEN], raw[InputName.HIGH], raw[InputName.LOW], raw[InputName.CLOSE],
        ))
        context = cls(inputs, input_name=input_name, index=index)
        logger.debug(f"Context built: {len(context)} bars, input={context.input_name.value}")
        return context

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._inputs[InputName.CLOSE]) if InputName.CLOSE in self._inputs else 0

    @property
    def count(self) -> int:
        return len(self)

    def has_input(self, name: Union[InputName, str]) -> bool:
        return InputName.parse(name) in self._inputs

    def series(self, name: Union[InputName, str]) -> Series:
        """Raw or derived input series by name.

        Raises:
            KeyError: The context has no such input (e.g. volume was not supplied)
        """
        key = InputName.parse(name)
        if key not in self._inputs:
            raise KeyError(key.value)
        return self._inputs[key]

    def input_values(self, input_name: Optional[Union[InputName, str]] = None) -> InputValues:
        """Selected input with high, low, open and volume.

        A missing volume input is returned as an empty series, which reads
        as zero at every index.
        """
        name = self.input_name if input_name is None else InputName.parse(input_name)
        return InputValues(
            input=self.series(name),
            high=self._inputs[InputName.HIGH],
            low=self._inputs[InputName.LOW],
            open=self._inputs[InputName.OPEN],
            volume=self._inputs.get(InputName.VOLUME, Series()),
        )

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------

    def output(self, name: str) -> Series:
        return self.outputs[name]

    def set_output(self, name: str, values: Series) -> None:
        self.outputs[name] = values

    def publish(
        self,
        indicator_name: str,
        outputs: Dict[str, Series],
        signals: List[Signal],
        custom_values: Optional[Series] = None,
    ) -> "IndicatorContext":
        """Replace the published outputs with one indicator's results."""
        self.outputs = {}
        for name, values in outputs.items():
            self.set_output(name, values)
        self.signals = list(signals)
        self.custom_values = custom_values if custom_values is not None else Series()
        self.indicator_name = indicator_name
        return self

    def result(self) -> IndicatorResult:
        return IndicatorResult(
            name=self.indicator_name or "",
            outputs=dict(self.outputs),
            signals=list(self.signals),
            custom_values=self.custom_values,
        )

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def cached(self, key: Hashable, factory: Callable[[], Any]) -> Any:
        """Return the memoised value for ``key``, computing it on first use."""
        if key not in self._cache:
            self._cache[key] = factory()
        return self._cache[key]

    def moving_average(
        self,
        ma_type: Union[MovingAverageType, str],
        length: int,
        series: Union[Series, InputName, str],
        key: Optional[Hashable] = None,
        **options: Any,
    ) -> Series:
        """Dispatcher call with per-context memoisation.

        An input name (``"close"``, ``InputName.TYPICAL_PRICE``) is resolved
        against the context and cached automatically; a plain Series is cached
        only under an explicit ``key``. The context's volume feeds
        VOLUME_WEIGHTED.
        """
        ma_type = MovingAverageType.parse(ma_type)
        if not isinstance(series, Series):
            name = InputName.parse(series)
            series = self.series(name)
            key = ("input", name)
        volume = self._inputs.get(InputName.VOLUME)

        def compute() -> Series:
            return moving_average(ma_type, length, series, volume=volume, **options)

        if key is None:
            return compute()
        cache_key = ("ma", key, ma_type, length, tuple(sorted(options.items())))
        return self.cached(cache_key, compute)

    def require(self, indicator: BaseIndicator) -> IndicatorResult:
        """Compute another indicator once per context and return its results.

        The caller's published outputs are left untouched.
        """
        def compute() -> IndicatorResult:
            saved = (self.outputs, self.signals, self.custom_values, self.indicator_name)
            indicator(self)
            result = self.result()
            result.params = dict(indicator.params)
            self.outputs, self.signals, self.custom_values, self.indicator_name = saved
            return result

        return self.cached(("indicator",) + indicator.cache_key, compute)

    def copy(self) -> "IndicatorContext":
        """Independent context with the same inputs, outputs and cache."""
        clone = IndicatorContext(
            {name: values.copy() for name, values in self._inputs.items()},
            input_name=self.input_name,
            index=self.index,
        )
        clone.outputs = {name: values.copy() for name, values in self.outputs.items()}
        clone.signals = list(self.signals)
        clone.custom_values = self.custom_values.copy()
        clone.indicator_name = self.indicator_name
        clone._cache = copy.deepcopy(self._cache)
        return clone

    def to_frame(self) -> pd.DataFrame:
        """Published outputs as float columns plus a ``signal`` column."""
        index = self.index if self.index is not None else range(len(self))
        frame = pd.DataFrame(index=index)
        for name, values in self.outputs.items():
            frame[name] = values.to_numpy()
        if len(self.signals) == len(frame):
            frame["signal"] = [signal.value for signal in self.signals]
        return frame
