"""Oscillator formulas composed from the rolling window engine, the moving
average dispatcher and the signal classifiers.

Every formula reads its inputs from an IndicatorContext, publishes named
outputs plus one Signal per bar, and returns the same context. Look-backs use
``Series.get(i - n)``, which reads zero before the first bar.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from ta_core.signals.classifier import (
    bullish_bearish_signal,
    compare_signal,
    rsi_signal,
    volatility_signal,
)

from .base_indicator import BaseIndicator
from .context import IndicatorContext
from .errors import validate_length, validate_offset
from .jurik import RsxFilter
from .moving_average import MovingAverageType
from .price import InputName
from .rolling_window import rolling_average, rolling_max_min, rolling_sum
from .series import ZERO, Series, clamp, safe_divide, to_decimal

_HUNDRED = Decimal(100)
_PRICE_INPUTS = [InputName.HIGH, InputName.LOW, InputName.CLOSE]

MaType = Union[MovingAverageType, str]


def true_range(high: Decimal, low: Decimal, prev_close: Decimal) -> Decimal:
    return max(high - low, abs(high - prev_close), abs(low - prev_close))


class _Oscillator(BaseIndicator):
    """Shared plumbing: parameter storage and input selection."""

    def __init__(self, input_name: Optional[Union[InputName, str]] = None, **params: Any):
        self.input_name = InputName.parse(input_name) if input_name is not None else None
        self._params = params

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def required_inputs(self) -> List[InputName]:
        return list(_PRICE_INPUTS)

    @property
    def params(self) -> Dict[str, Any]:
        params = dict(self._params)
        if self.input_name is not None:
            params["input_name"] = self.input_name.value
        return params

    def source(self, context: IndicatorContext) -> InputName:
        """Input this formula reads: its own override or the context default."""
        return self.input_name or context.input_name


class CommodityChannelIndex(_Oscillator):
    """CCI: distance of price from its average in mean-deviation units.

    cci = (x - ma(x)) / (constant * ma(|x - ma(x)|)), zero when the mean
    deviation is zero. Signals use the +/-100 bands.
    """

    def __init__(
        self,
        length: int = 20,
        ma_type: MaType = MovingAverageType.SIMPLE,
        input_name: Union[InputName, str] = InputName.TYPICAL_PRICE,
        constant: Union[Decimal, float, str] = Decimal("0.015"),
    ):
        self.length = validate_length(length)
        self.ma_type = MovingAverageType.parse(ma_type)
        self.constant = to_decimal(constant)
        super().__init__(input_name, length=self.length, ma_type=self.ma_type.value,
                         constant=self.constant)

    def calculate(self, context: IndicatorContext) -> IndicatorContext:
        values = context.input_values(self.input_name).input
        average = context.moving_average(self.ma_type, self.length, self.source(context))
        deviation = Series(abs(x - average.get(i)) for i, x in enumerate(values))
        mean_deviation = context.moving_average(
            self.ma_type, self.length, deviation, key=("cci_deviation",) + self.cache_key
        )

        cci_list, signals = Series(), []
        for i, x in enumerate(values):
            prev_cci1 = cci_list.get(i - 1)
            prev_cci2 = cci_list.get(i - 2)
            cci = safe_divide(x - average.get(i), self.constant * mean_deviation.get(i))
            cci_list.append(cci)
            signals.append(rsi_signal(cci - prev_cci1, prev_cci1 - prev_cci2, cci, prev_cci1, 100, -100))

        return context.publish(self.name, {"Cci": cci_list}, signals, cci_list)


class AwesomeOscillator(_Oscillator):
    """Fast minus slow average of the median price; signals on zero-line crosses."""

    def __init__(
        self,
        fast_length: int = 5,
        slow_length: int = 34,
        ma_type: MaType = MovingAverageType.SIMPLE,
        input_name: Union[InputName, str] = InputName.MEDIAN_PRICE,
    ):
        self.fast_length = validate_length(fast_length, "fast_length")
        self.slow_length = validate_length(slow_length, "slow_length")
        self.ma_type = MovingAverageType.parse(ma_type)
        super().__init__(input_name, fast_length=self.fast_length,
                         slow_length=self.slow_length, ma_type=self.ma_type.value)

    def calculate(self, context: IndicatorContext) -> IndicatorContext:
        fast = context.moving_average(self.ma_type, self.fast_length, self.source(context))
        slow = context.moving_average(self.ma_type, self.slow_length, self.source(context))

        ao_list, signals = Series(), []
        for i in range(len(context)):
            prev_ao = ao_list.last()
            ao = fast.get(i) - slow.get(i)
            ao_list.append(ao)
            signals.append(compare_signal(ao, prev_ao))

        return context.publish(self.name, {"Ao": ao_list}, signals, ao_list)


class AcceleratorOscillator(_Oscillator):
    """Awesome oscillator minus its own average.

    The awesome oscillator is pulled through ``context.require`` so a chain
    that already computed it with the same parameters reuses that series.
    """

    def __init__(
        self,
        fast_length: int = 5,
        slow_length: int = 34,
        smooth_length: int = 5,
        ma_type: MaType = MovingAverageType.SIMPLE,
        input_name: Union[InputName, str] = InputName.MEDIAN_PRICE,
    ):
        self.awesome = AwesomeOscillator(fast_length, slow_length, ma_type, input_name)
        self.smooth_length = validate_length(smooth_length, "smooth_length")
        self.ma_type = self.awesome.ma_type
        super().__init__(input_name, smooth_length=self.smooth_length, **self.awesome._params)

    def calculate(self, context: IndicatorContext) -> IndicatorContext:
        ao_list = context.require(self.awesome).custom_values
        ao_average = context.moving_average(
            self.ma_type, self.smooth_length, ao_list, key=self.awesome.cache_key
        )

        ac_list, signals = Series(), []
        for i in range(len(context)):
            prev_ac = ac_list.last()
            ac = ao_list.get(i) - ao_average.get(i)
            ac_list.append(ac)
            signals.append(compare_signal(ac, prev_ac))

        return context.publish(self.name, {"Ac": ac_list}, signals, ac_list)


class ChoppinessIndex(_Oscillator):
    """How much of the true-range travel produced net range (0..100).

    ci = 100 * log10(sum(TR, n) / (highest high - lowest low)) / log10(n),
    zero when the range is zero. Crosses of price over its average become
    VOLATILITY_EXPANSION when ci is above 38.2.
    """

    THRESHOLD = Decimal("38.2")

    def __init__(
        self,
        length: int = 14,
        ma_type: MaType = MovingAverageType.EXPONENTIAL,
        input_name: Optional[Union[InputName, str]] = None,
    ):
        self.length = validate_length(length)
        self.ma_type = MovingAverageType.parse(ma_type)
        super().__init__(input_name, length=self.length, ma_type=self.ma_type.value)

    def calculate(self, context: IndicatorContext) -> IndicatorContext:
        values, high, low, _, _ = context.input_values(self.input_name)
        highest, lowest = rolling_max_min(high, self.length, low)
        average = context.moving_average(self.ma_type, self.length, self.source(context))
        log_length = Decimal(self.length).log10()

        tr_list = Series()
        for i in range(len(context)):
            tr_list.append(true_range(high.get(i), low.get(i), values.get(i - 1)))
        tr_sums = rolling_sum(tr_list, self.length)

        ci_list, signals = Series(), []
        for i, x in enumerate(values):
            price_range = highest.get(i) - lowest.get(i)
            ratio = safe_divide(tr_sums.get(i), price_range)
            ci = safe_divide(_HUNDRED * ratio.log10(), log_length) if price_range > 0 and ratio > 0 else ZERO
            ci_list.append(ci)
            signals.append(volatility_signal(
                x - average.get(i), values.get(i - 1) - average.get(i - 1), ci, self.THRESHOLD
            ))

        return context.publish(self.name, {"Ci": ci_list}, signals, ci_list)


class UlcerIndex(_Oscillator):
    """Root-mean-square percentage drawdown from the trailing high.

    Rising drawdown is bearish, so the compare signal is reversed.
    """

    def __init__(self, length: int = 14, input_name: Optional[Union[InputName, str]] = None):
        self.length = validate_length(length)
        super().__init__(input_name, length=self.length)

    def calculate(self, context: IndicatorContext) -> IndicatorContext:
        values = context.input_values(self.input_name).input
        highest, _ = rolling_max_min(values, self.length)

        squared = Series()
        for i, x in enumerate(values):
            peak = highest.get(i)
            drawdown = safe_divide((x - peak) * _HUNDRED, peak)
            squared.append(drawdown * drawdown)
        squared_avg = rolling_average(squared, self.length)

        ui_list, signals = Series(), []
        for i in range(len(values)):
            prev_ui1 = ui_list.get(i - 1)
            prev_ui2 = ui_list.get(i - 2)
            ui = squared_avg.get(i).sqrt()
            ui_list.append(ui)
            signals.append(compare_signal(ui - prev_ui1, prev_ui1 - prev_ui2, reverse=True))

        return context.publish(self.name, {"Ui": ui_list}, signals, ui_list)


class AlligatorIndex(_Oscillator):
    """Three forward-displaced averages (jaw, teeth, lips).

    A displaced line reads zero until its offset has passed. BULLISH when the
    lips rise above both other lines, BEARISH when they fall below both.
    """

    def __init__(
        self,
        jaw_length: int = 13,
        jaw_offset: int = 8,
        teeth_length: int = 8,
        teeth_offset: int = 5,
        lips_length: int = 5,
        lips_offset: int = 3,
        ma_type: MaType = MovingAverageType.WILDER,
        input_name: Optional[Union[InputName, str]] = None,
    ):
        self.jaw_length = validate_length(jaw_length, "jaw_length")
        self.teeth_length = validate_length(teeth_length, "teeth_length")
        self.lips_length = validate_length(lips_length, "lips_length")
        self.offsets = (
            validate_offset(jaw_offset, "jaw_offset"),
            validate_offset(teeth_offset, "teeth_offset"),
            validate_offset(lips_offset, "lips_offset"),
        )
        self.ma_type = MovingAverageType.parse(ma_type)
        super().__init__(
            input_name, jaw_length=jaw_length, jaw_offset=jaw_offset,
            teeth_length=teeth_length, teeth_offset=teeth_offset,
            lips_length=lips_length, lips_offset=lips_offset, ma_type=self.ma_type.value,
        )

    def calculate(self, context: IndicatorContext) -> IndicatorContext:
        source = self.source(context)
        lines = [
            context.moving_average(self.ma_type, length, source)
            for length in (self.jaw_length, self.teeth_length, self.lips_length)
        ]
        jaws, teeth, lips = Series(), Series(), Series()
        displaced = (jaws, teeth, lips)

        signals = []
        for i in range(len(context)):
            prev_jaw, prev_teeth, prev_lips = (d.last() for d in displaced)
            for line, offset, out in zip(lines, self.offsets, displaced):
                out.append(line.get(i - offset) if i >= offset else ZERO)
            jaw, tooth, lip = jaws.get(i), teeth.get(i), lips.get(i)

            signals.append(bullish_bearish_signal(
                lip - max(jaw, tooth), prev_lips - max(prev_jaw, prev_teeth),
                lip - min(jaw, tooth), prev_lips - min(prev_jaw, prev_teeth),
            ))

        return context.publish(self.name, {"Lips": lips, "Teeth": teeth, "Jaws": jaws}, signals)


class WilliamsR(_Oscillator):
    """Close relative to the trailing high-low range, on a -100..0 scale.

    A zero range reads -100. Bands at -20 and -80.
    """

    def __init__(self, length: int = 14):
        self.length = validate_length(length)
        super().__init__(None, length=self.length)

    def calculate(self, context: IndicatorContext) -> IndicatorContext:
        close, high, low, _, _ = context.input_values(InputName.CLOSE)
        highest, lowest = rolling_max_min(high, self.length, low)

        wr_list, signals = Series(), []
        for i, x in enumerate(close):
            prev_wr1 = wr_list.get(i - 1)
            prev_wr2 = wr_list.get(i - 2)
            hh, ll = highest.get(i), lowest.get(i)
            wr = safe_divide(-_HUNDRED * (hh - x), hh - ll, -_HUNDRED)
            wr_list.append(wr)
            signals.append(rsi_signal(wr - prev_wr1, prev_wr1 - prev_wr2, wr, prev_wr1, -20, -80))

        return context.publish(self.name, {"Williams%R": wr_list}, signals, wr_list)


class StochasticOscillator(_Oscillator):
    """Slow stochastic: %K smoothed twice.

    fast_k = 100 * (x - lowest low) / (highest high - lowest low), clamped to
    0..100 and zero on a zero range. Signals compare slow %K with slow %D
    under the 80/20 bands.
    """

    def __init__(
        self,
        length: int = 14,
        signal_length: int = 3,
        ma_type: MaType = MovingAverageType.SIMPLE,
        input_name: Optional[Union[InputName, str]] = None,
    ):
        self.length = validate_length(length)
        self.signal_length = validate_length(signal_length, "signal_length")
        self.ma_type = MovingAverageType.parse(ma_type)
        super().__init__(input_name, length=self.length, signal_length=self.signal_length,
                         ma_type=self.ma_type.value)

    def calculate(self, context: IndicatorContext) -> IndicatorContext:
        values, high, low, _, _ = context.input_values(self.input_name)
        highest, lowest = rolling_max_min(high, self.length, low)

        fast_k = Series()
        for i, x in enumerate(values):
            hh, ll = highest.get(i), lowest.get(i)
            ratio = safe_divide((x - ll) * _HUNDRED, hh - ll)
            fast_k.append(clamp(ratio, _HUNDRED, ZERO))

        key = self.cache_key
        fast_d = context.moving_average(self.ma_type, self.signal_length, fast_k, key=key + ("fast_k",))
        slow_d = context.moving_average(self.ma_type, self.signal_length, fast_d, key=key + ("fast_d",))

        signals = []
        for i in range(len(values)):
            slow_k, slow_dv = fast_d.get(i), slow_d.get(i)
            prev_slow_k, prev_slow_d = fast_d.get(i - 1), slow_d.get(i - 1)
            signals.append(rsi_signal(
                slow_k - slow_dv, prev_slow_k - prev_slow_d, slow_k, prev_slow_k, 80, 20
            ))

        return context.publish(
            self.name, {"FastK": fast_k, "FastD": fast_d, "SlowD": slow_d}, signals, fast_k
        )


class MoneyFlowIndex(_Oscillator):
    """Volume-weighted RSI of the typical price (0..100).

    100 when there is no negative flow in the window, 0 when there is no
    positive flow. Bands at 80 and 20.
    """

    def __init__(self, length: int = 14, input_name: Union[InputName, str] = InputName.TYPICAL_PRICE):
        self.length = validate_length(length)
        super().__init__(input_name, length=self.length)

    @property
    def required_inputs(self) -> List[InputName]:
        return list(_PRICE_INPUTS) + [InputName.VOLUME]

    def calculate(self, context: IndicatorContext) -> IndicatorContext:
        values, _, _, _, volume = context.input_values(self.input_name)

        positive, negative = Series(), Series()
        for i, price in enumerate(values):
            prev_price = values.get(i - 1)
            raw_flow = price * volume.get(i)
            positive.append(raw_flow if price > prev_price else ZERO)
            negative.append(raw_flow if price < prev_price else ZERO)
        positive_totals = rolling_sum(positive, self.length)
        negative_totals = rolling_sum(negative, self.length)

        mfi_list, signals = Series(), []
        for i in range(len(values)):
            prev_mfi1 = mfi_list.get(i - 1)
            prev_mfi2 = mfi_list.get(i - 2)
            pos_total, neg_total = positive_totals.get(i), negative_totals.get(i)
            ratio = clamp(safe_divide(pos_total, neg_total), Decimal(1), ZERO)
            if neg_total == 0:
                mfi = _HUNDRED
            elif pos_total == 0:
                mfi = ZERO
            else:
                mfi = clamp(_HUNDRED - _HUNDRED / (1 + ratio), _HUNDRED, ZERO)
            mfi_list.append(mfi)
            signals.append(rsi_signal(mfi - prev_mfi1, prev_mfi1 - prev_mfi2, mfi, prev_mfi1, 80, 20))

        return context.publish(self.name, {"Mfi": mfi_list}, signals, mfi_list)


class JmaRsxClone(_Oscillator):
    """Jurik RSX oscillator with 70/30 bands."""

    def __init__(self, length: int = 14, input_name: Optional[Union[InputName, str]] = None):
        self.length = validate_length(length)
        super().__init__(input_name, length=self.length)

    def calculate(self, context: IndicatorContext) -> IndicatorContext:
        values = context.input_values(self.input_name).input
        rsx_filter = RsxFilter(self.length)

        rsx_list, signals = Series(), []
        for i, x in enumerate(values):
            prev_rsx1 = rsx_list.get(i - 1)
            prev_rsx2 = rsx_list.get(i - 2)
            rsx = rsx_filter.update(x)
            rsx_list.append(rsx)
            signals.append(rsi_signal(rsx - prev_rsx1, prev_rsx1 - prev_rsx2, rsx, prev_rsx1, 70, 30))

        return context.publish(self.name, {"Rsx": rsx_list}, signals, rsx_list)
