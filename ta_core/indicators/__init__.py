"""Technical indicator calculation module.

Provides the building blocks and formulas for per-bar indicator series:
- Series and Decimal helpers, rolling-window max/min/sum/average
- Moving-average dispatcher over 13 variants with incremental state
- Pipeline context that formulas read from and publish into
- Oscillator formulas: CCI, AO, AC, Choppiness, Ulcer, Alligator,
  Williams %R, Stochastic, MFI, RSX
- Unified calculator for batch processing
"""

from .series import Series, to_decimal, safe_divide
from .errors import IndicatorConfigError, validate_length
from .rolling_window import RollingWindow, rolling_max_min, rolling_sum, rolling_average
from .moving_average import MovingAverageType, create_state, moving_average
from .price import InputName
from .base_indicator import BaseIndicator, IndicatorResult
from .context import Bar, IndicatorContext
from .oscillators import (
    CommodityChannelIndex,
    AwesomeOscillator,
    AcceleratorOscillator,
    ChoppinessIndex,
    UlcerIndex,
    AlligatorIndex,
    WilliamsR,
    StochasticOscillator,
    MoneyFlowIndex,
    JmaRsxClone,
)
from .indicator_calculator import IndicatorCalculator, IndicatorConfig, INDICATORS

__all__ = [
    # Core
    "Series",
    "to_decimal",
    "safe_divide",
    "IndicatorConfigError",
    "validate_length",
    "RollingWindow",
    "rolling_max_min",
    "rolling_sum",
    "rolling_average",
    "MovingAverageType",
    "create_state",
    "moving_average",
    "InputName",
    # Pipeline
    "BaseIndicator",
    "IndicatorResult",
    "Bar",
    "IndicatorContext",
    # Oscillators
    "CommodityChannelIndex",
    "AwesomeOscillator",
    "AcceleratorOscillator",
    "ChoppinessIndex",
    "UlcerIndex",
    "AlligatorIndex",
    "WilliamsR",
    "StochasticOscillator",
    "MoneyFlowIndex",
    "JmaRsxClone",
    # Calculator
    "IndicatorCalculator",
    "IndicatorConfig",
    "INDICATORS",
]
