"""Unified indicator calculator for batch processing."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

import pandas as pd

from ta_core.utils.config import Config
from ta_core.utils.logger import get_logger

from .base_indicator import BaseIndicator
from .context import IndicatorContext
from .errors import IndicatorConfigError
from .oscillators import (
    AcceleratorOscillator,
    AlligatorIndex,
    AwesomeOscillator,
    ChoppinessIndex,
    CommodityChannelIndex,
    JmaRsxClone,
    MoneyFlowIndex,
    StochasticOscillator,
    UlcerIndex,
    WilliamsR,
)

logger = get_logger(__name__)

# Config key -> formula class
INDICATORS: Dict[str, Type[BaseIndicator]] = {
    "cci": CommodityChannelIndex,
    "awesome_oscillator": AwesomeOscillator,
    "accelerator_oscillator": AcceleratorOscillator,
    "choppiness_index": ChoppinessIndex,
    "ulcer_index": UlcerIndex,
    "alligator": AlligatorIndex,
    "williams_r": WilliamsR,
    "stochastic": StochasticOscillator,
    "mfi": MoneyFlowIndex,
    "rsx": JmaRsxClone,
}


@dataclass
class IndicatorConfig:
    """Configuration for batch indicator calculation.

    Every indicator maps to a list of parameter sets, so one formula can run
    with several configurations. E.g. ``{"williams_r": [{"length": 14},
    {"length": 7}]}`` produces ``Williams%R_14`` and ``Williams%R_7``.
    A single set with no parameters produces unsuffixed columns.
    """
    indicators: Dict[str, List[Dict[str, Any]]] = field(
        default_factory=lambda: {name: [{}] for name in INDICATORS}
    )

    def __post_init__(self):
        unknown = sorted(set(self.indicators) - set(INDICATORS))
        if unknown:
            logger.error(f"Unknown indicators in config: {unknown}")
            raise IndicatorConfigError(f"Unknown indicators: {unknown}")

    @staticmethod
    def from_config(config: Config) -> "IndicatorConfig":
        """Build from the ``indicators:`` section of a YAML config.

        An entry may be a mapping (one parameter set), a list of mappings, or
        empty (default parameters). Without an ``indicators:`` section every
        formula runs with defaults.

        Example YAML:
            indicators:
              williams_r:
                - length: 14
                - length: 7
              rsx: {}
        """
        section = config.get("indicators")
        if section is None:
            return IndicatorConfig()
        if not isinstance(section, dict):
            raise IndicatorConfigError("'indicators' must be a mapping of name -> params")

        indicators = {}
        for name, param_sets in section.items():
            if param_sets is None:
                param_sets = [{}]
            elif isinstance(param_sets, dict):
                param_sets = [param_sets]
            indicators[name] = [dict(p or {}) for p in param_sets]
        return IndicatorConfig(indicators=indicators)


class IndicatorCalculator:
    """Runs every configured formula over one context.

    Each formula gets its own ``context.copy()``, so formulas never see each
    other's published outputs. Columns are the published output names with a
    parameter suffix (``Cci_10``, ``Williams%R_7``), plus one
    ``<IndicatorName>_signal`` column per formula run.
    """

    def __init__(self, config: Optional[IndicatorConfig] = None):
        self.config = config or IndicatorConfig()

    def get_indicator_names(self) -> List[str]:
        return list(self.config.indicators)

    def build_indicators(self) -> List[tuple]:
        """Instantiate (suffix, indicator) pairs for every configured set."""
        built = []
        for name, param_sets in self.config.indicators.items():
            indicator_cls = INDICATORS[name]
            for params in param_sets:
                try:
                    indicator = indicator_cls(**params)
                except TypeError as e:
                    raise IndicatorConfigError(f"Invalid parameters for {name}: {e}")
                suffix = "".join(f"_{value}" for value in params.values())
                built.append((suffix, indicator))
        return built

    def calculate_all(self, context: IndicatorContext) -> pd.DataFrame:
        indicators = self.build_indicators()
        logger.info(f"Calculating {len(indicators)} indicators over {len(context)} bars")

        index = context.index if context.index is not None else range(len(context))
        result = pd.DataFrame(index=index)
        for suffix, indicator in indicators:
            missing = [n.value for n in indicator.required_inputs if not context.has_input(n)]
            if missing:
                logger.warning(f"Skipping {indicator.name}{suffix}: missing inputs {missing}")
                continue
            published = indicator(context.copy())
            for output_name, values in published.outputs.items():
                result[f"{output_name}{suffix}"] = values.to_numpy()
            result[f"{indicator.name}_signal{suffix}"] = [s.value for s in published.signals]
            logger.debug(f"{indicator.name}{suffix}: {len(published.outputs)} outputs")

        return result

    def calculate_frame(self, df: pd.DataFrame, input_name: Any = "close") -> pd.DataFrame:
        """Convenience wrapper building the context from an OHLCV DataFrame."""
        return self.calculate_all(IndicatorContext.from_frame(df, input_name=input_name))
