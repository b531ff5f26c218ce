"""Base class for all indicator formulas."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, TYPE_CHECKING

from ta_core.signals.base_signal import Signal

from .errors import IndicatorConfigError, validate_length
from .price import InputName
from .series import Series

if TYPE_CHECKING:
    from .context import IndicatorContext

__all__ = ["BaseIndicator", "IndicatorResult", "IndicatorConfigError", "validate_length"]


@dataclass
class IndicatorResult:
    """Snapshot of what one indicator call published.

    Attributes:
        name: Indicator identifier (e.g., 'WilliamsR')
        outputs: Named output series (e.g., {'Williams%R': ...})
        signals: One Signal per bar
        custom_values: Primary series for chaining into other formulas
        params: Parameters used for the calculation
    """
    name: str
    outputs: Dict[str, Series] = field(default_factory=dict)
    signals: List[Signal] = field(default_factory=list)
    custom_values: Series = field(default_factory=Series)
    params: Dict[str, Any] = field(default_factory=dict)


class BaseIndicator(ABC):
    """Abstract base class for indicator formulas.

    Subclasses must implement:
        - name: Property returning indicator name
        - required_inputs: Property listing the InputNames the formula reads
        - calculate: Method reading from and publishing into the context

    Usage:
        indicator = ConcreteIndicator(length=14)
        context = indicator(context)  # Validates and calculates
        context.output("Value")
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return indicator name."""
        pass

    @property
    @abstractmethod
    def required_inputs(self) -> List[InputName]:
        """Return the input series the formula reads."""
        pass

    @property
    def params(self) -> Dict[str, Any]:
        """Parameters identifying this configuration of the formula."""
        return {}

    @property
    def cache_key(self) -> Tuple:
        return (self.name,) + tuple(sorted((k, str(v)) for k, v in self.params.items()))

    @abstractmethod
    def calculate(self, context: "IndicatorContext") -> "IndicatorContext":
        """Compute the indicator and publish outputs and signals.

        Args:
            context: Pipeline context holding the input series

        Returns:
            The same context, updated in place
        """
        pass

    def validate_data(self, context: "IndicatorContext") -> None:
        """Check the context provides every required input.

        Raises:
            ValueError: A required input series is missing
        """
        missing = [name.value for name in self.required_inputs if not context.has_input(name)]
        if missing:
            raise ValueError(f"Missing required inputs: {missing}")

    def __call__(self, context: "IndicatorContext") -> "IndicatorContext":
        """Validate inputs and calculate.

        Args:
            context: Pipeline context

        Returns:
            The same context, updated in place
        """
        self.validate_data(context)
        return self.calculate(context)
