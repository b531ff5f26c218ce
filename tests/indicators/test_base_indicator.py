"""Tests for base indicator class."""

import pytest

from ta_core.indicators.base_indicator import BaseIndicator, IndicatorResult
from ta_core.indicators.context import Bar, IndicatorContext
from ta_core.indicators.price import InputName
from ta_core.indicators.series import Series
from ta_core.signals.base_signal import Signal


class TestIndicatorResult:
    """Tests for IndicatorResult dataclass."""

    def test_indicator_result_creation(self):
        """Test IndicatorResult can be created with required fields."""
        result = IndicatorResult(
            name="TEST_IND",
            outputs={"Value": Series([1, 2, 3])},
            params={"length": 10}
        )
        assert result.name == "TEST_IND"
        assert len(result.outputs["Value"]) == 3
        assert result.params["length"] == 10

    def test_indicator_result_defaults(self):
        """Test optional fields default to empty containers."""
        result = IndicatorResult(name="TEST_IND")
        assert result.signals == []
        assert len(result.custom_values) == 0


class ConcreteIndicator(BaseIndicator):
    """Concrete implementation for testing abstract base class."""

    @property
    def name(self) -> str:
        return "CONCRETE"

    @property
    def required_inputs(self):
        return [InputName.CLOSE, InputName.VOLUME]

    def calculate(self, context):
        values = Series(v * 2 for v in context.series(InputName.CLOSE))
        return context.publish(self.name, {"Double": values}, [Signal.NONE] * len(values), values)


class TestBaseIndicator:
    """Tests for BaseIndicator abstract base class."""

    @pytest.fixture
    def context(self):
        """Create a small context from bars."""
        return IndicatorContext.from_bars([
            Bar.of(10.0, 10.5, 9.5, 10.2, 1000),
            Bar.of(11.0, 11.5, 10.5, 11.2, 1100),
            Bar.of(12.0, 12.5, 11.5, 12.2, 1200),
        ])

    @pytest.fixture
    def indicator(self):
        """Create concrete indicator instance."""
        return ConcreteIndicator()

    def test_abstract_class_cannot_be_instantiated(self):
        """Test that BaseIndicator cannot be instantiated directly."""
        with pytest.raises(TypeError):
            BaseIndicator()

    def test_validate_data_success(self, indicator, context):
        """Test validation passes when every input exists."""
        indicator.validate_data(context)

    def test_validate_data_missing_input(self, indicator):
        """Test validation fails when volume is absent."""
        import pandas as pd
        df = pd.DataFrame({"open": [1.0], "high": [1.0], "low": [1.0], "close": [1.0]})
        context = IndicatorContext.from_frame(df)
        with pytest.raises(ValueError, match="Missing required inputs"):
            indicator.validate_data(context)

    def test_call_validates_and_calculates(self, indicator, context):
        """Test __call__ publishes into and returns the same context."""
        result = indicator(context)
        assert result is context
        assert context.indicator_name == "CONCRETE"
        assert context.output("Double")[0] == context.series("close")[0] * 2

    def test_default_params_and_cache_key(self, indicator):
        assert indicator.params == {}
        assert indicator.cache_key == ("CONCRETE",)
