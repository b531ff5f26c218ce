"""Tests for the Decimal series and neutral-default helpers."""

from decimal import Decimal

import numpy as np
import pandas as pd

from ta_core.indicators.series import Series, clamp, safe_divide, to_decimal


class TestToDecimal:
    """Tests for number conversion."""

    def test_float_uses_shortest_repr(self):
        """0.1 converts to Decimal('0.1'), not its binary expansion."""
        assert to_decimal(0.1) == Decimal("0.1")

    def test_nan_and_none_are_zero(self):
        """Missing values become the neutral zero."""
        assert to_decimal(float("nan")) == 0
        assert to_decimal(None) == 0
        assert to_decimal(Decimal("NaN")) == 0

    def test_numpy_scalars(self):
        """numpy ints and floats are accepted."""
        assert to_decimal(np.int64(7)) == Decimal(7)
        assert to_decimal(np.float64(2.5)) == Decimal("2.5")

    def test_numpy_float_repr(self):
        """numpy 2 reprs floats as np.float64(...); the value still converts."""
        assert to_decimal(np.float64(1.5)) == Decimal("1.5")
        assert to_decimal(np.float32(0.5)) == Decimal("0.5")
        assert to_decimal(np.float64("nan")) == 0

    def test_strings_and_ints(self):
        assert to_decimal("1.25") == Decimal("1.25")
        assert to_decimal(3) == Decimal(3)


class TestHelpers:
    """Tests for safe_divide and clamp."""

    def test_safe_divide_zero_denominator(self):
        """Zero denominator returns the default."""
        assert safe_divide(Decimal(5), Decimal(0)) == 0
        assert safe_divide(Decimal(5), Decimal(0), Decimal(-100)) == -100

    def test_safe_divide_regular(self):
        assert safe_divide(Decimal(6), Decimal(3)) == 2

    def test_clamp(self):
        assert clamp(Decimal(150), Decimal(100), Decimal(0)) == 100
        assert clamp(Decimal(-5), Decimal(100), Decimal(0)) == 0
        assert clamp(Decimal(42), Decimal(100), Decimal(0)) == 42


class TestSeries:
    """Tests for Series."""

    def test_out_of_range_reads_zero(self):
        """Negative and past-the-end indices read as zero."""
        s = Series([10, 11, 12])
        assert s.get(-1) == 0
        assert s.get(-2) == 0
        assert s.get(3) == 0
        assert s.get(1) == 11

    def test_last_and_take_last(self):
        s = Series([1, 2, 3])
        assert s.last() == 3
        assert Series().last() == 0
        assert s.take_last(2) == [Decimal(2), Decimal(3)]
        assert s.take_last(5) == [Decimal(1), Decimal(2), Decimal(3)]
        assert s.take_last(0) == []

    def test_append_converts(self):
        s = Series()
        s.append(1.5)
        s.extend([2, "3.25"])
        assert s == [Decimal("1.5"), Decimal(2), Decimal("3.25")]

    def test_copy_is_independent(self):
        s = Series([1, 2])
        clone = s.copy()
        clone.append(3)
        assert len(s) == 2
        assert len(clone) == 3

    def test_index_out_of_range_reads_zero(self):
        """Integer indexing follows get: no wrap-around and no IndexError."""
        s = Series([1, 2])
        assert s[-1] == 0
        assert s[5] == 0
        assert s[1] == 2

    def test_from_numpy_array(self):
        s = Series(np.array([1.5, 2.25, np.nan]))
        assert s == [Decimal("1.5"), Decimal("2.25"), Decimal(0)]

    def test_slice_returns_series(self):
        s = Series([1, 2, 3, 4])
        assert isinstance(s[1:3], Series)
        assert s[1:3] == [2, 3]

    def test_equality(self):
        assert Series([1, 2]) == Series([1, 2])
        assert Series([1, 2]) == (1, 2)
        assert Series([1, 2]) != Series([1, 2, 3])

    def test_to_pandas(self):
        s = Series([1, 2, 3]).to_pandas(index=["a", "b", "c"], name="x")
        assert isinstance(s, pd.Series)
        assert s.name == "x"
        assert s["b"] == 2.0
