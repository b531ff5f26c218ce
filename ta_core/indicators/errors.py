"""Parameter validation shared by the window engine, dispatcher and formulas."""

import numbers

from ta_core.utils.logger import get_logger

logger = get_logger(__name__)


class IndicatorConfigError(ValueError):
    """Invalid indicator parameter: non-positive length, unknown moving-average tag, etc."""
    pass


def validate_length(length: int, name: str = "length") -> int:
    """Reject non-integer or non-positive lookback lengths.

    Raises:
        IndicatorConfigError: ``length`` is not an int or is ``<= 0``
    """
    if isinstance(length, bool) or not isinstance(length, numbers.Integral):
        logger.error(f"{name} must be an integer, got {length!r}")
        raise IndicatorConfigError(f"{name} must be an integer, got {length!r}")
    if length <= 0:
        logger.error(f"{name} must be positive, got {length}")
        raise IndicatorConfigError(f"{name} must be positive, got {length}")
    return int(length)


def validate_offset(offset: int, name: str = "offset") -> int:
    """Reject non-integer or negative displacements (zero means no shift).

    Raises:
        IndicatorConfigError: ``offset`` is not an int or is ``< 0``
    """
    if isinstance(offset, bool) or not isinstance(offset, numbers.Integral):
        logger.error(f"{name} must be an integer, got {offset!r}")
        raise IndicatorConfigError(f"{name} must be an integer, got {offset!r}")
    if offset < 0:
        logger.error(f"{name} must not be negative, got {offset}")
        raise IndicatorConfigError(f"{name} must not be negative, got {offset}")
    return int(offset)
