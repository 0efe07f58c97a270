"""
Validation utilities for evaluation inputs.

Provides consistent validation across the application.
"""

from collections.abc import Sequence
from typing import Any

from backtest_report.core.enums import TradeDirection
from backtest_report.core.exceptions.backtest import PositionIndexError, ValidationError
from backtest_report.core.protocols import IClosedPosition


def validate_direction(direction: Any, param_name: str = "direction") -> TradeDirection:
    """Validate that a value is a TradeDirection enum.

    Args:
        direction: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated TradeDirection

    Raises:
        TypeError: If direction is not a TradeDirection enum
    """
    if not isinstance(direction, TradeDirection):
        raise TypeError(f"{param_name} must be TradeDirection enum, got {type(direction).__name__}")
    return direction


def validate_positive(value: float, param_name: str) -> float:
    """Validate that a numeric value is positive.

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated value

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{param_name} must be positive, got {value}")
    return value


def validate_fee_ratio(rate: float, param_name: str = "fee_ratio") -> float:
    """Validate that a fee ratio is a fraction in [0, 1).

    Args:
        rate: Rate to validate
        param_name: Parameter name for error messages

    Returns:
        The validated rate

    Raises:
        ValidationError: If rate is not between 0 (inclusive) and 1 (exclusive)
    """
    if rate < 0 or rate >= 1:
        raise ValidationError(f"{param_name} must be between 0 and 1, got {rate}")
    return rate


def validate_position_bounds(
    positions: Sequence[IClosedPosition], bar_count: int
) -> Sequence[IClosedPosition]:
    """Validate that every closed position indexes bars of the price series.

    Args:
        positions: Positions to check
        bar_count: Number of bars in the price series

    Returns:
        The validated positions

    Raises:
        PositionIndexError: If a closed position falls outside the series
    """
    for position in positions:
        if not position.is_closed:
            continue
        if not 0 <= position.entry_index <= position.exit_index < bar_count:
            raise PositionIndexError(position.entry_index, position.exit_index, bar_count)
    return positions
