"""
Unit tests for validation utilities.
"""

import pytest

from backtest_report.core.enums import TradeDirection
from backtest_report.core.exceptions.backtest import PositionIndexError, ValidationError
from backtest_report.core.models import ClosedPosition
from backtest_report.core.utils.validation import (
    validate_direction,
    validate_fee_ratio,
    validate_position_bounds,
    validate_positive,
)


class TestValidationUtils:
    """Test validation utility functions."""

    def test_should_validate_direction_correctly(self) -> None:
        """Test TradeDirection validation."""
        assert validate_direction(TradeDirection.LONG) == TradeDirection.LONG

    def test_should_reject_invalid_direction_type(self) -> None:
        """Test TradeDirection validation rejects wrong types."""
        with pytest.raises(TypeError, match="direction must be TradeDirection enum"):
            validate_direction("long")

        with pytest.raises(TypeError, match="direction must be TradeDirection enum"):
            validate_direction(None)

    def test_should_validate_positive_values(self) -> None:
        """Test positive value validation."""
        assert validate_positive(1.0, "initial_amount") == 1.0
        assert validate_positive(252, "annualization_factor") == 252

    def test_should_reject_non_positive_values(self) -> None:
        """Test positive validation rejects invalid values."""
        with pytest.raises(ValidationError, match="initial_amount must be positive"):
            validate_positive(0, "initial_amount")

        with pytest.raises(ValidationError, match="initial_amount must be positive"):
            validate_positive(-10, "initial_amount")

    def test_should_validate_fee_ratio(self) -> None:
        """Test fee ratio validation accepts fractions in [0, 1)."""
        assert validate_fee_ratio(0.0) == 0.0
        assert validate_fee_ratio(0.001) == 0.001

    @pytest.mark.parametrize("rate", [-0.001, 1.0, 1.5])
    def test_should_reject_invalid_fee_ratio(self, rate: float) -> None:
        """Test fee ratio validation rejects values outside [0, 1)."""
        with pytest.raises(ValidationError, match="fee_ratio must be between 0 and 1"):
            validate_fee_ratio(rate)


class TestPositionBounds:
    """Test position index validation against the price series."""

    def test_should_accept_positions_inside_series(self) -> None:
        """Test that in-range positions pass through unchanged."""
        positions = [ClosedPosition.create_long(0, 100.0, 4, 110.0)]

        assert validate_position_bounds(positions, bar_count=5) == positions

    def test_should_reject_exit_beyond_last_bar(self) -> None:
        """Test that an exit past the series raises PositionIndexError."""
        positions = [ClosedPosition.create_short(2, 100.0, 5, 90.0)]

        with pytest.raises(PositionIndexError) as exc_info:
            validate_position_bounds(positions, bar_count=5)

        assert exc_info.value.exit_index == 5
        assert exc_info.value.bar_count == 5

    def test_should_ignore_open_positions(self) -> None:
        """Test that open positions are not bound-checked."""
        open_position = ClosedPosition(
            entry_index=3,
            entry_price=100.0,
            exit_index=0,
            exit_price=0.0,
            direction=TradeDirection.LONG,
            is_closed=False,
        )

        assert validate_position_bounds([open_position], bar_count=2) == [open_position]
