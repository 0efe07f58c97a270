"""
Unit tests for custom exceptions.
Testing all exception classes and their attributes.
"""

import pytest

from backtest_report.core.exceptions.backtest import (
    BacktestException,
    CalculationError,
    ConfigurationError,
    DataError,
    PositionIndexError,
    ValidationError,
)


class TestBacktestException:
    """Tests for BacktestException base class."""

    def test_should_create_base_exception_with_message(self) -> None:
        """Test creating base exception with message."""
        exc = BacktestException("Test error message")
        assert str(exc) == "Test error message"
        assert isinstance(exc, Exception)


class TestExceptionHierarchy:
    """Tests for the domain exception hierarchy."""

    @pytest.mark.parametrize(
        "exc_type", [ValidationError, DataError, CalculationError, ConfigurationError]
    )
    def test_should_derive_from_base_exception(self, exc_type: type[BacktestException]) -> None:
        """Test that every domain error is a BacktestException."""
        exc = exc_type("failure")
        assert isinstance(exc, BacktestException)
        assert str(exc) == "failure"

    def test_should_catch_domain_errors_through_base_class(self) -> None:
        """Test catching a specific error through the base class."""
        with pytest.raises(BacktestException):
            raise CalculationError("division failed")


class TestPositionIndexError:
    """Tests for PositionIndexError."""

    def test_should_carry_position_bounds(self) -> None:
        """Test that the offending indices are kept as attributes."""
        exc = PositionIndexError(entry_index=3, exit_index=12, bar_count=10)

        assert exc.entry_index == 3
        assert exc.exit_index == 12
        assert exc.bar_count == 10
        assert isinstance(exc, DataError)
        assert "[3, 12]" in str(exc)
        assert "10 bars" in str(exc)
