"""
Custom exception hierarchy for the backtest report engine.

This module defines domain-specific exceptions for better error handling.
"""


class BacktestException(Exception):
    """Base exception for all backtest evaluation errors."""

    pass


class ValidationError(BacktestException):
    """Raised when input validation fails."""

    pass


class DataError(BacktestException):
    """Raised when price or benchmark data cannot be processed."""

    pass


class CalculationError(BacktestException):
    """Raised when mathematical calculations fail."""

    pass


class ConfigurationError(BacktestException):
    """Raised when configuration is invalid."""

    pass


class PositionIndexError(DataError):
    """Raised when a position references bars outside the price series."""

    def __init__(self, entry_index: int, exit_index: int, bar_count: int):
        self.entry_index = entry_index
        self.exit_index = exit_index
        self.bar_count = bar_count
        super().__init__(
            f"Position bar range [{entry_index}, {exit_index}] outside price series "
            f"of {bar_count} bars"
        )
