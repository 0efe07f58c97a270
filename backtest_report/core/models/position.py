"""
Bar and closed-position domain models.

These are the read-only inputs handed over by the signal engine.
"""

from dataclasses import dataclass
from datetime import datetime

from backtest_report.core.enums import TradeDirection
from backtest_report.core.exceptions.backtest import ValidationError
from backtest_report.core.types.financial import ZERO
from backtest_report.core.utils.validation import validate_direction


@dataclass(frozen=True)
class Bar:
    """A single bar of the price series, identified by its end time."""

    end_time: datetime
    close_price: float

    def __post_init__(self) -> None:
        """Validate bar data after initialization."""
        if self.close_price < ZERO:
            raise ValidationError(f"Close price must be non-negative, got {self.close_price}")


@dataclass(frozen=True)
class ClosedPosition:
    """A trade reference into the price series.

    ``is_closed`` is False for a position still open at the end of the
    backtest; such positions are ignored by the report.
    """

    entry_index: int
    entry_price: float
    exit_index: int
    exit_price: float
    direction: TradeDirection
    is_closed: bool = True

    def __post_init__(self) -> None:
        """Validate position data after initialization."""
        validate_direction(self.direction)
        if self.entry_index < 0:
            raise ValidationError(f"Entry index must be non-negative, got {self.entry_index}")
        if self.is_closed and self.exit_index < self.entry_index:
            raise ValidationError(
                f"Exit index {self.exit_index} precedes entry index {self.entry_index}"
            )
        if self.entry_price <= ZERO:
            raise ValidationError(f"Entry price must be positive, got {self.entry_price}")

    @property
    def bar_count(self) -> int:
        """Number of bars spanned by the position, entry and exit included."""
        return self.exit_index - self.entry_index + 1

    @classmethod
    def create_long(
        cls, entry_index: int, entry_price: float, exit_index: int, exit_price: float
    ) -> "ClosedPosition":
        """Factory method to create a closed long position."""
        return cls(
            entry_index=entry_index,
            entry_price=entry_price,
            exit_index=exit_index,
            exit_price=exit_price,
            direction=TradeDirection.LONG,
        )

    @classmethod
    def create_short(
        cls, entry_index: int, entry_price: float, exit_index: int, exit_price: float
    ) -> "ClosedPosition":
        """Factory method to create a closed short position."""
        return cls(
            entry_index=entry_index,
            entry_price=entry_price,
            exit_index=exit_index,
            exit_price=exit_price,
            direction=TradeDirection.SHORT,
        )
