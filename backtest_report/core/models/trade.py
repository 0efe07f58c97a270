"""
Trade record domain model.

One record per closed position, carrying its fee-adjusted economics.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from backtest_report.core.enums import TradeDirection
from backtest_report.core.exceptions.backtest import ValidationError


@dataclass(frozen=True)
class TradeRecord:
    """Represents a reconstructed, fee-adjusted trade.

    ``fee`` and the amounts turn negative once a loss exceeds the notional,
    as the fee formula is applied to whatever capital is carried.
    """

    index: int
    direction: TradeDirection
    entry_time: datetime
    exit_time: datetime
    entry_price: float
    exit_price: float
    entry_amount: float
    exit_amount: float
    profit: float
    profit_percentage: float
    fee: float
    max_loss: float = 0.0
    max_drawdown: float = 0.0

    def __post_init__(self) -> None:
        """Validate trade data after initialization."""
        if self.index <= 0:
            raise ValidationError(f"Trade index must be positive, got {self.index}")
        if self.max_loss < 0:
            raise ValidationError(f"Max loss must be non-negative, got {self.max_loss}")
        if self.max_drawdown < 0:
            raise ValidationError(f"Max drawdown must be non-negative, got {self.max_drawdown}")

    @property
    def is_profitable(self) -> bool:
        """Check if the trade closed with a positive fee-adjusted profit."""
        return self.profit > 0

    def with_risk(self, max_loss: float, max_drawdown: float) -> "TradeRecord":
        """Return a copy carrying the intra-trade loss and drawdown magnitudes."""
        return replace(self, max_loss=max_loss, max_drawdown=max_drawdown)

    def to_dict(self) -> dict[str, Any]:
        """Convert trade record to dictionary."""
        return {
            "index": self.index,
            "type": self.direction.entry_action,
            "direction": self.direction.value,
            "entry_time": self.entry_time.isoformat(),
            "exit_time": self.exit_time.isoformat(),
            "entry_price": self.entry_price,
            "exit_price": self.exit_price,
            "entry_amount": self.entry_amount,
            "exit_amount": self.exit_amount,
            "profit": self.profit,
            "profit_percentage": self.profit_percentage,
            "fee": self.fee,
            "max_loss": self.max_loss,
            "max_drawdown": self.max_drawdown,
            "closed": True,
        }
