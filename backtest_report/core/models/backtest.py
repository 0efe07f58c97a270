"""
Evaluation configuration and report models.
"""

from dataclasses import dataclass, field, fields
from typing import Any

from backtest_report.core.constants import DEFAULT_FEE_RATIO
from backtest_report.core.enums import parse_interval_minutes
from backtest_report.core.exceptions.backtest import ValidationError

from .metrics import ReturnMetrics, RiskMetrics, TradeStatistics
from .trade import TradeRecord

ERROR_MESSAGE_PREFIX = "Error calculating backtest metrics: "


@dataclass(frozen=True)
class EvaluationConfig:
    """Configuration for a single backtest evaluation."""

    initial_amount: float
    fee_ratio: float = DEFAULT_FEE_RATIO
    interval: str = "1d"
    strategy_name: str = ""
    parameter_description: str = ""
    risk_free_rate: float = 0.0
    use_log_returns: bool = True

    def is_valid_capital(self) -> bool:
        """Validate initial capital is positive."""
        return self.initial_amount > 0

    def is_valid_fee_ratio(self) -> bool:
        """Validate fee ratio is a fraction below 100%."""
        return 0.0 <= self.fee_ratio < 1.0

    def is_valid_interval(self) -> bool:
        """Validate the interval label can be parsed."""
        try:
            parse_interval_minutes(self.interval)
        except ValueError:
            return False
        return True

    def validate(self) -> "EvaluationConfig":
        """Raise ``ValidationError`` unless every check passes."""
        if not self.is_valid_capital():
            raise ValidationError(f"Initial amount must be positive, got {self.initial_amount}")
        if not self.is_valid_fee_ratio():
            raise ValidationError(f"Fee ratio must be in [0, 1), got {self.fee_ratio}")
        if not self.is_valid_interval():
            raise ValidationError(f"Unsupported interval label: {self.interval!r}")
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "initial_amount": self.initial_amount,
            "fee_ratio": self.fee_ratio,
            "interval": self.interval,
            "strategy_name": self.strategy_name,
            "parameter_description": self.parameter_description,
            "risk_free_rate": self.risk_free_rate,
            "use_log_returns": self.use_log_returns,
        }


@dataclass(frozen=True)
class BacktestReport:
    """Standardized performance-and-risk report of one backtest."""

    success: bool
    error_message: str | None = None
    strategy_name: str = ""
    parameter_description: str = ""

    # Capital
    initial_amount: float = 0.0
    final_amount: float = 0.0
    total_profit: float = 0.0
    total_fee: float = 0.0

    # Trade statistics
    number_of_trades: int = 0
    profitable_trades: int = 0
    unprofitable_trades: int = 0
    win_rate: float = 0.0
    average_profit: float = 0.0
    profit_factor: float = 0.0
    maximum_loss: float = 0.0
    max_drawdown: float = 0.0

    # Returns
    total_return: float = 0.0
    annualized_return: float = 0.0

    # Risk
    sharpe_ratio: float = 0.0
    sortino_ratio: float = 0.0
    calmar_ratio: float = 0.0
    omega: float = 0.0
    volatility: float = 0.0
    alpha: float = 0.0
    beta: float = 0.0
    treynor_ratio: float = 0.0
    ulcer_index: float = 0.0
    skewness: float = 0.0
    kurtosis: float = 0.0
    var95: float = 0.0
    var99: float = 0.0
    cvar: float = 0.0
    information_ratio: float = 0.0
    tracking_error: float = 0.0
    sterling_ratio: float = 0.0
    burke_ratio: float = 0.0
    modified_sharpe_ratio: float = 0.0
    downside_deviation: float = 0.0
    uptrend_capture: float = 0.0
    downtrend_capture: float = 0.0
    max_drawdown_duration: float = 0.0
    pain_index: float = 0.0
    risk_adjusted_return: float = 0.0
    comprehensive_score: float = 0.0

    trades: tuple[TradeRecord, ...] = field(default_factory=tuple)

    @classmethod
    def from_metrics(
        cls,
        config: EvaluationConfig,
        trades: tuple[TradeRecord, ...],
        stats: TradeStatistics,
        returns: ReturnMetrics,
        risk: RiskMetrics,
    ) -> "BacktestReport":
        """Assemble a successful report from the pipeline outputs."""
        return cls(
            success=True,
            strategy_name=config.strategy_name,
            parameter_description=config.parameter_description,
            initial_amount=config.initial_amount,
            final_amount=stats.final_amount,
            total_profit=stats.total_profit,
            total_fee=stats.total_fee,
            number_of_trades=stats.count,
            profitable_trades=stats.profitable_count,
            unprofitable_trades=stats.unprofitable_count,
            win_rate=stats.win_rate,
            average_profit=stats.average_profit,
            profit_factor=stats.profit_factor,
            maximum_loss=stats.max_loss,
            max_drawdown=stats.max_drawdown,
            total_return=returns.total_return,
            annualized_return=returns.annualized_return,
            trades=trades,
            **risk.to_dict(),
        )

    @classmethod
    def empty(cls, config: EvaluationConfig) -> "BacktestReport":
        """Zero-filled report for a backtest that produced no closed trades."""
        return cls(
            success=True,
            strategy_name=config.strategy_name,
            parameter_description=config.parameter_description,
            initial_amount=config.initial_amount,
            final_amount=config.initial_amount,
        )

    @classmethod
    def failure(cls, message: str) -> "BacktestReport":
        """Report for an evaluation that raised; carries no metrics."""
        return cls(success=False, error_message=f"{ERROR_MESSAGE_PREFIX}{message}")

    def is_profitable(self) -> bool:
        """Check if the backtest was profitable."""
        return self.success and self.total_profit > 0.0

    def summary(self) -> dict[str, Any]:
        """Get a summary of key performance metrics."""
        if not self.success:
            return {"success": False, "error_message": self.error_message}

        return {
            "strategy_name": self.strategy_name,
            "initial_amount": self.initial_amount,
            "final_amount": self.final_amount,
            "total_profit": self.total_profit,
            "total_fee": self.total_fee,
            "total_return": self.total_return,
            "annualized_return": self.annualized_return,
            "number_of_trades": self.number_of_trades,
            "win_rate": self.win_rate,
            "profit_factor": self.profit_factor,
            "max_drawdown": self.max_drawdown,
            "sharpe_ratio": self.sharpe_ratio,
            "comprehensive_score": self.comprehensive_score,
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert report to dictionary."""
        data: dict[str, Any] = {}
        for report_field in fields(self):
            if report_field.name == "trades":
                continue
            data[report_field.name] = getattr(self, report_field.name)
        data["trades"] = [trade.to_dict() for trade in self.trades]
        return data
