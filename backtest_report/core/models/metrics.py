"""
Intermediate metric containers.

These are transient values passed between pipeline stages and folded into
the final report.
"""

from dataclasses import asdict, dataclass, field


@dataclass(frozen=True)
class TradeStatistics:
    """Aggregate figures over all reconstructed trades."""

    count: int
    profitable_count: int
    total_profit: float
    total_fee: float
    final_amount: float
    gross_profit: float
    gross_loss: float
    profit_factor: float
    win_rate: float
    average_profit: float
    max_loss: float
    max_drawdown: float

    @property
    def unprofitable_count(self) -> int:
        """Number of trades with zero or negative profit."""
        return self.count - self.profitable_count


@dataclass(frozen=True)
class ReturnMetrics:
    """Total and annualized return of the strategy."""

    total_return: float
    annualized_return: float


@dataclass(frozen=True)
class RiskMetrics:
    """Risk statistics computed from the per-bar strategy return series."""

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

    def to_dict(self) -> dict[str, float]:
        """Convert risk metrics to dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-dimension sub-scores (0-10) behind the comprehensive score."""

    return_score: float
    core_risk_score: float
    advanced_risk_score: float
    trade_quality_score: float
    stability_score: float
    weighted_score: float
    final_score: float
    metric_scores: dict[str, float] = field(default_factory=dict)
