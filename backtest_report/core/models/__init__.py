"""
Domain models for the backtest report engine.
"""

from .backtest import BacktestReport, EvaluationConfig
from .metrics import ReturnMetrics, RiskMetrics, ScoreBreakdown, TradeStatistics
from .position import Bar, ClosedPosition
from .trade import TradeRecord

__all__ = [
    "Bar",
    "ClosedPosition",
    "TradeRecord",
    "TradeStatistics",
    "ReturnMetrics",
    "RiskMetrics",
    "ScoreBreakdown",
    "EvaluationConfig",
    "BacktestReport",
]
