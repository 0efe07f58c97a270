"""
Backtest performance and risk report engine.
"""

from .core.models import BacktestReport, Bar, ClosedPosition, EvaluationConfig
from .metrics import BacktestEvaluator, StandardRatioCalculator, evaluate_backtest

__all__ = [
    "Bar",
    "ClosedPosition",
    "EvaluationConfig",
    "BacktestReport",
    "BacktestEvaluator",
    "StandardRatioCalculator",
    "evaluate_backtest",
]
