"""
Backtest metrics engine.

This module turns the closed positions of a completed backtest into trade
records, return and risk statistics, and a comprehensive score.
"""

from .evaluator import BacktestEvaluator, evaluate_backtest
from .ratios import StandardRatioCalculator
from .scoring import comprehensive_score, score_breakdown

__all__ = [
    "evaluate_backtest",
    "BacktestEvaluator",
    "StandardRatioCalculator",
    "comprehensive_score",
    "score_breakdown",
]
