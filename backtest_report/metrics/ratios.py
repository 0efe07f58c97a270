"""
Standard risk ratio calculator.

Default implementation of the ``RatioCalculator`` protocol. Callers with
their own ratio library can pass any object exposing the same methods to
``evaluate_backtest``.
"""

import math

import numpy as np

from backtest_report.core.constants import COLLABORATOR_RATIO_SENTINEL, MIN_SKEWNESS_POINTS
from backtest_report.core.types.financial import (
    COLLABORATOR_DECIMALS,
    HUNDRED,
    ZERO,
    LevelSeries,
    ReturnSeries,
    round_half_up,
)


def _round(value: float) -> float:
    return round_half_up(value, COLLABORATOR_DECIMALS)


class StandardRatioCalculator:
    """Sharpe, Sortino, Omega, Calmar, Treynor, Ulcer Index and skewness.

    All moments are population moments. Degenerate inputs return 0 or the
    999.999999 sentinel instead of raising.
    """

    def sharpe(
        self, returns: ReturnSeries, risk_free_rate: float, annualization_factor: int
    ) -> float:
        """Annualized Sharpe ratio, 0 for an empty or flat series."""
        if not returns:
            return ZERO

        values = np.asarray(returns, dtype=float)
        std = float(values.std())
        if std == ZERO:
            return ZERO

        excess = float(values.mean()) - risk_free_rate
        return _round(excess / std * math.sqrt(annualization_factor))

    def sortino(
        self, returns: ReturnSeries, risk_free_rate: float, annualization_factor: int
    ) -> float:
        """Annualized Sortino ratio.

        Downside deviation averages the squared shortfall over the bars
        below the risk-free rate only. Without such bars the sentinel is
        returned.
        """
        if not returns:
            return ZERO

        values = np.asarray(returns, dtype=float)
        shortfall = values[values < risk_free_rate] - risk_free_rate
        if shortfall.size == 0:
            return COLLABORATOR_RATIO_SENTINEL

        downside = math.sqrt(float(np.mean(shortfall**2)))
        if downside == ZERO:
            return COLLABORATOR_RATIO_SENTINEL

        excess = float(values.mean()) - risk_free_rate
        return _round(excess / downside * math.sqrt(annualization_factor))

    def omega(self, returns: ReturnSeries, threshold: float) -> float:
        """Sum of gains above ``threshold`` over sum of losses below it."""
        if not returns:
            return ZERO

        values = np.asarray(returns, dtype=float)
        gains = float((values[values >= threshold] - threshold).sum())
        losses = float((threshold - values[values < threshold]).sum())
        if losses == ZERO:
            return COLLABORATOR_RATIO_SENTINEL
        return _round(gains / losses)

    def treynor(self, returns: ReturnSeries, risk_free_rate: float, beta: float) -> float:
        """Mean excess return per unit of beta."""
        if not returns or beta == ZERO:
            return ZERO
        return (float(np.mean(returns)) - risk_free_rate) / beta

    def ulcer_index(self, levels: LevelSeries) -> float:
        """Root mean square percentage decline from the running peak.

        The peak starts at the first level. Levels under a non-positive
        peak add no decline but still count toward the mean.
        """
        if not levels:
            return ZERO

        peak = levels[0]
        squared_sum = ZERO
        for level in levels:
            peak = max(peak, level)
            if peak > ZERO:
                drawdown_pct = (level - peak) / peak * HUNDRED
                squared_sum += drawdown_pct * drawdown_pct

        return math.sqrt(squared_sum / len(levels))

    def skewness(self, returns: ReturnSeries) -> float:
        """Third standardized moment; 0 below three observations or when flat."""
        if len(returns) < MIN_SKEWNESS_POINTS:
            return ZERO

        values = np.asarray(returns, dtype=float)
        deviations = values - values.mean()
        sd = math.sqrt(float(np.mean(deviations**2)))
        if sd == ZERO:
            return ZERO
        return float(np.mean(deviations**3)) / sd**3

    def calmar(self, annualized_return: float, max_drawdown: float) -> float:
        """Annualized return over maximum drawdown; sentinel without drawdown."""
        if max_drawdown <= ZERO:
            return COLLABORATOR_RATIO_SENTINEL
        return _round(annualized_return / max_drawdown)
