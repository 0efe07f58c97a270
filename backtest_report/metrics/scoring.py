"""
Comprehensive 0-10 strategy score.

Each metric is mapped onto 0-10 by a piecewise-linear scorer, metrics are
averaged into five dimension scores, and the dimensions are combined with
fixed weights. Weak annualized returns cap the final score at 3.0 (below
1%) or 6.0 (below 5%).
"""

from loguru import logger

from backtest_report.core.constants import (
    IDEAL_MAX_TRADES,
    IDEAL_MIN_TRADES,
    LOW_RETURN_SCORE_CAP,
    LOW_RETURN_THRESHOLD,
    MAX_SCORE,
    MAX_SCORED_TRADES,
    MIN_SCORE,
    MODEST_RETURN_SCORE_CAP,
    MODEST_RETURN_THRESHOLD,
    SCORE_WEIGHTS,
)
from backtest_report.core.models.metrics import (
    ReturnMetrics,
    RiskMetrics,
    ScoreBreakdown,
    TradeStatistics,
)
from backtest_report.core.types.financial import SCORE_DECIMALS, round_half_up

# (target, zero point) per metric; direction is given by the scorer used
HIGHER_IS_BETTER: dict[str, tuple[float, float]] = {
    "annualized_return": (0.20, 0.0),
    "total_return": (0.50, 0.0),
    "profit_factor": (2.0, 1.0),
    "sharpe_ratio": (1.5, 0.0),
    "sortino_ratio": (1.2, 0.0),
    "calmar_ratio": (0.8, 0.0),
    "treynor_ratio": (0.15, 0.0),
    "information_ratio": (0.5, 0.0),
    "sterling_ratio": (1.0, 0.0),
    "burke_ratio": (1.0, 0.0),
    "modified_sharpe_ratio": (1.5, 0.0),
    "uptrend_capture": (1.0, 0.0),
    "risk_adjusted_return": (0.15, 0.0),
    "omega": (1.3, 1.0),
    "win_rate": (0.65, 0.20),
    "average_profit": (0.02, 0.0),
}

LOWER_IS_BETTER: dict[str, tuple[float, float]] = {
    "max_drawdown": (0.10, 0.50),
    "volatility": (0.25, 1.0),
    "var95": (0.04, 0.20),
    "var99": (0.06, 0.30),
    "cvar": (0.06, 0.30),
    "tracking_error": (0.05, 0.30),
    "downside_deviation": (0.10, 0.50),
    "downtrend_capture": (0.5, 1.5),
    "max_drawdown_duration": (30.0, 300.0),
    "ulcer_index": (5.0, 30.0),
    "skewness": (0.5, 2.0),
    "kurtosis": (2.0, 10.0),
    "pain_index": (0.01, 0.10),
}

DIMENSIONS: dict[str, tuple[str, ...]] = {
    "return": ("annualized_return", "total_return", "profit_factor"),
    "core_risk": (
        "sharpe_ratio",
        "max_drawdown",
        "sortino_ratio",
        "calmar_ratio",
        "volatility",
        "treynor_ratio",
    ),
    "advanced_risk": (
        "var95",
        "var99",
        "cvar",
        "information_ratio",
        "tracking_error",
        "sterling_ratio",
        "burke_ratio",
        "modified_sharpe_ratio",
        "downside_deviation",
        "uptrend_capture",
        "downtrend_capture",
        "max_drawdown_duration",
        "ulcer_index",
        "risk_adjusted_return",
        "omega",
    ),
    "trade_quality": ("win_rate", "number_of_trades", "average_profit"),
    "stability": ("skewness", "kurtosis", "pain_index"),
}

# Scored on magnitude; both tails are penalized
_ABSOLUTE_METRICS = frozenset({"skewness", "kurtosis"})


def score_higher_is_better(value: float, target: float, floor: float) -> float:
    """10 at or above ``target``, 0 at or below ``floor``, linear between.

    Examples:
        >>> score_higher_is_better(0.75, 1.5, 0.0)
        5.0
    """
    if value >= target:
        return MAX_SCORE
    if value <= floor:
        return MIN_SCORE
    return MAX_SCORE * (value - floor) / (target - floor)


def score_lower_is_better(value: float, target: float, ceiling: float) -> float:
    """10 at or below ``target``, 0 at or above ``ceiling``, linear between."""
    if value <= target:
        return MAX_SCORE
    if value >= ceiling:
        return MIN_SCORE
    return MAX_SCORE * (ceiling - value) / (ceiling - target)


def score_trade_count(count: int) -> float:
    """Full marks inside the ideal band, tapering to 0 at no trades and at overtrading."""
    if count <= 0 or count >= MAX_SCORED_TRADES:
        return MIN_SCORE
    if count < IDEAL_MIN_TRADES:
        return MAX_SCORE * count / IDEAL_MIN_TRADES
    if count <= IDEAL_MAX_TRADES:
        return MAX_SCORE
    return MAX_SCORE * (MAX_SCORED_TRADES - count) / (MAX_SCORED_TRADES - IDEAL_MAX_TRADES)


def _metric_values(
    stats: TradeStatistics, returns: ReturnMetrics, risk: RiskMetrics
) -> dict[str, float]:
    values: dict[str, float] = dict(risk.to_dict())
    values.update(
        annualized_return=returns.annualized_return,
        total_return=returns.total_return,
        profit_factor=stats.profit_factor,
        max_drawdown=stats.max_drawdown,
        win_rate=stats.win_rate,
        average_profit=stats.average_profit,
    )
    return values


def _score_metric(name: str, value: float, trade_count: int) -> float:
    if name == "number_of_trades":
        return score_trade_count(trade_count)
    if name in _ABSOLUTE_METRICS:
        value = abs(value)
    if name in HIGHER_IS_BETTER:
        return score_higher_is_better(value, *HIGHER_IS_BETTER[name])
    return score_lower_is_better(value, *LOWER_IS_BETTER[name])


def apply_return_cap(score: float, annualized_return: float) -> float:
    """Cap the score of strategies with weak annualized returns."""
    if annualized_return < LOW_RETURN_THRESHOLD:
        return min(score, LOW_RETURN_SCORE_CAP)
    if annualized_return < MODEST_RETURN_THRESHOLD:
        return min(score, MODEST_RETURN_SCORE_CAP)
    return score


def score_breakdown(
    stats: TradeStatistics, returns: ReturnMetrics, risk: RiskMetrics
) -> ScoreBreakdown:
    """Score every metric and combine them into the dimension and final scores.

    Args:
        stats: Aggregated trade statistics
        returns: Total and annualized return
        risk: Risk metrics (``comprehensive_score`` is ignored)

    Returns:
        ScoreBreakdown with per-metric scores and the capped final score
    """
    values = _metric_values(stats, returns, risk)
    metric_scores: dict[str, float] = {}
    dimension_scores: dict[str, float] = {}

    for dimension, metric_names in DIMENSIONS.items():
        scores = [_score_metric(name, values.get(name, 0.0), stats.count) for name in metric_names]
        metric_scores.update(zip(metric_names, scores, strict=True))
        dimension_scores[dimension] = sum(scores) / len(scores)

    weighted = sum(SCORE_WEIGHTS[dimension] * score for dimension, score in dimension_scores.items())
    clamped = max(MIN_SCORE, min(MAX_SCORE, weighted))
    final = round_half_up(apply_return_cap(clamped, returns.annualized_return), SCORE_DECIMALS)

    breakdown = ScoreBreakdown(
        return_score=dimension_scores["return"],
        core_risk_score=dimension_scores["core_risk"],
        advanced_risk_score=dimension_scores["advanced_risk"],
        trade_quality_score=dimension_scores["trade_quality"],
        stability_score=dimension_scores["stability"],
        weighted_score=weighted,
        final_score=final,
        metric_scores=metric_scores,
    )

    logger.debug(
        f"Score breakdown: return={breakdown.return_score:.2f}, "
        f"core_risk={breakdown.core_risk_score:.2f}, "
        f"advanced_risk={breakdown.advanced_risk_score:.2f}, "
        f"trade_quality={breakdown.trade_quality_score:.2f}, "
        f"stability={breakdown.stability_score:.2f}, "
        f"weighted={weighted:.2f}, final={final:.2f}"
    )
    return breakdown


def comprehensive_score(
    stats: TradeStatistics, returns: ReturnMetrics, risk: RiskMetrics
) -> float:
    """Final 0-10 score, rounded to 2 decimals."""
    return score_breakdown(stats, returns, risk).final_score
