"""
Risk statistics computed directly by the metrics engine.

Ratios backed by the ratio collaborator (Sharpe, Sortino, Omega, Calmar,
Treynor, Ulcer Index, Skewness) are delegated to a ``RatioCalculator``;
everything else lives here.

Peak-to-trough helpers take a ``LevelSeries``. The evaluator passes the
per-bar strategy returns relabelled through ``as_level_series``.
"""

import math
from collections.abc import Sequence

import numpy as np
from loguru import logger

from backtest_report.core.constants import (
    MIN_KURTOSIS_POINTS,
    RATIO_SENTINEL,
    RISK_ADJUSTED_DOWNSIDE_WEIGHT,
    RISK_ADJUSTED_DRAWDOWN_WEIGHT,
    RISK_ADJUSTED_VOLATILITY_WEIGHT,
    VAR_95_QUANTILE,
    VAR_99_QUANTILE,
)
from backtest_report.core.exceptions.backtest import CalculationError
from backtest_report.core.models.metrics import ReturnMetrics, RiskMetrics, TradeStatistics
from backtest_report.core.protocols import IBar, RatioCalculator
from backtest_report.core.types.financial import (
    ONE,
    ZERO,
    LevelSeries,
    ReturnSeries,
    as_level_series,
    round_rate,
    round_ratio,
)

from .returns import price_log_returns


def volatility(bars: Sequence[IBar], annualization_factor: int) -> float:
    """Annualized population standard deviation of close-to-close log returns.

    Uses every bar of the price series, not just in-position bars.
    """
    if len(bars) < 2:
        return ZERO

    log_returns = price_log_returns([float(bar.close_price) for bar in bars])
    if not log_returns:
        return ZERO

    std = float(np.std(np.asarray(log_returns, dtype=float)))
    return round_ratio(std * math.sqrt(annualization_factor))


def alpha_beta(
    returns: ReturnSeries, benchmark_closes: Sequence[float] | None
) -> tuple[float, float]:
    """Regress strategy returns on benchmark log returns.

    The benchmark series starts with a 0 return for its first close and
    both series are truncated to the shorter length. Returns ``(0, 1)``
    when either side is empty and ``beta = 0`` when the benchmark has no
    variance.
    """
    if not returns or not benchmark_closes:
        return ZERO, ONE

    closes = [float(close) for close in benchmark_closes]
    bench = [ZERO]
    bench.extend(
        math.log(current / previous) if previous > ZERO else ZERO
        for previous, current in zip(closes[:-1], closes[1:], strict=True)
    )

    length = min(len(returns), len(bench))
    strategy = np.asarray(returns[:length], dtype=float)
    benchmark = np.asarray(bench[:length], dtype=float)

    mean_strategy = float(strategy.mean())
    mean_benchmark = float(benchmark.mean())
    benchmark_diff = benchmark - mean_benchmark
    covariance = float(np.mean((strategy - mean_strategy) * benchmark_diff))
    benchmark_variance = float(np.mean(benchmark_diff**2))

    beta = ZERO if benchmark_variance == ZERO else covariance / benchmark_variance
    alpha = mean_strategy - beta * mean_benchmark
    return alpha, beta


def kurtosis(returns: ReturnSeries) -> float:
    """Excess kurtosis from population moments; 0 below four observations."""
    if len(returns) < MIN_KURTOSIS_POINTS:
        return ZERO

    values = np.asarray(returns, dtype=float)
    deviations = values - values.mean()
    variance = float(np.mean(deviations**2))
    if variance <= ZERO:
        return ZERO

    fourth_moment = float(np.mean(deviations**4))
    return round_ratio(fourth_moment / variance**2 - 3.0)


def _quantile_index(count: int, quantile: float) -> int:
    index = math.ceil(count * quantile) - 1
    return max(0, min(index, count - 1))


def var_and_cvar(returns: ReturnSeries) -> tuple[float, float, float]:
    """Empirical 95%/99% Value at Risk and 95% CVaR, as positive losses.

    The quantile index is ``ceil(n * q) - 1`` clamped into the series, so
    small samples fall back to the worst observation.

    Examples:
        >>> var_and_cvar((-0.05, -0.03, -0.01, 0.0, 0.02))
        (0.05, 0.05, 0.05)
    """
    if not returns:
        return ZERO, ZERO, ZERO

    ordered = np.sort(np.asarray(returns, dtype=float))
    count = len(ordered)
    var95_index = _quantile_index(count, VAR_95_QUANTILE)
    var99_index = _quantile_index(count, VAR_99_QUANTILE)

    var95 = -float(ordered[var95_index])
    var99 = -float(ordered[var99_index])
    cvar = -float(ordered[: var95_index + 1].mean())

    return round_ratio(var95), round_ratio(var99), round_ratio(cvar)


def downside_deviation(returns: ReturnSeries, target: float = ZERO) -> float:
    """Root mean square shortfall of the returns below ``target``."""
    shortfalls = [value - target for value in returns if value < target]
    if not shortfalls:
        return ZERO
    return round_ratio(math.sqrt(float(np.mean(np.square(shortfalls)))))


def tracking_error(returns: ReturnSeries, benchmark: ReturnSeries) -> float:
    """Population standard deviation of the active return; 0 on length mismatch."""
    if len(returns) != len(benchmark) or not returns:
        return ZERO
    active = np.asarray(returns, dtype=float) - np.asarray(benchmark, dtype=float)
    return round_ratio(float(np.std(active)))


def information_ratio(
    returns: ReturnSeries, benchmark: ReturnSeries, tracking_error_value: float
) -> float:
    """Mean active return over tracking error."""
    if tracking_error_value == ZERO or len(returns) != len(benchmark) or not returns:
        return ZERO
    active = np.asarray(returns, dtype=float) - np.asarray(benchmark, dtype=float)
    return round_ratio(float(active.mean()) / tracking_error_value)


def _level_drawdowns(levels: LevelSeries) -> list[float]:
    """Fractional declines from the running peak, one per non-rising level.

    Levels below a non-positive peak are skipped.
    """
    drawdowns: list[float] = []
    peak = levels[0]
    for level in levels[1:]:
        if level > peak:
            peak = level
        elif peak > ZERO:
            drawdowns.append(round_rate((peak - level) / peak))
    return drawdowns


def _drawdown_ratio(annualized_return: float, denominator: float) -> float:
    if denominator == ZERO:
        return RATIO_SENTINEL if annualized_return > ZERO else ZERO
    return round_ratio(annualized_return / denominator)


def sterling_ratio(annualized_return: float, levels: LevelSeries) -> float:
    """Annualized return over the average drawdown of the level series.

    Returns 999.9999 when there is no drawdown and the return is positive.
    """
    if len(levels) < 2:
        return ZERO
    drawdowns = _level_drawdowns(levels)
    average = round_ratio(sum(drawdowns) / len(drawdowns)) if drawdowns else ZERO
    return _drawdown_ratio(annualized_return, average)


def burke_ratio(annualized_return: float, levels: LevelSeries) -> float:
    """Annualized return over the root mean square drawdown of the level series."""
    if len(levels) < 2:
        return ZERO
    drawdowns = _level_drawdowns(levels)
    root_mean_square = (
        round_ratio(math.sqrt(float(np.mean(np.square(drawdowns))))) if drawdowns else ZERO
    )
    return _drawdown_ratio(annualized_return, root_mean_square)


def modified_sharpe_ratio(sharpe: float, skewness: float, kurtosis_value: float) -> float:
    """Sharpe ratio adjusted for skewness and kurtosis.

    ``SR * (1 + S/6 * SR - (K - 3)/24 * SR^2)``. ``K`` is the excess
    kurtosis reported above, so 3 is subtracted a second time.
    """
    term_skew = round_rate(skewness / 6) * sharpe
    term_kurtosis = round_rate((kurtosis_value - 3) / 24) * sharpe * sharpe
    return round_ratio(sharpe * (ONE + term_skew - term_kurtosis))


def capture_ratios(returns: ReturnSeries, benchmark: ReturnSeries) -> tuple[float, float]:
    """Uptrend and downtrend capture against the benchmark.

    Each is the strategy return summed over bars where the benchmark rose
    (or fell), divided by the benchmark return summed over the same bars.
    """
    if len(returns) != len(benchmark):
        return ZERO, ZERO

    strategy = np.asarray(returns, dtype=float)
    bench = np.asarray(benchmark, dtype=float)
    up = bench > ZERO
    down = bench < ZERO

    up_benchmark = float(bench[up].sum())
    down_benchmark = float(bench[down].sum())

    uptrend = round_ratio(float(strategy[up].sum()) / up_benchmark) if up_benchmark != ZERO else ZERO
    downtrend = (
        round_ratio(float(strategy[down].sum()) / down_benchmark) if down_benchmark != ZERO else ZERO
    )
    return uptrend, downtrend


def max_drawdown_duration(levels: LevelSeries) -> float:
    """Longest run of bars spent below the running peak.

    A level equal to the peak ends the run. A run still open at the end of
    the series counts.
    """
    if len(levels) < 2:
        return ZERO

    longest = 0
    current = 0
    peak = levels[0]
    for level in levels[1:]:
        if level >= peak:
            longest = max(longest, current)
            current = 0
            peak = level
        else:
            current += 1

    return float(max(longest, current))


def pain_index(levels: LevelSeries) -> float:
    """Average depth below the running peak over the whole series."""
    if len(levels) < 2:
        return ZERO

    total_pain = ZERO
    peak = levels[0]
    for level in levels[1:]:
        if level > peak:
            peak = level
        elif level > ZERO:
            total_pain += round_rate((peak - level) / peak)

    return round_ratio(total_pain / len(levels))


def risk_adjusted_return(
    total: float, volatility_value: float, max_drawdown: float, downside: float
) -> float:
    """Total return discounted by a blended risk factor.

    ``total / (1 + 0.4|volatility| + 0.4|max drawdown| + 0.2|downside deviation|)``
    """
    risk_factor = (
        abs(volatility_value) * RISK_ADJUSTED_VOLATILITY_WEIGHT
        + abs(max_drawdown) * RISK_ADJUSTED_DRAWDOWN_WEIGHT
        + abs(downside) * RISK_ADJUSTED_DOWNSIDE_WEIGHT
    )
    return round_ratio(total / (ONE + risk_factor))


def _finite(name: str, value: float) -> float:
    if not math.isfinite(value):
        raise CalculationError(f"{name} is not finite: {value}")
    return value


def calculate_risk_metrics(
    bars: Sequence[IBar],
    returns: ReturnSeries,
    benchmark: ReturnSeries,
    benchmark_closes: Sequence[float] | None,
    stats: TradeStatistics,
    return_metrics: ReturnMetrics,
    annualization_factor: int,
    risk_free_rate: float,
    ratio_calculator: RatioCalculator,
) -> RiskMetrics:
    """Compute every risk statistic except the comprehensive score.

    Args:
        bars: Full price series
        returns: Per-bar strategy returns
        benchmark: Benchmark returns aligned to ``returns``
        benchmark_closes: Raw benchmark closes, used for alpha and beta
        stats: Aggregated trade statistics (supplies max drawdown)
        return_metrics: Total and annualized return
        annualization_factor: Bars per year
        risk_free_rate: Per-bar risk-free rate
        ratio_calculator: Collaborator for the standard ratios

    Returns:
        RiskMetrics with ``comprehensive_score`` left at 0

    Raises:
        CalculationError: If the ratio calculator returns NaN or infinity
    """
    levels = as_level_series(returns)
    annualized = return_metrics.annualized_return

    sharpe = _finite("Sharpe ratio", ratio_calculator.sharpe(returns, risk_free_rate, annualization_factor))
    sortino = _finite("Sortino ratio", ratio_calculator.sortino(returns, risk_free_rate, annualization_factor))
    omega = _finite("Omega", ratio_calculator.omega(returns, risk_free_rate))
    vol = volatility(bars, annualization_factor)
    alpha, beta = alpha_beta(returns, benchmark_closes)
    treynor = _finite("Treynor ratio", ratio_calculator.treynor(returns, risk_free_rate, beta))
    ulcer = _finite("Ulcer index", ratio_calculator.ulcer_index(levels))
    skew = _finite("Skewness", ratio_calculator.skewness(returns))
    calmar = _finite("Calmar ratio", ratio_calculator.calmar(annualized, stats.max_drawdown))
    kurt = kurtosis(returns)
    var95, var99, cvar = var_and_cvar(returns)
    downside = downside_deviation(returns, risk_free_rate)
    te = tracking_error(returns, benchmark)
    uptrend, downtrend = capture_ratios(returns, benchmark)

    logger.debug(
        f"Risk inputs: {len(returns)} returns, factor={annualization_factor}, "
        f"alpha={alpha:.6f}, beta={beta:.6f}"
    )

    return RiskMetrics(
        sharpe_ratio=sharpe,
        sortino_ratio=sortino,
        calmar_ratio=calmar,
        omega=omega,
        volatility=vol,
        alpha=alpha,
        beta=beta,
        treynor_ratio=treynor,
        ulcer_index=ulcer,
        skewness=skew,
        kurtosis=kurt,
        var95=var95,
        var99=var99,
        cvar=cvar,
        information_ratio=information_ratio(returns, benchmark, te),
        tracking_error=te,
        sterling_ratio=sterling_ratio(annualized, levels),
        burke_ratio=burke_ratio(annualized, levels),
        modified_sharpe_ratio=modified_sharpe_ratio(sharpe, skew, kurt),
        downside_deviation=downside,
        uptrend_capture=uptrend,
        downtrend_capture=downtrend,
        max_drawdown_duration=max_drawdown_duration(levels),
        pain_index=pain_index(levels),
        risk_adjusted_return=risk_adjusted_return(
            return_metrics.total_return, vol, stats.max_drawdown, downside
        ),
    )
