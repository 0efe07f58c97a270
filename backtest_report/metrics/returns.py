"""
Return series and return metrics.

Builds the per-bar strategy return series (in-position bars only), the
benchmark return series, and the total/annualized return figures.
"""

import math
from collections.abc import Sequence

import numpy as np
from loguru import logger

from backtest_report.core.constants import (
    ANNUALIZATION_TABLE,
    DAYS_PER_YEAR,
    DEFAULT_ANNUALIZATION_FACTOR,
    MONTHLY_ANNUALIZATION_FACTOR,
)
from backtest_report.core.enums import parse_interval_minutes
from backtest_report.core.models.metrics import ReturnMetrics
from backtest_report.core.protocols import IBar, IClosedPosition
from backtest_report.core.types.financial import ZERO, ReturnSeries, as_return_series

from .reconstruction import closed_positions
from .trade_statistics import total_return


def annualization_factor(interval: str, bar_count: int | None = None) -> int:
    """Number of bars per year for a bar interval label.

    Falls back to 252 when the label cannot be parsed or the series is too
    short to carry a return.

    Examples:
        >>> annualization_factor("1h")
        8760
        >>> annualization_factor("1d")
        365
        >>> annualization_factor("bogus")
        252
    """
    if bar_count is not None and bar_count < 2:
        return DEFAULT_ANNUALIZATION_FACTOR

    try:
        minutes = parse_interval_minutes(interval)
    except (TypeError, ValueError) as e:
        logger.warning(
            f"Could not detect annualization factor, using {DEFAULT_ANNUALIZATION_FACTOR}: {e}"
        )
        return DEFAULT_ANNUALIZATION_FACTOR

    for max_minutes, factor in ANNUALIZATION_TABLE:
        if minutes <= max_minutes:
            return factor
    return MONTHLY_ANNUALIZATION_FACTOR


def annualized_return(total: float, bars: Sequence[IBar]) -> float:
    """Compound the total return over the calendar span of the series.

    ``(1 + total) ** (365 / days) - 1`` where ``days`` is the number of
    whole days between the first and last bar. A span shorter than one day
    returns ``total`` unchanged; an unusable base or an overflow returns 0.
    """
    if not bars:
        logger.warning("Cannot annualize return of an empty price series")
        return ZERO

    start_time = bars[0].end_time
    end_time = bars[-1].end_time
    if start_time > end_time:
        logger.warning("Cannot annualize return: series ends before it starts")
        return ZERO

    days = (end_time - start_time).days
    if days <= 0:
        return total

    base = 1.0 + total
    if base < ZERO:
        logger.warning(f"Cannot annualize a total return of {total}")
        return ZERO

    try:
        power = math.pow(base, DAYS_PER_YEAR / days)
    except OverflowError:
        logger.warning(f"Annualized return overflowed for total={total}, days={days}")
        return ZERO

    return power - 1.0


def calculate_return_metrics(
    total_profit: float, initial_amount: float, bars: Sequence[IBar]
) -> ReturnMetrics:
    """Total and annualized return of the backtest."""
    total = total_return(total_profit, initial_amount)
    return ReturnMetrics(total_return=total, annualized_return=annualized_return(total, bars))


def strategy_returns(
    bars: Sequence[IBar], positions: Sequence[IClosedPosition], use_log_returns: bool = True
) -> ReturnSeries:
    """Per-bar return of the strategy, one value per bar.

    A bar contributes a price return only while a position is held: the
    entry bar and the bar right after an exit return 0, as do all bars
    outside any position. Series shorter than two bars yield an empty
    series.
    """
    bar_count = len(bars)
    if bar_count < 2:
        return as_return_series(())

    in_position = np.zeros(bar_count, dtype=bool)
    is_entry = np.zeros(bar_count, dtype=bool)
    is_exit = np.zeros(bar_count, dtype=bool)

    for position in closed_positions(positions):
        if position.entry_index < bar_count:
            is_entry[position.entry_index] = True
        if position.exit_index < bar_count:
            is_exit[position.exit_index] = True
        in_position[position.entry_index : position.exit_index + 1] = True

    closes = [float(bar.close_price) for bar in bars]
    returns: list[float] = []

    for i in range(bar_count):
        if is_entry[i] or (i > 0 and is_exit[i - 1]) or not in_position[i] or i == 0:
            returns.append(ZERO)
            continue

        previous = closes[i - 1]
        if previous <= ZERO:
            returns.append(ZERO)
        elif use_log_returns:
            returns.append(math.log(closes[i] / previous))
        else:
            returns.append((closes[i] - previous) / previous)

    return as_return_series(returns)


def price_log_returns(closes: Sequence[float]) -> list[float]:
    """Log returns of a close series, skipping non-positive previous closes."""
    return [
        math.log(current / previous)
        for previous, current in zip(closes[:-1], closes[1:], strict=True)
        if previous > ZERO
    ]


def benchmark_returns(benchmark_closes: Sequence[float] | None, length: int) -> ReturnSeries:
    """Benchmark log returns aligned to ``length`` strategy returns.

    Zero-padded at the end or truncated as needed. Without a usable
    benchmark (fewer than two closes) the series is all zeros.
    """
    if benchmark_closes is None or len(benchmark_closes) < 2:
        return as_return_series([ZERO] * length)

    closes = [float(close) for close in benchmark_closes]
    returns = [
        math.log(current / previous) if previous > ZERO else ZERO
        for previous, current in zip(closes[:-1], closes[1:], strict=True)
    ]

    if len(returns) < length:
        returns.extend([ZERO] * (length - len(returns)))
    return as_return_series(returns[:length])
