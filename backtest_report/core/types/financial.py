"""
Financial data types for backtest metric calculations.

Metrics are carried as plain floats for NumPy compatibility. Where the
reported figure has a fixed precision (percentages, ratios) it is rounded
half-up through ``Decimal`` so results match the usual financial convention
rather than Python's banker's rounding.

Series types:
- ``ReturnSeries``: one per-bar return per bar of the price series
- ``LevelSeries``: values interpreted as price/equity levels by the
  peak-to-trough helpers (drawdown duration, pain index, Sterling, Burke)
"""

import math
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import NewType

# Financial calculation precision (number of decimal places)
RATIO_DECIMALS = 4  # Reported ratios and percentages
RATE_DECIMALS = 8  # Intermediate loss/drawdown rates
COLLABORATOR_DECIMALS = 6  # Sharpe, Sortino, Omega, Calmar
SCORE_DECIMALS = 2

# Common financial values as float constants
ZERO = 0.0
ONE = 1.0
HUNDRED = 100.0

ReturnSeries = NewType("ReturnSeries", tuple[float, ...])
LevelSeries = NewType("LevelSeries", tuple[float, ...])


def to_float(value: str | int | float | Decimal) -> float:
    """Convert various numeric types to float.

    Args:
        value: Numeric value to convert

    Returns:
        Float representation of the value

    Examples:
        >>> to_float(50000)
        50000.0
        >>> to_float('1.5')
        1.5
    """
    if isinstance(value, float):
        return value
    return float(value)


def round_half_up(value: float, decimals: int) -> float:
    """Round a float half-up to a fixed number of decimals.

    Non-finite values are returned unchanged.

    Examples:
        >>> round_half_up(0.12345, 4)
        0.1235
        >>> round_half_up(-0.00005, 4)
        -0.0001
    """
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-decimals)
    try:
        return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return value


def round_ratio(value: float) -> float:
    """Round a ratio or percentage to reporting precision (4 dp)."""
    return round_half_up(value, RATIO_DECIMALS)


def round_rate(value: float) -> float:
    """Round an intermediate rate (8 dp)."""
    return round_half_up(value, RATE_DECIMALS)


def safe_divide(numerator: float, denominator: float, fallback: float = ZERO) -> float:
    """Divide, returning ``fallback`` when the denominator is zero.

    Examples:
        >>> safe_divide(1.0, 0.0)
        0.0
        >>> safe_divide(1.0, 4.0)
        0.25
    """
    if denominator == ZERO:
        return fallback
    return numerator / denominator


def as_return_series(values: Iterable[float]) -> ReturnSeries:
    """Freeze per-bar returns into a ``ReturnSeries``."""
    return ReturnSeries(tuple(float(v) for v in values))


def as_level_series(returns: ReturnSeries) -> LevelSeries:
    """Reinterpret a per-bar return series as a level series.

    The values are not compounded into an equity curve: peak-to-trough
    helpers receive the raw per-bar returns as levels, which is how the
    drawdown-based ratios (Sterling, Burke, drawdown duration, pain index,
    Ulcer Index) are reported.
    """
    return LevelSeries(tuple(returns))
