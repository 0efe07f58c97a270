"""
Core type definitions and protocols.

This module defines the narrow interfaces the metrics engine consumes, so
it never depends on a concrete price-series, signal-engine or ratio
library type.
"""

from datetime import datetime
from typing import Protocol, runtime_checkable

from backtest_report.core.enums import TradeDirection
from backtest_report.core.types import LevelSeries, ReturnSeries


class IBar(Protocol):
    """Protocol defining the interface for price bars."""

    @property
    def end_time(self) -> datetime: ...

    @property
    def close_price(self) -> float: ...


class IClosedPosition(Protocol):
    """Protocol defining the interface for positions produced by a signal engine.

    Indices refer to bars of the price series the position was traded on.
    """

    @property
    def entry_index(self) -> int: ...

    @property
    def entry_price(self) -> float: ...

    @property
    def exit_index(self) -> int: ...

    @property
    def exit_price(self) -> float: ...

    @property
    def direction(self) -> TradeDirection: ...

    @property
    def is_closed(self) -> bool: ...


@runtime_checkable
class RatioCalculator(Protocol):
    """Protocol for the collaborator supplying standard risk ratios.

    Every method returns a plain float; degenerate inputs must be handled by
    the implementation (return 0 or a sentinel, never raise).
    """

    def sharpe(
        self, returns: ReturnSeries, risk_free_rate: float, annualization_factor: int
    ) -> float:
        """Annualized Sharpe ratio."""
        ...

    def sortino(
        self, returns: ReturnSeries, risk_free_rate: float, annualization_factor: int
    ) -> float:
        """Annualized Sortino ratio."""
        ...

    def omega(self, returns: ReturnSeries, threshold: float) -> float:
        """Omega ratio around ``threshold``."""
        ...

    def treynor(self, returns: ReturnSeries, risk_free_rate: float, beta: float) -> float:
        """Treynor ratio."""
        ...

    def ulcer_index(self, levels: LevelSeries) -> float:
        """Ulcer Index of a level series, in percent."""
        ...

    def skewness(self, returns: ReturnSeries) -> float:
        """Sample skewness."""
        ...

    def calmar(self, annualized_return: float, max_drawdown: float) -> float:
        """Calmar ratio."""
        ...
