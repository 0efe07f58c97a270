"""
Core enumerations for the backtest report engine.

This module provides centralized enumerations for domain concepts
like trade directions and bar intervals.
"""

from .position_types import TradeDirection
from .timeframes import Timeframe, parse_interval_minutes

__all__ = ["TradeDirection", "Timeframe", "parse_interval_minutes"]
