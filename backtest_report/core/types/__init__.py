"""
Core type definitions and utilities.
"""

# Re-export financial utilities for easy access
from .financial import (
    COLLABORATOR_DECIMALS,
    ONE,
    RATE_DECIMALS,
    RATIO_DECIMALS,
    SCORE_DECIMALS,
    ZERO,
    LevelSeries,
    ReturnSeries,
    as_level_series,
    as_return_series,
    round_half_up,
    round_rate,
    round_ratio,
    safe_divide,
    to_float,
)

__all__ = [
    # Series types
    "ReturnSeries",
    "LevelSeries",
    "as_return_series",
    "as_level_series",
    # Utility functions
    "to_float",
    "round_half_up",
    "round_ratio",
    "round_rate",
    "safe_divide",
    # Constants
    "RATIO_DECIMALS",
    "RATE_DECIMALS",
    "COLLABORATOR_DECIMALS",
    "SCORE_DECIMALS",
    "ZERO",
    "ONE",
]
