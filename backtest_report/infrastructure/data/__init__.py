"""
Price data ingestion infrastructure.

This module converts pandas price frames into the bar and benchmark
inputs of the metrics engine.
"""

from .price_series import PriceSeriesValidator, bars_from_dataframe, benchmark_closes_from_dataframe

__all__ = ["PriceSeriesValidator", "bars_from_dataframe", "benchmark_closes_from_dataframe"]
