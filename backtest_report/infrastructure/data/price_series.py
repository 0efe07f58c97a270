"""
Price series ingestion.

Converts pandas DataFrames with ``timestamp`` and ``close`` columns into
the bar tuples and benchmark close lists consumed by the metrics engine.
"""

import pandas as pd
from loguru import logger

from backtest_report.core.exceptions.backtest import ValidationError
from backtest_report.core.models.position import Bar
from backtest_report.core.types.financial import to_float

REQUIRED_COLUMNS = ("timestamp", "close")


class PriceSeriesValidator:
    """
    Close-price series validator.

    Features:
    - Structure validation (required columns, duplicate timestamps)
    - Data type validation for the close column
    - Value range validation (positive closes)
    - Quality checks with warnings (ordering, extreme moves)
    """

    def __init__(self, extreme_move_threshold: float = 0.5):
        self.extreme_move_threshold = extreme_move_threshold

    def validate_data(self, data: pd.DataFrame) -> bool:
        """
        Validate close-price data integrity.

        Args:
            data: DataFrame with timestamp and close columns

        Returns:
            True if data is valid

        Raises:
            ValidationError: If data has integrity issues
        """
        self._validate_data_structure(data)
        if data.empty:
            return True

        self._validate_data_types(data)
        self._validate_data_values(data)
        self._validate_data_quality(data)

        return True

    def _validate_data_structure(self, data: pd.DataFrame) -> None:
        """Validate basic data structure requirements."""
        missing_columns = set(REQUIRED_COLUMNS) - set(data.columns)
        if missing_columns:
            raise ValidationError(f"Missing required columns: {sorted(missing_columns)}")

        if data["timestamp"].duplicated().any():
            raise ValidationError("Duplicate timestamps found in data")

    def _validate_data_types(self, data: pd.DataFrame) -> None:
        """Validate the close column is numeric and complete."""
        if not pd.api.types.is_numeric_dtype(data["close"]):
            raise ValidationError("Column close must be numeric")

        for col in REQUIRED_COLUMNS:
            if data[col].isna().any():
                raise ValidationError(f"Column {col} contains NaN values")

    def _validate_data_values(self, data: pd.DataFrame) -> None:
        """Validate closes are positive."""
        if (data["close"] <= 0).any():
            raise ValidationError("Column close contains non-positive values")

    def _validate_data_quality(self, data: pd.DataFrame) -> None:
        """Warn about anomalies that do not invalidate the series."""
        moves = data["close"].pct_change().abs()
        extreme_moves = moves > self.extreme_move_threshold
        if extreme_moves.any():
            logger.warning(
                f"Found {int(extreme_moves.sum())} bars with extreme close moves "
                f"(>{self.extreme_move_threshold:.0%})"
            )

        if not data["timestamp"].is_monotonic_increasing:
            logger.warning("Timestamps are not in ascending order")


def _to_datetime(timestamps: pd.Series) -> pd.Series:
    if pd.api.types.is_datetime64_any_dtype(timestamps):
        return timestamps
    try:
        return pd.to_datetime(timestamps)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Column timestamp cannot be parsed as datetimes: {e}") from e


def bars_from_dataframe(
    data: pd.DataFrame, validator: PriceSeriesValidator | None = None
) -> tuple[Bar, ...]:
    """Validate a price DataFrame and convert each row into a ``Bar``.

    Rows keep their DataFrame order; positions index into that order.
    """
    (validator or PriceSeriesValidator()).validate_data(data)
    if data.empty:
        return ()

    timestamps = _to_datetime(data["timestamp"])
    bars = tuple(
        Bar(end_time=timestamp.to_pydatetime(), close_price=to_float(close))
        for timestamp, close in zip(timestamps, data["close"], strict=True)
    )
    logger.debug(f"Loaded {len(bars)} bars from {bars[0].end_time} to {bars[-1].end_time}")
    return bars


def benchmark_closes_from_dataframe(
    data: pd.DataFrame, validator: PriceSeriesValidator | None = None
) -> list[float]:
    """Validate a benchmark DataFrame and return its closes sorted by time."""
    (validator or PriceSeriesValidator()).validate_data(data)
    if data.empty:
        return []

    ordered = data.assign(timestamp=_to_datetime(data["timestamp"])).sort_values("timestamp")
    return [to_float(close) for close in ordered["close"]]
