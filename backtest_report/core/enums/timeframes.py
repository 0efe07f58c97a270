"""
Bar interval enumerations.

This module defines the common bar intervals and parsing of free-form
interval labels such as "3m", "2h" or "1M".
"""

import re
from enum import StrEnum

MINUTES_PER_UNIT = {
    "m": 1,
    "h": 60,
    "d": 60 * 24,
    "w": 60 * 24 * 7,
    "M": 60 * 24 * 30,
}

_INTERVAL_PATTERN = re.compile(r"^\s*(\d+)\s*([mhdwMHDW])\s*$")


class Timeframe(StrEnum):
    """
    Common bar intervals.

    Following standard exchange conventions for candlestick intervals.
    Supports minute, hour, day, week and month intervals.
    """

    # Minute intervals
    M1 = "1m"  # 1 minute
    M5 = "5m"  # 5 minutes
    M15 = "15m"  # 15 minutes
    M30 = "30m"  # 30 minutes

    # Hour intervals
    H1 = "1h"  # 1 hour
    H4 = "4h"  # 4 hours
    H6 = "6h"  # 6 hours
    H12 = "12h"  # 12 hours

    # Day/Week/Month intervals
    D1 = "1d"  # 1 day
    W1 = "1w"  # 1 week
    MO1 = "1M"  # 1 month

    @classmethod
    def to_minutes(cls, timeframe: "Timeframe") -> int:
        """
        Convert timeframe to minutes.

        Args:
            timeframe: Timeframe enum value

        Returns:
            Number of minutes in the timeframe
        """
        return parse_interval_minutes(timeframe.value)

    @classmethod
    def from_string(cls, value: str) -> "Timeframe":
        """
        Convert string to Timeframe enum.

        Args:
            value: String representation of timeframe

        Returns:
            Corresponding Timeframe enum value

        Raises:
            ValueError: If timeframe is not supported
        """
        stripped = value.strip()

        # Try direct match first; month is the only case-sensitive unit
        for tf in cls:
            if tf.value == stripped:
                return tf

        if not stripped.endswith("M"):
            for tf in cls:
                if tf.value == stripped.lower():
                    return tf

        raise ValueError(
            f"Unsupported timeframe: {value}. "
            f"Supported timeframes: {', '.join([tf.value for tf in cls])}"
        )

    @property
    def is_intraday(self) -> bool:
        """Check if timeframe is intraday (less than 1 day)."""
        return Timeframe.to_minutes(self) < MINUTES_PER_UNIT["d"]


def parse_interval_minutes(interval: str) -> int:
    """
    Parse an interval label into minutes.

    Lower-case "m" is minutes and upper-case "M" is months; the other units
    (h, d, w) are case-insensitive.

    Args:
        interval: Label of the form ``<count><unit>``, e.g. "15m", "4h", "1M"

    Returns:
        Interval length in minutes

    Raises:
        ValueError: If the label cannot be parsed

    Examples:
        >>> parse_interval_minutes("4h")
        240
        >>> parse_interval_minutes("1M")
        43200
    """
    match = _INTERVAL_PATTERN.match(interval or "")
    if match is None:
        raise ValueError(f"Unsupported interval label: {interval!r}")

    count = int(match.group(1))
    unit = match.group(2)
    if unit not in ("m", "M"):
        unit = unit.lower()
    if count <= 0:
        raise ValueError(f"Interval must be positive, got {interval!r}")

    return count * MINUTES_PER_UNIT[unit]
