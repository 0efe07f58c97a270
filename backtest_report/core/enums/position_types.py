"""
Trade direction enumerations.

This module defines the allowed directions of a closed position.
"""

from enum import StrEnum


class TradeDirection(StrEnum):
    """
    Allowed trade directions.

    Defines whether a closed position was opened with a buy (long) or a
    sell (short).
    """

    LONG = "long"
    SHORT = "short"

    @property
    def is_long(self) -> bool:
        """Check if direction is long."""
        return self == self.LONG

    @property
    def is_short(self) -> bool:
        """Check if direction is short."""
        return self == self.SHORT

    @property
    def entry_action(self) -> str:
        """Get the order side that opened the position ("BUY" or "SELL")."""
        return "BUY" if self.is_long else "SELL"

    def opposite(self) -> "TradeDirection":
        """Get the opposite direction."""
        return self.SHORT if self.is_long else self.LONG  # type: ignore[return-value]

    @classmethod
    def from_string(cls, value: str) -> "TradeDirection":
        """
        Convert string to TradeDirection, accepting order sides as aliases.

        Args:
            value: "long"/"short" or "buy"/"sell" in any case

        Returns:
            Corresponding TradeDirection

        Raises:
            ValueError: If the value is not a known direction
        """
        value_lower = value.strip().lower()
        if value_lower in ("long", "buy"):
            return cls.LONG
        if value_lower in ("short", "sell"):
            return cls.SHORT
        raise ValueError(
            f"Unsupported trade direction: {value}. "
            f"Supported directions: {', '.join([d.value for d in cls])}"
        )
