"""
Pydantic schemas for API request/response models.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from backtest_report.core.constants import DEFAULT_FEE_RATIO
from backtest_report.core.enums import Timeframe, TradeDirection, parse_interval_minutes
from backtest_report.core.models import Bar, ClosedPosition, EvaluationConfig


class BarModel(BaseModel):
    """A single bar of the price series."""

    end_time: datetime = Field(..., description="Bar end time")
    close_price: float = Field(..., ge=0, description="Close price")

    def to_domain(self) -> Bar:
        return Bar(end_time=self.end_time, close_price=self.close_price)


class PositionModel(BaseModel):
    """A position produced by the signal engine."""

    entry_index: int = Field(..., ge=0, description="Index of the entry bar")
    entry_price: float = Field(
        ..., gt=0, description="Entry price as reported by the signal engine; the entry bar close is used"
    )
    exit_index: int = Field(..., ge=0, description="Index of the exit bar")
    exit_price: float = Field(
        ..., gt=0, description="Exit price as reported by the signal engine; the exit bar close is used"
    )
    direction: TradeDirection = Field(default=TradeDirection.LONG, description="long or short")
    is_closed: bool = Field(default=True, description="False for positions still open")

    @field_validator("direction", mode="before")
    @classmethod
    def parse_direction(cls, v: Any) -> TradeDirection:
        """Accept long/short as well as buy/sell labels."""
        if isinstance(v, TradeDirection):
            return v
        return TradeDirection.from_string(str(v))

    @field_validator("exit_index")
    @classmethod
    def validate_exit_after_entry(cls, v: int, info: ValidationInfo) -> int:
        """Validate that a closed position exits on or after its entry bar."""
        if "entry_index" in info.data and v < info.data["entry_index"]:
            raise ValueError("exit_index must not precede entry_index")
        return v

    def to_domain(self) -> ClosedPosition:
        return ClosedPosition(
            entry_index=self.entry_index,
            entry_price=self.entry_price,
            exit_index=self.exit_index,
            exit_price=self.exit_price,
            direction=self.direction,
            is_closed=self.is_closed,
        )


class EvaluationRequest(BaseModel):
    """Request model for a backtest evaluation."""

    bars: list[BarModel] = Field(..., min_length=1, description="Price series")
    positions: list[PositionModel] = Field(default_factory=list, description="Positions")
    benchmark_closes: list[float] | None = Field(default=None, description="Benchmark closes")
    initial_amount: float = Field(default=10000.0, gt=0, description="Starting capital")
    fee_ratio: float = Field(default=DEFAULT_FEE_RATIO, ge=0.0, lt=1.0, description="Fee per side")
    interval: str = Field(default="1d", description="Bar interval label, e.g. 1h or 1d")
    strategy_name: str = Field(default="", description="Strategy label")
    parameter_description: str = Field(default="", description="Strategy parameters")
    risk_free_rate: float = Field(default=0.0, description="Per-bar risk-free rate")

    @field_validator("interval")
    @classmethod
    def validate_interval(cls, v: str) -> str:
        """Validate the interval label, normalizing common intervals (e.g. "1H" to "1h")."""
        try:
            return Timeframe.from_string(v).value
        except ValueError:
            parse_interval_minutes(v)
            return v.strip()

    @field_validator("positions")
    @classmethod
    def validate_positions_in_range(
        cls, v: list[PositionModel], info: ValidationInfo
    ) -> list[PositionModel]:
        """Validate that closed positions index bars of the price series."""
        bars = info.data.get("bars")
        if bars is None:
            return v
        for position in v:
            if position.is_closed and position.exit_index >= len(bars):
                raise ValueError(
                    f"Position exit_index {position.exit_index} outside {len(bars)} bars"
                )
        return v

    def to_config(self) -> EvaluationConfig:
        return EvaluationConfig(
            initial_amount=self.initial_amount,
            fee_ratio=self.fee_ratio,
            interval=self.interval,
            strategy_name=self.strategy_name,
            parameter_description=self.parameter_description,
            risk_free_rate=self.risk_free_rate,
        )


class EvaluationResponse(BaseModel):
    """Response model for a backtest evaluation."""

    success: bool
    error_message: str | None = None
    summary: dict[str, Any]
    report: dict[str, Any]

