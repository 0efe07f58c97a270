"""
Intra-trade loss and drawdown extraction.

For every closed trade the bars between entry and exit (both included) are
scanned for the worst loss against the entry price and the worst decline
from the running extreme.
"""

from collections.abc import Sequence

from backtest_report.core.models.trade import TradeRecord
from backtest_report.core.protocols import IBar, IClosedPosition
from backtest_report.core.types.financial import ZERO, round_rate

from .reconstruction import closed_positions


def trade_loss_and_drawdown(position: IClosedPosition, bars: Sequence[IBar]) -> tuple[float, float]:
    """Worst intra-trade loss and drawdown of one position, as magnitudes.

    Long: loss is measured against the entry close and drawdown against the
    running highest close. Short: loss is the close relative to the exit
    close scaled by the entry close, and drawdown is measured against the
    running lowest close.
    """
    window = bars[position.entry_index : position.exit_index + 1]
    entry_price = float(window[0].close_price)
    exit_price = float(window[-1].close_price)

    peak = float("-inf")
    trough = float("inf")
    max_loss = ZERO
    max_drawdown = ZERO

    for bar in window:
        close = float(bar.close_price)
        peak = max(peak, close)
        trough = min(trough, close)

        if position.direction.is_long:
            loss_rate = round_rate((close - entry_price) / entry_price)
            drawdown_rate = round_rate((close - peak) / peak)
        else:
            loss_rate = round_rate((close - exit_price) / entry_price)
            drawdown_rate = round_rate((close - trough) / trough)

        # Only declines count; keep the most negative
        max_loss = min(max_loss, loss_rate)
        max_drawdown = min(max_drawdown, drawdown_rate)

    return abs(max_loss), abs(max_drawdown)


def extract_loss_and_drawdown(
    positions: Sequence[IClosedPosition], bars: Sequence[IBar]
) -> tuple[list[float], list[float]]:
    """Per-trade loss and drawdown magnitudes, aligned with the trade records.

    Returns two empty lists when there are no closed positions.
    """
    losses: list[float] = []
    drawdowns: list[float] = []

    for position in closed_positions(positions):
        loss, drawdown = trade_loss_and_drawdown(position, bars)
        losses.append(loss)
        drawdowns.append(drawdown)

    return losses, drawdowns


def attach_loss_and_drawdown(
    records: Sequence[TradeRecord], losses: Sequence[float], drawdowns: Sequence[float]
) -> list[TradeRecord]:
    """Return copies of the records carrying their loss and drawdown."""
    if not len(records) == len(losses) == len(drawdowns):
        raise ValueError(
            f"Mismatched lengths: {len(records)} trades, {len(losses)} losses, "
            f"{len(drawdowns)} drawdowns"
        )
    return [
        record.with_risk(max_loss=loss, max_drawdown=drawdown)
        for record, loss, drawdown in zip(records, losses, drawdowns, strict=True)
    ]
