"""
Trade statistics aggregation.
"""

from collections.abc import Sequence

from backtest_report.core.constants import RATIO_SENTINEL
from backtest_report.core.models.metrics import TradeStatistics
from backtest_report.core.models.trade import TradeRecord
from backtest_report.core.types.financial import ONE, ZERO, round_ratio, safe_divide


def calculate_profit_factor(gross_profit: float, gross_loss: float) -> float:
    """Gross profit over gross loss.

    Returns the sentinel 999.9999 when there are gains but no losses, and
    1.0 when there are neither.

    Examples:
        >>> calculate_profit_factor(300.0, 100.0)
        3.0
        >>> calculate_profit_factor(50.0, 0.0)
        999.9999
    """
    if gross_loss > ZERO:
        return round_ratio(gross_profit / gross_loss)
    if gross_profit > ZERO:
        return RATIO_SENTINEL
    return ONE


def total_return(total_profit: float, initial_amount: float) -> float:
    """Total profit as a fraction of starting capital (4 dp)."""
    if initial_amount <= ZERO:
        return ZERO
    return round_ratio(total_profit / initial_amount)


def aggregate_trade_statistics(
    records: Sequence[TradeRecord], initial_amount: float
) -> TradeStatistics:
    """Sum trade records into counts, profit figures and worst-case risk.

    Trades with zero profit count as losing trades. The worst loss and
    drawdown are the largest per-trade magnitudes.

    Args:
        records: Trade records with their loss and drawdown attached
        initial_amount: Capital at the start of the backtest

    Returns:
        Aggregated TradeStatistics
    """
    count = len(records)
    profitable_count = 0
    total_profit = ZERO
    total_fee = ZERO
    gross_profit = ZERO
    gross_loss = ZERO

    for record in records:
        total_profit += record.profit
        total_fee += record.fee
        if record.profit > ZERO:
            profitable_count += 1
            gross_profit += record.profit
        else:
            gross_loss += abs(record.profit)

    win_rate = round_ratio(safe_divide(profitable_count, count))
    average_profit = round_ratio(safe_divide(total_return(total_profit, initial_amount), count))

    return TradeStatistics(
        count=count,
        profitable_count=profitable_count,
        total_profit=total_profit,
        total_fee=total_fee,
        final_amount=initial_amount + total_profit,
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        profit_factor=calculate_profit_factor(gross_profit, gross_loss),
        win_rate=win_rate,
        average_profit=average_profit,
        max_loss=max((record.max_loss for record in records), default=ZERO),
        max_drawdown=max((record.max_drawdown for record in records), default=ZERO),
    )
