"""
Trade reconstruction.

Turns the closed positions of a backtest into fee-adjusted trade records,
compounding capital from one trade to the next (full reinvestment, no
position sizing).
"""

import math
from collections.abc import Sequence

from loguru import logger

from backtest_report.core.enums import TradeDirection
from backtest_report.core.models.trade import TradeRecord
from backtest_report.core.protocols import IBar, IClosedPosition
from backtest_report.core.types.financial import round_ratio
from backtest_report.core.utils.decorators import validate_inputs

PRICE_TOLERANCE = 1e-9


def closed_positions(positions: Sequence[IClosedPosition]) -> list[IClosedPosition]:
    """Return the closed positions in their original order."""
    return [position for position in positions if position.is_closed]


def profit_percentage(entry_price: float, exit_price: float, direction: TradeDirection) -> float:
    """Price move of a trade in its favour, rounded to 4 decimals half-up.

    Examples:
        >>> profit_percentage(100.0, 110.0, TradeDirection.LONG)
        0.1
        >>> profit_percentage(100.0, 110.0, TradeDirection.SHORT)
        -0.1
    """
    if direction.is_long:
        return round_ratio((exit_price - entry_price) / entry_price)
    return round_ratio((entry_price - exit_price) / entry_price)


@validate_inputs
def reconstruct_trades(
    positions: Sequence[IClosedPosition],
    bars: Sequence[IBar],
    initial_amount: float,
    fee_ratio: float,
) -> list[TradeRecord]:
    """Rebuild per-trade economics including entry and exit fees.

    Entry and exit prices are the closes of the position's entry and exit
    bars. A fee of ``fee_ratio`` is charged on the notional at entry and
    again on the notional at exit; whatever remains is carried into the
    next trade.

    Args:
        positions: Positions in execution order; open ones are skipped
        bars: Price series the positions index into
        initial_amount: Capital at the start of the first trade
        fee_ratio: Fee per side as a fraction (e.g. 0.001)

    Returns:
        One TradeRecord per closed position, indexed from 1
    """
    records: list[TradeRecord] = []
    amount = initial_amount

    for index, position in enumerate(closed_positions(positions), start=1):
        entry_bar = bars[position.entry_index]
        exit_bar = bars[position.exit_index]
        entry_price = float(entry_bar.close_price)
        exit_price = float(exit_bar.close_price)

        if not (
            math.isclose(position.entry_price, entry_price, rel_tol=PRICE_TOLERANCE)
            and math.isclose(position.exit_price, exit_price, rel_tol=PRICE_TOLERANCE)
        ):
            logger.warning(
                f"Trade {index}: position prices {position.entry_price}/{position.exit_price} "
                f"differ from bar closes {entry_price}/{exit_price}; using bar closes"
            )

        entry_fee = amount * fee_ratio
        net_entry = amount - entry_fee

        pct = profit_percentage(entry_price, exit_price, position.direction)

        exit_amount = net_entry * (1 + pct)
        exit_fee = exit_amount * fee_ratio
        net_exit = exit_amount - exit_fee

        records.append(
            TradeRecord(
                index=index,
                direction=position.direction,
                entry_time=entry_bar.end_time,
                exit_time=exit_bar.end_time,
                entry_price=entry_price,
                exit_price=exit_price,
                entry_amount=amount,
                exit_amount=net_exit,
                profit=net_exit - amount,
                profit_percentage=pct,
                fee=entry_fee + exit_fee,
            )
        )

        amount = net_exit

    return records
