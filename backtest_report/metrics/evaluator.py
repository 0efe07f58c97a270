"""
Backtest evaluation entry point.

Runs the full pipeline (trade reconstruction, loss/drawdown extraction,
trade statistics, return and risk metrics, scoring) over one completed
backtest and assembles an immutable ``BacktestReport``.
"""

from collections.abc import Sequence
from dataclasses import replace

from loguru import logger

from backtest_report.core.exceptions.backtest import ConfigurationError
from backtest_report.core.models.backtest import BacktestReport, EvaluationConfig
from backtest_report.core.protocols import IBar, IClosedPosition, RatioCalculator
from backtest_report.core.utils.decorators import log_evaluation
from backtest_report.core.utils.validation import validate_position_bounds

from .drawdown import attach_loss_and_drawdown, extract_loss_and_drawdown
from .ratios import StandardRatioCalculator
from .reconstruction import closed_positions, reconstruct_trades
from .returns import annualization_factor, benchmark_returns, calculate_return_metrics, strategy_returns
from .risk import calculate_risk_metrics
from .scoring import comprehensive_score
from .trade_statistics import aggregate_trade_statistics


def _resolve_ratio_calculator(ratio_calculator: RatioCalculator | None) -> RatioCalculator:
    if ratio_calculator is None:
        return StandardRatioCalculator()
    if not isinstance(ratio_calculator, RatioCalculator):
        raise ConfigurationError(
            f"{type(ratio_calculator).__name__} does not implement the RatioCalculator interface"
        )
    return ratio_calculator


@log_evaluation
def evaluate_backtest(
    bars: Sequence[IBar],
    positions: Sequence[IClosedPosition],
    config: EvaluationConfig,
    benchmark_closes: Sequence[float] | None = None,
    ratio_calculator: RatioCalculator | None = None,
) -> BacktestReport:
    """Evaluate a completed backtest.

    Never raises: any fault while computing metrics is logged and turned
    into a report with ``success=False``. A backtest without closed
    positions yields a successful, zero-filled report.

    Args:
        bars: Price series the backtest ran on
        positions: Positions produced by the signal engine
        config: Capital, fees, interval and labels of the run
        benchmark_closes: Optional benchmark close prices
        ratio_calculator: Provider of the standard ratios, defaults to
            ``StandardRatioCalculator``

    Returns:
        The assembled BacktestReport
    """
    try:
        config.validate()
        validate_position_bounds(positions, len(bars))
        calculator = _resolve_ratio_calculator(ratio_calculator)

        closed = closed_positions(positions)
        if not closed:
            logger.info(f"No closed positions for '{config.strategy_name}', returning empty report")
            return BacktestReport.empty(config)

        records = reconstruct_trades(closed, bars, config.initial_amount, config.fee_ratio)
        losses, drawdowns = extract_loss_and_drawdown(closed, bars)
        records = attach_loss_and_drawdown(records, losses, drawdowns)

        stats = aggregate_trade_statistics(records, config.initial_amount)
        logger.debug(
            f"Reconstructed {stats.count} trades: profit={stats.total_profit:.4f}, "
            f"fees={stats.total_fee:.4f}, win_rate={stats.win_rate}"
        )

        return_metrics = calculate_return_metrics(stats.total_profit, config.initial_amount, bars)
        factor = annualization_factor(config.interval, len(bars))
        returns = strategy_returns(bars, closed, config.use_log_returns)
        benchmark = benchmark_returns(benchmark_closes, len(returns))

        risk = calculate_risk_metrics(
            bars=bars,
            returns=returns,
            benchmark=benchmark,
            benchmark_closes=benchmark_closes,
            stats=stats,
            return_metrics=return_metrics,
            annualization_factor=factor,
            risk_free_rate=config.risk_free_rate,
            ratio_calculator=calculator,
        )
        risk = replace(risk, comprehensive_score=comprehensive_score(stats, return_metrics, risk))

        return BacktestReport.from_metrics(config, tuple(records), stats, return_metrics, risk)

    except Exception as e:
        strategy_name = getattr(config, "strategy_name", "")
        logger.exception(f"Backtest evaluation failed for '{strategy_name}': {e}")
        return BacktestReport.failure(str(e))


class BacktestEvaluator:
    """Object wrapper around ``evaluate_backtest``; the report is computed once, on construction."""

    def __init__(
        self,
        bars: Sequence[IBar],
        positions: Sequence[IClosedPosition],
        config: EvaluationConfig,
        benchmark_closes: Sequence[float] | None = None,
        ratio_calculator: RatioCalculator | None = None,
    ):
        self.bars = bars
        self.positions = positions
        self.config = config
        self.benchmark_closes = benchmark_closes
        self.ratio_calculator = ratio_calculator
        self._result = evaluate_backtest(
            bars,
            positions,
            config,
            benchmark_closes=benchmark_closes,
            ratio_calculator=ratio_calculator,
        )

    @property
    def result(self) -> BacktestReport:
        """The report evaluated at construction."""
        return self._result
