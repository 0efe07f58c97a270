"""
Integration tests for the evaluation pipeline.

Runs price frames through ingestion, evaluation and serialization the way
a backtest runner hands over its results.
"""

import json

import numpy as np
import pandas as pd
import pytest

from backtest_report import BacktestEvaluator, ClosedPosition, EvaluationConfig, evaluate_backtest
from backtest_report.core.enums import TradeDirection
from backtest_report.infrastructure.data import bars_from_dataframe, benchmark_closes_from_dataframe

pytestmark = pytest.mark.integration


def random_walk_frame(periods: int, seed: int, freq: str = "D", drift: float = 0.0005) -> pd.DataFrame:
    """Create a geometric random walk close-price frame."""
    rng = np.random.default_rng(seed)
    log_returns = rng.normal(drift, 0.02, size=periods)
    closes = 100.0 * np.exp(np.cumsum(log_returns))
    return pd.DataFrame(
        {"timestamp": pd.date_range("2023-01-01", periods=periods, freq=freq), "close": closes}
    )


def alternating_positions(bars, hold: int = 10, gap: int = 5) -> list[ClosedPosition]:
    """Open a position every hold + gap bars, alternating direction."""
    positions = []
    entry = 0
    direction = TradeDirection.LONG
    while entry + hold < len(bars):
        positions.append(
            ClosedPosition(
                entry_index=entry,
                entry_price=bars[entry].close_price,
                exit_index=entry + hold,
                exit_price=bars[entry + hold].close_price,
                direction=direction,
            )
        )
        direction = direction.opposite()
        entry += hold + gap
    return positions


class TestEvaluationPipeline:
    """Integration tests for DataFrame ingestion through report serialization."""

    @pytest.fixture
    def bars(self):
        """Create a year of daily bars."""
        return bars_from_dataframe(random_walk_frame(365, seed=7))

    @pytest.fixture
    def benchmark(self):
        """Create benchmark closes over the same period."""
        return benchmark_closes_from_dataframe(random_walk_frame(365, seed=11))

    def test_should_produce_consistent_report(self, bars, benchmark):
        """Test report invariants on a realistic backtest."""
        # Arrange
        positions = alternating_positions(bars)
        config = EvaluationConfig(initial_amount=10000.0, fee_ratio=0.001, interval="1d", strategy_name="walk")

        # Act
        report = evaluate_backtest(bars, positions, config, benchmark_closes=benchmark)

        # Assert
        assert report.success, report.error_message
        assert report.number_of_trades == len(positions)
        assert report.final_amount == pytest.approx(
            config.initial_amount + sum(trade.profit for trade in report.trades)
        )
        assert report.total_fee > 0.0
        assert all(trade.max_loss >= 0.0 and trade.max_drawdown >= 0.0 for trade in report.trades)
        assert report.max_drawdown == max(trade.max_drawdown for trade in report.trades)
        assert 0.0 <= report.comprehensive_score <= 10.0
        assert report.volatility > 0.0
        assert report.var99 >= report.var95
        assert report.cvar >= report.var95

    def test_should_serialize_report_to_json(self, bars, benchmark):
        """Test that the report dictionary is JSON serializable."""
        config = EvaluationConfig(initial_amount=5000.0, interval="1d")
        report = evaluate_backtest(bars, alternating_positions(bars), config, benchmark_closes=benchmark)

        encoded = json.dumps(report.to_dict())

        decoded = json.loads(encoded)
        assert decoded["number_of_trades"] == report.number_of_trades
        assert len(decoded["trades"]) == report.number_of_trades

    def test_should_scale_volatility_with_annualization_factor(self):
        """Test that intraday intervals annualize with more periods per year."""
        bars = bars_from_dataframe(random_walk_frame(500, seed=3, freq="h"))
        positions = alternating_positions(bars)

        hourly = evaluate_backtest(bars, positions, EvaluationConfig(initial_amount=1000.0, interval="1h"))
        daily = evaluate_backtest(bars, positions, EvaluationConfig(initial_amount=1000.0, interval="1d"))

        assert hourly.success and daily.success
        assert hourly.volatility == pytest.approx(daily.volatility * np.sqrt(8760 / 365), rel=1e-3)

    def test_should_cap_score_of_flat_strategy(self):
        """Test that a strategy without meaningful return cannot score high."""
        frame = pd.DataFrame(
            {"timestamp": pd.date_range("2023-01-01", periods=200, freq="D"), "close": [100.0] * 200}
        )
        bars = bars_from_dataframe(frame)

        report = evaluate_backtest(bars, alternating_positions(bars), EvaluationConfig(initial_amount=1000.0))

        assert report.success
        assert report.total_profit < 0.0  # fees only
        assert report.comprehensive_score <= 3.0

    def test_should_match_object_api(self, bars):
        """Test that the evaluator object returns the same report."""
        positions = alternating_positions(bars)
        config = EvaluationConfig(initial_amount=10000.0)

        direct = evaluate_backtest(bars, positions, config)
        wrapped = BacktestEvaluator(bars, positions, config).result

        assert wrapped == direct
