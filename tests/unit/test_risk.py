"""
Unit tests for directly computed risk statistics.
"""

import math
from datetime import datetime, timedelta

import pytest

from backtest_report.core.exceptions.backtest import CalculationError
from backtest_report.core.models import Bar
from backtest_report.core.models.metrics import ReturnMetrics, TradeStatistics
from backtest_report.core.types.financial import LevelSeries, ReturnSeries, as_level_series, as_return_series
from backtest_report.metrics import risk


def make_bars(closes: list[float]) -> list[Bar]:
    """Create daily bars from a list of closes."""
    start = datetime(2024, 1, 1)
    return [Bar(end_time=start + timedelta(days=i), close_price=c) for i, c in enumerate(closes)]


def levels(*values: float) -> LevelSeries:
    """Build a level series."""
    return as_level_series(as_return_series(values))


class FixedRatioCalculator:
    """Ratio calculator returning fixed values, recording its inputs."""

    def __init__(self) -> None:
        self.calls: dict[str, tuple] = {}

    def sharpe(self, returns: ReturnSeries, risk_free_rate: float, annualization_factor: int) -> float:
        self.calls["sharpe"] = (returns, risk_free_rate, annualization_factor)
        return 1.0

    def sortino(self, returns: ReturnSeries, risk_free_rate: float, annualization_factor: int) -> float:
        return 2.0

    def omega(self, returns: ReturnSeries, threshold: float) -> float:
        return 3.0

    def treynor(self, returns: ReturnSeries, risk_free_rate: float, beta: float) -> float:
        self.calls["treynor"] = (returns, risk_free_rate, beta)
        return 4.0

    def ulcer_index(self, levels: LevelSeries) -> float:
        self.calls["ulcer_index"] = (levels,)
        return 5.0

    def skewness(self, returns: ReturnSeries) -> float:
        return 0.0

    def calmar(self, annualized_return: float, max_drawdown: float) -> float:
        self.calls["calmar"] = (annualized_return, max_drawdown)
        return 6.0


class TestVolatility:
    """Test suite for annualized close volatility."""

    def test_should_annualize_population_std_of_close_log_returns(self) -> None:
        """Test the volatility formula."""
        bars = make_bars([100.0, 110.0, 100.0])

        result = risk.volatility(bars, 365)

        assert result == pytest.approx(math.log(1.1) * math.sqrt(365), abs=1e-4)

    def test_should_return_zero_for_constant_growth_or_short_series(self) -> None:
        """Test degenerate inputs."""
        assert risk.volatility(make_bars([100.0, 110.0, 121.0]), 365) == 0.0
        assert risk.volatility(make_bars([100.0]), 365) == 0.0


class TestAlphaBeta:
    """Test suite for alpha and beta."""

    def test_should_default_without_benchmark(self) -> None:
        """Test the (0, 1) default."""
        assert risk.alpha_beta(as_return_series([0.01, 0.02]), None) == (0.0, 1.0)
        assert risk.alpha_beta(as_return_series([]), [100.0, 101.0]) == (0.0, 1.0)

    def test_should_regress_on_benchmark_with_leading_zero(self) -> None:
        """Test beta for a strategy moving twice as much as the benchmark."""
        step = math.log(1.1)
        returns = as_return_series([0.0, 2 * step, 2 * step])

        alpha, beta = risk.alpha_beta(returns, [100.0, 110.0, 121.0])

        assert beta == pytest.approx(2.0)
        assert alpha == pytest.approx(0.0)

    def test_should_return_zero_beta_for_flat_benchmark(self) -> None:
        """Test the zero-variance benchmark case."""
        returns = as_return_series([0.0, 0.03, 0.03])

        alpha, beta = risk.alpha_beta(returns, [100.0, 100.0, 100.0])

        assert beta == 0.0
        assert alpha == pytest.approx(0.02)


class TestDistributionMoments:
    """Test suite for kurtosis."""

    def test_should_return_zero_below_four_points(self) -> None:
        """Test the sample-size guard."""
        assert risk.kurtosis(as_return_series([0.1, -0.1, 0.2])) == 0.0

    def test_should_return_excess_kurtosis(self) -> None:
        """Test a symmetric two-point distribution."""
        assert risk.kurtosis(as_return_series([1.0, -1.0, 1.0, -1.0])) == -2.0

    def test_should_return_zero_for_constant_series(self) -> None:
        """Test the zero-variance guard."""
        assert risk.kurtosis(as_return_series([0.0] * 6)) == 0.0


class TestValueAtRisk:
    """Test suite for VaR and CVaR."""

    def test_should_use_worst_observation_for_small_sample(self) -> None:
        """Test the clamped quantile index on five observations."""
        returns = as_return_series([-0.05, -0.03, -0.01, 0.0, 0.02])

        assert risk.var_and_cvar(returns) == (0.05, 0.05, 0.05)

    def test_should_average_tail_for_cvar(self) -> None:
        """Test CVaR over the 5% tail of forty observations."""
        returns = as_return_series([-0.10, -0.06] + [0.01] * 38)

        var95, var99, cvar = risk.var_and_cvar(returns)

        assert var95 == 0.06
        assert var99 == 0.10
        assert cvar == 0.08

    def test_should_return_zeros_for_empty_series(self) -> None:
        """Test the empty series guard."""
        assert risk.var_and_cvar(as_return_series([])) == (0.0, 0.0, 0.0)


class TestDownsideAndTracking:
    """Test suite for downside deviation, tracking error and information ratio."""

    def test_should_compute_downside_deviation_below_target(self) -> None:
        """Test root mean square shortfall."""
        returns = as_return_series([-0.02, 0.01, -0.04])

        assert risk.downside_deviation(returns) == 0.0316

    def test_should_return_zero_without_shortfall(self) -> None:
        """Test no-downside case."""
        assert risk.downside_deviation(as_return_series([0.01, 0.02])) == 0.0

    def test_should_compute_tracking_error_and_information_ratio(self) -> None:
        """Test active return statistics."""
        returns = as_return_series([0.01, 0.03])
        benchmark = as_return_series([0.0, 0.0])

        te = risk.tracking_error(returns, benchmark)

        assert te == 0.01
        assert risk.information_ratio(returns, benchmark, te) == 2.0

    def test_should_return_zero_on_length_mismatch(self) -> None:
        """Test misaligned series."""
        returns = as_return_series([0.01, 0.03])
        benchmark = as_return_series([0.0])

        assert risk.tracking_error(returns, benchmark) == 0.0
        assert risk.information_ratio(returns, benchmark, 0.5) == 0.0
        assert risk.capture_ratios(returns, benchmark) == (0.0, 0.0)


class TestCaptureRatios:
    """Test suite for uptrend and downtrend capture."""

    def test_should_split_by_benchmark_direction(self) -> None:
        """Test capture ratios on mixed benchmark moves."""
        returns = as_return_series([0.02, -0.01, 0.05])
        benchmark = as_return_series([0.01, -0.02, 0.0])

        assert risk.capture_ratios(returns, benchmark) == (2.0, 0.5)

    def test_should_return_zero_without_benchmark_moves(self) -> None:
        """Test a flat benchmark."""
        returns = as_return_series([0.02, -0.01])
        benchmark = as_return_series([0.0, 0.0])

        assert risk.capture_ratios(returns, benchmark) == (0.0, 0.0)


class TestLevelSeriesMetrics:
    """Test suite for peak-to-trough metrics over level series."""

    def test_should_compute_sterling_and_burke(self) -> None:
        """Test ratios on a series with two equal drawdowns."""
        series = levels(0.1, 0.05, 0.2, 0.1)

        assert risk.sterling_ratio(0.5, series) == 1.0
        assert risk.burke_ratio(0.5, series) == 1.0

    def test_should_return_sentinel_without_drawdown_and_positive_return(self) -> None:
        """Test the no-drawdown sentinel."""
        series = levels(0.1, 0.2)

        assert risk.sterling_ratio(0.3, series) == 999.9999
        assert risk.burke_ratio(0.3, series) == 999.9999
        assert risk.sterling_ratio(-0.1, series) == 0.0

    def test_should_ignore_declines_under_non_positive_peaks(self) -> None:
        """Test per-bar returns relabelled as levels around zero."""
        series = levels(0.0, -0.01, -0.02)

        assert risk.sterling_ratio(0.2, series) == 999.9999
        assert risk.pain_index(series) == 0.0

    def test_should_return_zero_for_short_series(self) -> None:
        """Test the two-point minimum."""
        assert risk.sterling_ratio(0.2, levels(0.1)) == 0.0
        assert risk.max_drawdown_duration(levels(0.1)) == 0.0
        assert risk.pain_index(levels()) == 0.0

    def test_should_measure_longest_drawdown_run(self) -> None:
        """Test drawdown duration in bars."""
        series = levels(0.0, 0.01, 0.005, 0.002, 0.02, 0.01)

        assert risk.max_drawdown_duration(series) == 2.0

    def test_should_count_drawdown_open_at_end(self) -> None:
        """Test a run that never recovers."""
        assert risk.max_drawdown_duration(levels(0.05, 0.04, 0.03, 0.02)) == 3.0

    def test_should_treat_flat_levels_as_recovered(self) -> None:
        """Test that equal levels end a run."""
        assert risk.max_drawdown_duration(levels(0.0, 0.0, 0.0)) == 0.0

    def test_should_average_pain_over_full_length(self) -> None:
        """Test pain index."""
        assert risk.pain_index(levels(0.1, 0.05, 0.2, 0.1)) == 0.25


class TestCompositeRatios:
    """Test suite for modified Sharpe and risk-adjusted return."""

    def test_should_keep_sharpe_for_normal_excess_kurtosis_of_three(self) -> None:
        """Test the modifier vanishes at skew 0 and kurtosis 3."""
        assert risk.modified_sharpe_ratio(1.0, 0.0, 3.0) == 1.0

    def test_should_subtract_three_from_reported_kurtosis(self) -> None:
        """Test the kurtosis adjustment."""
        assert risk.modified_sharpe_ratio(2.0, 0.6, 0.0) == 3.4

    def test_should_discount_total_return_by_blended_risk(self) -> None:
        """Test the risk-adjusted return weights."""
        assert risk.risk_adjusted_return(0.3, 0.5, 0.5, 0.5) == 0.2
        assert risk.risk_adjusted_return(0.3, -0.5, -0.5, -0.5) == 0.2
        assert risk.risk_adjusted_return(0.3, 0.0, 0.0, 0.0) == 0.3


class TestCalculateRiskMetrics:
    """Test suite for the risk metrics orchestrator."""

    def test_should_delegate_standard_ratios_to_calculator(self) -> None:
        """Test collaborator wiring and level relabelling."""
        # Arrange
        bars = make_bars([100.0, 110.0, 100.0, 105.0])
        returns = as_return_series([0.0, 0.0, -0.0953, 0.0488])
        benchmark = as_return_series([0.0] * 4)
        stats = TradeStatistics(
            count=1,
            profitable_count=1,
            total_profit=50.0,
            total_fee=2.0,
            final_amount=1050.0,
            gross_profit=50.0,
            gross_loss=0.0,
            profit_factor=999.9999,
            win_rate=1.0,
            average_profit=0.05,
            max_loss=0.09,
            max_drawdown=0.09,
        )
        calculator = FixedRatioCalculator()

        # Act
        metrics = risk.calculate_risk_metrics(
            bars=bars,
            returns=returns,
            benchmark=benchmark,
            benchmark_closes=None,
            stats=stats,
            return_metrics=ReturnMetrics(total_return=0.05, annualized_return=0.3),
            annualization_factor=365,
            risk_free_rate=0.0,
            ratio_calculator=calculator,
        )

        # Assert
        assert metrics.sharpe_ratio == 1.0
        assert metrics.sortino_ratio == 2.0
        assert metrics.omega == 3.0
        assert metrics.treynor_ratio == 4.0
        assert metrics.ulcer_index == 5.0
        assert metrics.calmar_ratio == 6.0
        assert metrics.beta == 1.0
        assert metrics.comprehensive_score == 0.0
        assert calculator.calls["sharpe"] == (returns, 0.0, 365)
        assert calculator.calls["treynor"][2] == 1.0
        assert calculator.calls["ulcer_index"] == (returns,)
        assert calculator.calls["calmar"] == (0.3, 0.09)
        assert metrics.modified_sharpe_ratio == risk.modified_sharpe_ratio(1.0, 0.0, metrics.kurtosis)

    def test_should_reject_non_finite_collaborator_result(self) -> None:
        """Test that a NaN from the ratio calculator raises CalculationError."""
        calculator = FixedRatioCalculator()
        calculator.sortino = lambda returns, risk_free_rate, annualization_factor: math.nan  # type: ignore[method-assign]
        stats = TradeStatistics(
            count=1,
            profitable_count=0,
            total_profit=-10.0,
            total_fee=2.0,
            final_amount=990.0,
            gross_profit=0.0,
            gross_loss=10.0,
            profit_factor=0.0,
            win_rate=0.0,
            average_profit=-0.01,
            max_loss=0.01,
            max_drawdown=0.01,
        )

        with pytest.raises(CalculationError, match="Sortino ratio is not finite"):
            risk.calculate_risk_metrics(
                bars=make_bars([100.0, 99.0, 98.0]),
                returns=as_return_series([0.0, -0.01, -0.01]),
                benchmark=as_return_series([0.0] * 3),
                benchmark_closes=None,
                stats=stats,
                return_metrics=ReturnMetrics(total_return=-0.01, annualized_return=-0.5),
                annualization_factor=365,
                risk_free_rate=0.0,
                ratio_calculator=calculator,
            )
