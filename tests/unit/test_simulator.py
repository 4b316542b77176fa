"""Unit tests for the Monte Carlo driver."""

import numpy as np
import pytest

from yieldcast.core.exceptions import InvalidInputError
from yieldcast.core.models import MarketConditions
from yieldcast.engine import (
    AllocatorConfig,
    MonteCarloForecaster,
    SeededRandomSourceFactory,
    run_simulation,
    simulate_yields,
    summarize,
)


class TestRunSimulation:
    """Tests for run_simulation."""

    def test_scenario_mean_in_plausible_band(self, scenario_pools, high_vol_conditions, rng_factory):
        summary = run_simulation(10_000, scenario_pools, high_vol_conditions, 1000, rng_factory)

        assert summary.trial_count == 1000
        assert -1.0 < summary.mean_yield < 2.0
        assert summary.mean_yield == pytest.approx(0.34, abs=0.05)

    def test_summary_sanity(self, mixed_pools, high_vol_conditions, rng_factory):
        summary = run_simulation(5_000, mixed_pools, high_vol_conditions, 500, rng_factory)

        assert summary.min_yield <= summary.mean_yield <= summary.max_yield
        assert summary.std_dev >= 0
        assert 0.0 <= summary.success_rate <= 1.0
        assert summary.confidence_lower <= summary.confidence_upper
        assert summary.min_yield <= summary.percentiles[5] <= summary.percentiles[95] <= summary.max_yield

    def test_reproducible_with_seed(self, scenario_pools, high_vol_conditions):
        first = run_simulation(10_000, scenario_pools, high_vol_conditions, 300, SeededRandomSourceFactory(8))
        second = run_simulation(10_000, scenario_pools, high_vol_conditions, 300, SeededRandomSourceFactory(8))

        assert first == second

    def test_zero_spread_guards_sharpe(self, scenario_pools, rng_factory):
        """Zero volatility gives identical trials; Sharpe is 0 and flagged."""
        summary = run_simulation(10_000, scenario_pools, MarketConditions(volatility=0.0), 50, rng_factory)

        assert summary.std_dev == 0.0
        assert summary.sharpe_ratio == 0.0
        assert summary.sharpe_defined is False
        assert summary.min_yield <= summary.mean_yield <= summary.max_yield

    def test_single_trial(self, scenario_pools, high_vol_conditions, rng_factory):
        summary = run_simulation(10_000, scenario_pools, high_vol_conditions, 1, rng_factory)

        assert summary.trial_count == 1
        assert summary.min_yield == summary.max_yield == summary.mean_yield
        assert summary.sharpe_defined is False

    @pytest.mark.parametrize("trial_count", [0, -5, 2.5, True])
    def test_invalid_trial_count(self, scenario_pools, high_vol_conditions, rng_factory, trial_count):
        with pytest.raises(InvalidInputError):
            run_simulation(100, scenario_pools, high_vol_conditions, trial_count, rng_factory)

    def test_invalid_capital_delegated(self, scenario_pools, high_vol_conditions, rng_factory):
        with pytest.raises(InvalidInputError):
            run_simulation(-100, scenario_pools, high_vol_conditions, 10, rng_factory)

    def test_empty_pools_delegated(self, high_vol_conditions, rng_factory):
        with pytest.raises(InvalidInputError):
            run_simulation(100, [], high_vol_conditions, 10, rng_factory)

    def test_regime_variability(self, mixed_pools, calm_conditions):
        first = run_simulation(
            10_000, mixed_pools, calm_conditions, 200, SeededRandomSourceFactory(3),
            regime_variability=True,
        )
        second = run_simulation(
            10_000, mixed_pools, calm_conditions, 200, SeededRandomSourceFactory(3),
            regime_variability=True,
        )

        assert first == second
        assert first.min_yield <= first.mean_yield <= first.max_yield

    def test_parallel_workers(self, scenario_pools, high_vol_conditions):
        """Chunked runs are reproducible and agree with the serial run in expectation."""
        parallel = simulate_yields(
            10_000, scenario_pools, high_vol_conditions, 2000,
            SeededRandomSourceFactory(17), workers=2,
        )
        again = simulate_yields(
            10_000, scenario_pools, high_vol_conditions, 2000,
            SeededRandomSourceFactory(17), workers=2,
        )
        serial = simulate_yields(
            10_000, scenario_pools, high_vol_conditions, 2000,
            SeededRandomSourceFactory(17), workers=1,
        )

        assert parallel.shape == (2000,)
        np.testing.assert_array_equal(parallel, again)
        assert parallel.mean() == pytest.approx(serial.mean(), abs=0.05)

    def test_invalid_workers(self, scenario_pools, high_vol_conditions, rng_factory):
        with pytest.raises(InvalidInputError):
            simulate_yields(100, scenario_pools, high_vol_conditions, 10, rng_factory, workers=0)


class TestSummarize:
    """Tests for summarize."""

    def test_known_values(self):
        summary = summarize([0.1, 0.2, 0.3, -0.2])

        assert summary.mean_yield == pytest.approx(0.1)
        assert summary.std_dev == pytest.approx(np.std([0.1, 0.2, 0.3, -0.2]))
        assert summary.min_yield == -0.2
        assert summary.max_yield == 0.3
        assert summary.success_rate == pytest.approx(0.75)
        assert summary.sharpe_ratio == pytest.approx(summary.mean_yield / summary.std_dev)

    def test_tiny_spread_is_kept(self):
        summary = summarize([1e-13, 3e-13])

        assert summary.std_dev == pytest.approx(1e-13)
        assert summary.sharpe_defined is True
        assert summary.sharpe_ratio == pytest.approx(2.0)

    def test_identical_yields_have_zero_spread(self):
        summary = summarize([0.1] * 7)

        assert summary.std_dev == 0.0
        assert summary.sharpe_defined is False

    def test_zero_is_not_success(self):
        summary = summarize([0.0, 0.0, 0.1])

        assert summary.success_rate == pytest.approx(1 / 3)

    def test_empty(self):
        with pytest.raises(InvalidInputError):
            summarize([])

    def test_non_finite(self):
        with pytest.raises(InvalidInputError):
            summarize([0.1, float("nan")])

    def test_invalid_confidence(self):
        with pytest.raises(InvalidInputError):
            summarize([0.1, 0.2], confidence_level=1.0)


class TestMonteCarloForecaster:
    """Tests for the forecaster service."""

    @pytest.fixture
    def forecaster(self):
        return MonteCarloForecaster(trial_count=300, seed=42)

    def test_forecast_result(self, forecaster, scenario_pools, high_vol_conditions):
        result = forecaster.forecast(10_000, scenario_pools, high_vol_conditions, label="scenario")

        assert result.label == "scenario"
        assert result.seed == 42
        assert len(result.yields) == 300
        assert result.allocation.amount_for("RLUSD/XRP") == pytest.approx(8000.0)
        assert result.parameters["eco_boost"] == 1.24
        assert result.expected_annual_yield == pytest.approx(result.summary.mean_yield * 10_000)

    def test_seeded_forecasts_match(self, forecaster, scenario_pools, high_vol_conditions):
        first = forecaster.forecast(10_000, scenario_pools, high_vol_conditions)
        second = forecaster.forecast(10_000, scenario_pools, high_vol_conditions)

        assert first.summary == second.summary

    def test_from_settings(self, mock_settings):
        forecaster = MonteCarloForecaster.from_settings(mock_settings)

        assert forecaster.trial_count == 200
        assert forecaster.seed == 7
        assert forecaster.config == AllocatorConfig()

    def test_compare_presets(self, forecaster, mixed_pools):
        conditions = MarketConditions(volatility=0.45, sentiment=0.5)
        results = forecaster.compare_presets(10_000, mixed_pools, conditions)

        assert [r.label for r in results] == ["balanced", "high_stable", "eco_focus"]
        # 0.45 is above the high_stable threshold only
        assert results[1].allocation.regime.value == "high_volatility"
        assert results[0].allocation.regime.value == "normal"

    def test_format_comparison(self, forecaster, scenario_pools, high_vol_conditions):
        results = forecaster.compare_presets(10_000, scenario_pools, high_vol_conditions, presets=["balanced"])
        text = forecaster.format_comparison(results)

        assert "FORECAST COMPARISON" in text
        assert "balanced" in text

    def test_forecast_from_provider(self, forecaster, scenario_pools):
        from yieldcast.data import StaticConditionsProvider

        provider = StaticConditionsProvider(volatility=0.96, sentiment=0.7)
        result = forecaster.forecast_from_provider(10_000, scenario_pools, provider)

        assert result.conditions.volatility == 0.96
