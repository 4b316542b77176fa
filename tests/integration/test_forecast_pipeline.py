"""Integration tests for the forecast pipeline: provider, monitor, storage, CLI."""

import json

import pytest

from yieldcast.cli import main
from yieldcast.data import PriceSeriesConditionsProvider, StaticConditionsProvider
from yieldcast.engine import ForecastMonitor, MonteCarloForecaster
from yieldcast.persistence import ForecastStorage


class TestForecastMonitor:
    """Integration tests for ForecastMonitor."""

    @pytest.fixture
    def forecaster(self):
        return MonteCarloForecaster(trial_count=100, seed=3)

    @pytest.mark.asyncio
    async def test_runs_fixed_iterations(self, forecaster, scenario_pools, tmp_path):
        storage = ForecastStorage(tmp_path / "store")
        received = []
        monitor = ForecastMonitor(
            forecaster=forecaster,
            provider=StaticConditionsProvider(volatility=0.96, sentiment=0.7),
            capital=10_000,
            pools=scenario_pools,
            interval_seconds=0,
            storage=storage,
            on_result=received.append,
        )

        results = await monitor.run(iterations=3)

        assert len(results) == 3
        assert len(received) == 3
        assert monitor.latest is results[-1]
        assert len(storage.list_forecasts("monitor")) == 3
        assert all(r.allocation.amount_for("RLUSD/XRP") == pytest.approx(8000.0) for r in results)

    @pytest.mark.asyncio
    async def test_stop_from_callback(self, forecaster, scenario_pools):
        monitor = None

        def stop_after_first(result):
            monitor.stop()

        monitor = ForecastMonitor(
            forecaster=forecaster,
            provider=StaticConditionsProvider(volatility=0.2),
            capital=5_000,
            pools=scenario_pools,
            interval_seconds=60,
            on_result=stop_after_first,
        )

        results = await monitor.run()

        assert len(results) == 1

    @pytest.mark.asyncio
    async def test_conditions_follow_provider(self, forecaster, scenario_pools):
        provider = PriceSeriesConditionsProvider([1.0, 1.0, 1.0], sentiment=0.5)
        monitor = ForecastMonitor(
            forecaster=forecaster,
            provider=provider,
            capital=10_000,
            pools=scenario_pools,
            interval_seconds=0,
        )

        calm = await monitor.poll_once()
        # Large swings push realized volatility above the threshold
        provider.update_prices([1.0, 2.0, 0.5, 2.0, 0.4])
        stressed = await monitor.poll_once()

        assert calm.allocation.regime.value == "normal"
        assert stressed.allocation.regime.value == "high_volatility"
        assert len(monitor.history) == 2

    @pytest.mark.asyncio
    async def test_from_settings(self, forecaster, scenario_pools, mock_settings):
        mock_settings.poll_interval_seconds = 0.25
        monitor = ForecastMonitor.from_settings(
            mock_settings,
            forecaster,
            StaticConditionsProvider(volatility=0.3),
            capital=1_000,
            pools=scenario_pools,
            label="nightly",
        )

        assert monitor.interval_seconds == 0.25
        assert monitor.label == "nightly"

        result = await monitor.poll_once()
        assert result.label == "nightly"
        assert monitor.history == [result]


class TestCli:
    """End-to-end tests for the command-line runner."""

    def test_json_output(self, capsys):
        exit_code = main(["--trials", "50", "--seed", "1", "--volatility", "0.96", "--sentiment", "0.7", "--json"])

        assert exit_code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["summary"]["trial_count"] == 50
        assert data["allocation"]["regime"] == "high_volatility"

    def test_compare_presets_json(self, capsys):
        exit_code = main(["--trials", "20", "--seed", "2", "--compare-presets", "--json"])

        assert exit_code == 0
        data = json.loads(capsys.readouterr().out)
        assert [r["label"] for r in data] == ["balanced", "high_stable", "eco_focus"]

    def test_report_output(self, capsys):
        exit_code = main(["--trials", "50", "--seed", "1"])

        assert exit_code == 0
        assert "Mean Yield" in capsys.readouterr().out

    def test_invalid_capital(self):
        assert main(["--capital", "-5", "--trials", "10"]) == 2

    def test_zero_trials_rejected(self, capsys):
        assert main(["--trials", "0", "--seed", "1", "--json"]) == 2
        assert capsys.readouterr().out == ""

    def test_zero_workers_rejected(self, capsys):
        assert main(["--trials", "10", "--workers", "0", "--seed", "1", "--json"]) == 2
        assert capsys.readouterr().out == ""

    def test_compare_presets_saves_each_preset(self, capsys, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        exit_code = main(["--trials", "20", "--seed", "2", "--compare-presets", "--save", "--json"])

        assert exit_code == 0
        assert len(json.loads(capsys.readouterr().out)) == 3
        storage = ForecastStorage(tmp_path / ".cache" / "yieldcast")
        assert storage.list_labels() == ["balanced", "eco_focus", "high_stable"]
