"""Caller-driven polling loop around the forecaster."""

import asyncio
import logging
from typing import Callable, List, Optional, Sequence

from yieldcast.core.models import ForecastResult, Pool

logger = logging.getLogger(__name__)


class ForecastMonitor:
    """
    Periodically re-runs a forecast with fresh market conditions.

    Each poll reads the provider, runs the (pure, CPU-bound) forecaster in
    the default executor, then optionally stores the snapshot and invokes
    `on_result`. The forecaster itself has no timers.
    """

    def __init__(
        self,
        forecaster,
        provider,
        capital: float,
        pools: Sequence[Pool],
        interval_seconds: float = 30.0,
        storage=None,
        label: str = "monitor",
        on_result: Optional[Callable[[ForecastResult], None]] = None,
    ):
        """
        Initialize monitor.

        Args:
            forecaster: MonteCarloForecaster used for each poll
            provider: ConditionsProvider polled for volatility/sentiment
            capital: Capital to forecast
            pools: Pools to allocate across
            interval_seconds: Delay between polls
            storage: Optional ForecastStorage for snapshots
            label: Label recorded on each result
            on_result: Optional callback per result
        """
        self.forecaster = forecaster
        self.provider = provider
        self.capital = capital
        self.pools = list(pools)
        self.interval_seconds = interval_seconds
        self.storage = storage
        self.label = label
        self.on_result = on_result

        self._stop_event = asyncio.Event()
        self.history: List[ForecastResult] = []

    @classmethod
    def from_settings(
        cls,
        settings,
        forecaster,
        provider,
        capital: float,
        pools: Sequence[Pool],
        **kwargs,
    ) -> "ForecastMonitor":
        """Create a monitor polling at the configured interval."""
        return cls(
            forecaster=forecaster,
            provider=provider,
            capital=capital,
            pools=pools,
            interval_seconds=settings.poll_interval_seconds,
            **kwargs,
        )

    @property
    def latest(self) -> Optional[ForecastResult]:
        return self.history[-1] if self.history else None

    def stop(self) -> None:
        """Ask the loop to exit after the current poll."""
        self._stop_event.set()

    async def poll_once(self) -> ForecastResult:
        """Run a single forecast with current provider conditions."""
        conditions = self.provider.get_conditions()
        loop = asyncio.get_running_loop()

        result = await loop.run_in_executor(
            None,
            lambda: self.forecaster.forecast(
                self.capital, self.pools, conditions, label=self.label
            ),
        )

        self.history.append(result)

        if self.storage is not None:
            self.storage.save_forecast(result)
        if self.on_result is not None:
            self.on_result(result)

        return result

    async def run(self, iterations: Optional[int] = None) -> List[ForecastResult]:
        """
        Poll until stopped or `iterations` forecasts have run.

        Returns:
            Results produced during this run
        """
        self._stop_event.clear()
        produced: List[ForecastResult] = []

        logger.info(
            f"Starting forecast monitor: {self.label}, interval={self.interval_seconds}s"
        )

        while not self._stop_event.is_set():
            result = await self.poll_once()
            produced.append(result)

            if iterations is not None and len(produced) >= iterations:
                break

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                pass

        logger.info(f"Forecast monitor stopped after {len(produced)} polls")
        return produced
