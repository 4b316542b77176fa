"""Monte Carlo yield simulation engine."""

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import numpy as np

from yieldcast.core.constants import (
    DEFAULT_CONFIDENCE_LEVEL,
    DEFAULT_TRIAL_COUNT,
    MAX_RECOMMENDED_TRIALS,
    REGIME_SENTIMENT_BOUNDS,
    REGIME_SENTIMENT_DRIFT,
    REGIME_VOLATILITY_RANGE,
    REPORTED_PERCENTILES,
)
from yieldcast.core.exceptions import InvalidInputError
from yieldcast.core.models import (
    AllocationVector,
    ForecastResult,
    MarketConditions,
    Pool,
    SimulationSummary,
)

from .allocator import AllocatorConfig, allocate
from .random_source import NoiseModel, RandomSource, SeededRandomSourceFactory
from .trial import simulate_one_trial, simulate_trials

logger = logging.getLogger(__name__)

RandomSourceFactory = Callable[[int], RandomSource]


def validate_trial_count(trial_count) -> int:
    """Return trial_count as int or raise InvalidInputError."""
    if isinstance(trial_count, bool) or not isinstance(trial_count, (int, np.integer)):
        raise InvalidInputError(f"trial_count must be an integer, got {trial_count!r}")
    if trial_count < 1:
        raise InvalidInputError(f"trial_count must be >= 1, got {trial_count}")
    return int(trial_count)


def _validate_confidence(confidence_level: float) -> float:
    if not 0.0 < confidence_level < 1.0:
        raise InvalidInputError(
            f"confidence_level must be in (0, 1), got {confidence_level}"
        )
    return float(confidence_level)


def _chunk_sizes(trial_count: int, chunks: int) -> List[int]:
    """Split trial_count into `chunks` near-equal positive sizes."""
    chunks = max(1, min(chunks, trial_count))
    base, extra = divmod(trial_count, chunks)
    return [base + (1 if i < extra else 0) for i in range(chunks)]


@dataclass(frozen=True)
class _ChunkTask:
    """One batch of trials and the stream that drives it."""

    stream_id: int
    size: int
    capital: float
    pools: Sequence[Pool]
    conditions: MarketConditions
    allocation: AllocationVector
    config: AllocatorConfig
    rng_factory: RandomSourceFactory
    regime_variability: bool


def _redraw_conditions(base: MarketConditions, rng: RandomSource) -> MarketConditions:
    """Draw a fresh market regime for one trial."""
    low, high = REGIME_VOLATILITY_RANGE
    s_low, s_high = REGIME_SENTIMENT_BOUNDS
    u_vol, u_sent = (float(u) for u in rng.uniform(2))

    volatility = low + u_vol * (high - low)
    sentiment = base.sentiment + (u_sent - 0.5) * 2 * REGIME_SENTIMENT_DRIFT
    return MarketConditions(
        volatility=volatility,
        sentiment=max(s_low, min(s_high, sentiment)),
    )


def _run_chunk(task: _ChunkTask) -> np.ndarray:
    """Run one batch of trials on its own random stream."""
    rng = task.rng_factory(task.stream_id)

    if not task.regime_variability:
        return simulate_trials(
            task.allocation,
            task.pools,
            rng,
            task.conditions.volatility,
            task.size,
        )

    yields = np.empty(task.size, dtype=float)
    for i in range(task.size):
        conditions = _redraw_conditions(task.conditions, rng)
        allocation = allocate(task.capital, task.pools, conditions, task.config)
        yields[i] = simulate_one_trial(allocation, task.pools, rng, conditions.volatility)
    return yields


def simulate_yields(
    capital: float,
    pools: Sequence[Pool],
    conditions: MarketConditions,
    trial_count: int,
    rng_factory: RandomSourceFactory,
    config: Optional[AllocatorConfig] = None,
    regime_variability: bool = False,
    workers: int = 1,
    allocation: Optional[AllocationVector] = None,
) -> np.ndarray:
    """
    Run trials and return the raw per-trial yields.

    Trials are split into one chunk per worker; chunk i draws from
    `rng_factory(i)`. Chunks run in a process pool when workers > 1, in
    which case `rng_factory` must be picklable. Yields are returned in
    chunk order, so results depend only on the factory and worker count.

    Args:
        capital: Total capital
        pools: Pools to allocate across
        conditions: Market conditions (held fixed unless regime_variability)
        trial_count: Number of trials (>= 1)
        rng_factory: stream_id -> RandomSource
        config: Allocator parameters
        regime_variability: Redraw conditions and re-allocate every trial
        workers: Number of chunks / worker processes
        allocation: Precomputed allocation for the fixed-conditions case

    Returns:
        1-D array of trial yields
    """
    trial_count = validate_trial_count(trial_count)
    if workers < 1:
        raise InvalidInputError(f"workers must be >= 1, got {workers}")

    config = config or AllocatorConfig()
    conditions = conditions.clamped()
    if allocation is None:
        allocation = allocate(capital, pools, conditions, config)

    tasks = [
        _ChunkTask(
            stream_id=i,
            size=size,
            capital=float(capital),
            pools=tuple(pools),
            conditions=conditions,
            allocation=allocation,
            config=config,
            rng_factory=rng_factory,
            regime_variability=regime_variability,
        )
        for i, size in enumerate(_chunk_sizes(trial_count, workers))
    ]

    if len(tasks) == 1:
        chunks = [_run_chunk(tasks[0])]
    else:
        logger.debug(f"Running {trial_count} trials in {len(tasks)} worker chunks")
        with ProcessPoolExecutor(max_workers=len(tasks)) as executor:
            chunks = list(executor.map(_run_chunk, tasks))

    return np.concatenate(chunks)


def summarize(
    yields: Sequence[float],
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
) -> SimulationSummary:
    """
    Aggregate trial yields into a SimulationSummary.

    Raises:
        InvalidInputError: if yields is empty or contains non-finite values
    """
    confidence_level = _validate_confidence(confidence_level)
    values = np.asarray(yields, dtype=float)

    if values.size == 0:
        raise InvalidInputError("cannot summarize an empty set of trials")
    if not np.all(np.isfinite(values)):
        raise InvalidInputError("trial yields contain non-finite values")

    min_yield = float(values.min())
    max_yield = float(values.max())
    # Mean of identical values can drift by an ulp past the extremes
    mean_yield = min(max(float(values.mean()), min_yield), max_yield)

    # Identical trials can still give an ulp-sized std
    std_dev = 0.0 if max_yield == min_yield else float(values.std())

    if std_dev > 0:
        sharpe_ratio = mean_yield / std_dev
        sharpe_defined = True
    else:
        sharpe_ratio = 0.0
        sharpe_defined = False

    tail = (1.0 - confidence_level) / 2
    lower, upper = np.quantile(values, [tail, 1.0 - tail])
    percentiles = np.percentile(values, REPORTED_PERCENTILES)

    return SimulationSummary(
        mean_yield=mean_yield,
        std_dev=std_dev,
        min_yield=min_yield,
        max_yield=max_yield,
        sharpe_ratio=sharpe_ratio,
        sharpe_defined=sharpe_defined,
        success_rate=float(np.count_nonzero(values > 0) / values.size),
        trial_count=int(values.size),
        percentiles={p: float(v) for p, v in zip(REPORTED_PERCENTILES, percentiles)},
        confidence_level=confidence_level,
        confidence_lower=float(lower),
        confidence_upper=float(upper),
    )


def run_simulation(
    capital: float,
    pools: Sequence[Pool],
    conditions: MarketConditions,
    trial_count: int,
    rng_factory: RandomSourceFactory,
    config: Optional[AllocatorConfig] = None,
    regime_variability: bool = False,
    workers: int = 1,
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
) -> SimulationSummary:
    """
    Run a Monte Carlo yield simulation.

    The allocation is computed once from `conditions` and every trial
    samples a blended return for it. With `regime_variability=True` each
    trial instead redraws volatility/sentiment and re-allocates.

    Raises:
        InvalidInputError: for trial_count < 1 or invalid capital/pools
    """
    trial_count = validate_trial_count(trial_count)
    _validate_confidence(confidence_level)

    if trial_count > MAX_RECOMMENDED_TRIALS:
        logger.warning(
            f"trial_count {trial_count} exceeds recommended maximum {MAX_RECOMMENDED_TRIALS}"
        )

    yields = simulate_yields(
        capital=capital,
        pools=pools,
        conditions=conditions,
        trial_count=trial_count,
        rng_factory=rng_factory,
        config=config,
        regime_variability=regime_variability,
        workers=workers,
    )
    return summarize(yields, confidence_level)


class MonteCarloForecaster:
    """
    Forecast service combining the allocator and the Monte Carlo driver.

    Holds only run parameters; every call is independent. A fixed `seed`
    makes forecasts reproducible, otherwise each call draws fresh entropy
    and records it on the result.
    """

    def __init__(
        self,
        config: Optional[AllocatorConfig] = None,
        trial_count: int = DEFAULT_TRIAL_COUNT,
        seed: Optional[int] = None,
        noise_model: NoiseModel = NoiseModel.NORMAL,
        workers: int = 1,
        confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
        regime_variability: bool = False,
    ):
        self.config = config or AllocatorConfig()
        self.trial_count = validate_trial_count(trial_count)
        self.seed = seed
        self.noise_model = NoiseModel(noise_model)
        self.workers = workers
        self.confidence_level = _validate_confidence(confidence_level)
        self.regime_variability = regime_variability

    @classmethod
    def from_settings(cls, settings) -> "MonteCarloForecaster":
        """Create a forecaster from application settings."""
        return cls(
            config=AllocatorConfig.from_settings(settings),
            trial_count=settings.default_trial_count,
            seed=settings.random_seed,
            noise_model=NoiseModel(settings.noise_model),
            workers=settings.worker_count,
            confidence_level=settings.confidence_level,
        )

    def forecast(
        self,
        capital: float,
        pools: Sequence[Pool],
        conditions: MarketConditions,
        label: str = "forecast",
        config: Optional[AllocatorConfig] = None,
    ) -> ForecastResult:
        """
        Allocate capital and simulate its yield distribution.

        Args:
            capital: Total capital
            pools: Pools to allocate across
            conditions: Market conditions
            label: Name recorded on the result
            config: Override this forecaster's allocator parameters

        Returns:
            ForecastResult with allocation, summary and raw yields
        """
        config = config or self.config
        factory = SeededRandomSourceFactory(self.seed, self.noise_model)

        logger.info(
            f"Starting forecast: {label}, capital={capital}, {self.trial_count} trials, "
            f"vol={conditions.volatility:.2f}"
        )

        allocation = allocate(capital, pools, conditions, config)
        yields = simulate_yields(
            capital=capital,
            pools=pools,
            conditions=conditions,
            trial_count=self.trial_count,
            rng_factory=factory,
            config=config,
            regime_variability=self.regime_variability,
            workers=self.workers,
            allocation=allocation,
        )
        summary = summarize(yields, self.confidence_level)

        logger.info(
            f"Forecast complete: {label}, mean={summary.mean_yield * 100:.2f}% "
            f"(±{summary.std_dev * 100:.2f}%), success={summary.success_rate * 100:.1f}%"
        )

        return ForecastResult(
            label=label,
            capital=float(capital),
            pools=list(pools),
            conditions=conditions,
            allocation=allocation,
            summary=summary,
            yields=yields.tolist(),
            parameters={
                **config.to_dict(),
                "trial_count": self.trial_count,
                "noise_model": self.noise_model.value,
                "workers": self.workers,
                "regime_variability": self.regime_variability,
            },
            seed=factory.seed,
        )

    def forecast_from_provider(
        self,
        capital: float,
        pools: Sequence[Pool],
        provider,
        label: str = "forecast",
    ) -> ForecastResult:
        """Forecast using conditions read from a ConditionsProvider."""
        return self.forecast(capital, pools, provider.get_conditions(), label=label)

    def compare_presets(
        self,
        capital: float,
        pools: Sequence[Pool],
        conditions: MarketConditions,
        presets: Optional[Sequence[str]] = None,
    ) -> List[ForecastResult]:
        """
        Run the same forecast under several governance presets.

        Args:
            capital: Total capital
            pools: Pools to allocate across
            conditions: Market conditions
            presets: Preset names (default: all)

        Returns:
            One ForecastResult per preset, labelled with the preset name
        """
        from yieldcast.core.constants import ALLOCATION_PRESETS

        names = list(presets) if presets is not None else list(ALLOCATION_PRESETS)
        results = []

        for name in names:
            config = AllocatorConfig.preset(name)
            results.append(self.forecast(capital, pools, conditions, label=name, config=config))

        return results

    def format_comparison(self, results: Sequence[ForecastResult]) -> str:
        """
        Format comparison of forecast results.

        Args:
            results: List of forecast results

        Returns:
            Formatted comparison string
        """
        lines = []
        lines.append("=" * 80)
        lines.append("FORECAST COMPARISON")
        lines.append("=" * 80)
        lines.append("")

        header = f"{'Forecast':<24} {'Mean':>9} {'StdDev':>9} {'Sharpe':>8} {'Success':>9} {'Lower':>9} {'Upper':>9}"
        lines.append(header)
        lines.append("-" * 80)

        for r in results:
            s = r.summary
            sharpe = f"{s.sharpe_ratio:>8.2f}" if s.sharpe_defined else f"{'n/a':>8}"
            line = (
                f"{r.label:<24} "
                f"{s.mean_yield * 100:>8.2f}% "
                f"{s.std_dev * 100:>8.2f}% "
                f"{sharpe} "
                f"{s.success_rate * 100:>8.1f}% "
                f"{s.confidence_lower * 100:>8.2f}% "
                f"{s.confidence_upper * 100:>8.2f}%"
            )
            lines.append(line)

        lines.append("=" * 80)
        return "\n".join(lines)
