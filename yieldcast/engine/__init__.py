"""Allocation and simulation engine components."""

from .allocator import AllocatorConfig, allocate
from .random_source import (
    NoiseModel,
    RandomSource,
    NumpyRandomSource,
    SeededRandomSourceFactory,
)
from .trial import simulate_one_trial, simulate_trials
from .simulator import (
    MonteCarloForecaster,
    run_simulation,
    simulate_yields,
    summarize,
)
from .monitor import ForecastMonitor

__all__ = [
    "AllocatorConfig",
    "allocate",
    "NoiseModel",
    "RandomSource",
    "NumpyRandomSource",
    "SeededRandomSourceFactory",
    "simulate_one_trial",
    "simulate_trials",
    "MonteCarloForecaster",
    "run_simulation",
    "simulate_yields",
    "summarize",
    "ForecastMonitor",
]
