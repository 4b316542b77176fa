"""Yield forecasting and allocation for XRPL liquidity pools."""

from .core import (
    Pool,
    MarketConditions,
    AllocationVector,
    SimulationSummary,
    ForecastResult,
    InvalidInputError,
)
from .engine import (
    AllocatorConfig,
    allocate,
    simulate_one_trial,
    run_simulation,
    MonteCarloForecaster,
)

__all__ = [
    "Pool",
    "MarketConditions",
    "AllocationVector",
    "SimulationSummary",
    "ForecastResult",
    "InvalidInputError",
    "AllocatorConfig",
    "allocate",
    "simulate_one_trial",
    "run_simulation",
    "MonteCarloForecaster",
]
