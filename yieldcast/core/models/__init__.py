"""Core data models for yield forecasting."""

from .pool import Pool
from .conditions import MarketConditions
from .allocation import AllocationVector, AllocationRegime
from .summary import SimulationSummary
from .forecast import ForecastResult

__all__ = [
    "Pool",
    "MarketConditions",
    "AllocationVector",
    "AllocationRegime",
    "SimulationSummary",
    "ForecastResult",
]
