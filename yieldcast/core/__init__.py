"""Core module - models, constants and the pool registry."""

from .exceptions import InvalidInputError
from .models import (
    Pool,
    MarketConditions,
    AllocationVector,
    AllocationRegime,
    SimulationSummary,
    ForecastResult,
)
from .constants import (
    DEFAULT_HIGH_VOL_THRESHOLD,
    DEFAULT_STABLE_SHIFT,
    DEFAULT_ECO_BOOST,
    DEFAULT_TRIAL_COUNT,
    ALLOCATION_PRESETS,
)
from .pools import default_pools, validate_pools

__all__ = [
    "InvalidInputError",
    "Pool",
    "MarketConditions",
    "AllocationVector",
    "AllocationRegime",
    "SimulationSummary",
    "ForecastResult",
    "DEFAULT_HIGH_VOL_THRESHOLD",
    "DEFAULT_STABLE_SHIFT",
    "DEFAULT_ECO_BOOST",
    "DEFAULT_TRIAL_COUNT",
    "ALLOCATION_PRESETS",
    "default_pools",
    "validate_pools",
]
