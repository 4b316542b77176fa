"""Constants for allocation and Monte Carlo forecasting."""

# Allocator defaults
DEFAULT_HIGH_VOL_THRESHOLD = 0.5  # volatility above this triggers the stable shift
DEFAULT_STABLE_SHIFT = 0.8  # fraction of capital moved to stable pools
DEFAULT_ECO_BOOST = 1.24  # weight multiplier for eco-flagged pools

# Monte Carlo defaults
DEFAULT_TRIAL_COUNT = 1000
MAX_RECOMMENDED_TRIALS = 10_000
DEFAULT_CONFIDENCE_LEVEL = 0.95
REPORTED_PERCENTILES = (5, 25, 50, 75, 95)

# Allocation sum tolerance (relative)
ALLOCATION_TOLERANCE = 1e-9

# Market conditions
DEFAULT_VOLATILITY = 0.13  # used when no price history is available
REGIME_VOLATILITY_RANGE = (0.10, 0.96)
REGIME_SENTIMENT_DRIFT = 0.1
REGIME_SENTIMENT_BOUNDS = (0.1, 0.9)

# Governance outcomes mapped to allocator parameters
ALLOCATION_PRESETS = {
    "balanced": {
        "high_vol_threshold": 0.5,
        "stable_shift": 0.8,
        "eco_boost": 1.24,
    },
    "high_stable": {
        "high_vol_threshold": 0.4,  # trigger the stable shift earlier
        "stable_shift": 0.9,
        "eco_boost": 1.15,
    },
    "eco_focus": {
        "high_vol_threshold": 0.6,
        "stable_shift": 0.7,
        "eco_boost": 1.35,
    },
}
