"""Single-trial yield model."""

import math
from typing import Sequence, Tuple

import numpy as np

from yieldcast.core.exceptions import InvalidInputError
from yieldcast.core.models import Pool

from .random_source import RandomSource


def capital_shares(
    allocation: Sequence[float],
    pools: Sequence[Pool],
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Validate an allocation against its pools.

    Returns:
        Tuple of (capital share per pool, base APY per pool)

    Raises:
        InvalidInputError: on mismatched lengths, negative or non-finite
            amounts, or an allocation that sums to zero
    """
    amounts = [float(a) for a in allocation]

    if not pools:
        raise InvalidInputError("pools must be a non-empty list")
    if len(amounts) != len(pools):
        raise InvalidInputError(
            f"allocation has {len(amounts)} entries for {len(pools)} pools"
        )
    if any(not math.isfinite(a) or a < 0 for a in amounts):
        raise InvalidInputError("allocation entries must be finite and non-negative")

    total = sum(amounts)
    if total <= 0:
        raise InvalidInputError("allocation must sum to a positive amount")

    apys = np.array([p.base_apy for p in pools], dtype=float)
    if not np.all(np.isfinite(apys)):
        raise InvalidInputError("pool base APYs must be finite")

    return np.array(amounts, dtype=float) / total, apys


def _check_volatility(volatility: float) -> float:
    volatility = float(volatility)
    if not math.isfinite(volatility) or volatility < 0:
        raise InvalidInputError(f"volatility must be finite and >= 0, got {volatility}")
    return volatility


def simulate_one_trial(
    allocation: Sequence[float],
    pools: Sequence[Pool],
    rng: RandomSource,
    volatility: float,
) -> float:
    """
    Sample one blended annual return for an allocation.

    Each pool return is base_apy * (1 + volatility * noise), with one noise
    draw per pool from `rng`. Pool returns are weighted by capital share.

    Args:
        allocation: Capital per pool, same order as pools
        pools: Pools being allocated to
        rng: Injected random source
        volatility: Noise scale

    Returns:
        Annualized return as a fraction (may be negative)
    """
    shares, apys = capital_shares(allocation, pools)
    volatility = _check_volatility(volatility)

    perturbation = volatility * np.asarray(rng.noise(len(pools)), dtype=float)
    pool_returns = apys * (1.0 + perturbation)

    return float(np.dot(shares, pool_returns))


def simulate_trials(
    allocation: Sequence[float],
    pools: Sequence[Pool],
    rng: RandomSource,
    volatility: float,
    count: int,
) -> np.ndarray:
    """Vectorized form of simulate_one_trial over `count` trials."""
    shares, apys = capital_shares(allocation, pools)
    volatility = _check_volatility(volatility)

    if count < 1:
        raise InvalidInputError(f"count must be >= 1, got {count}")

    noise = np.asarray(rng.noise((count, len(pools))), dtype=float)
    pool_returns = apys * (1.0 + volatility * noise)

    return (pool_returns * shares).sum(axis=1)
