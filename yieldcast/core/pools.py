"""Static pool registry and pool-list validation."""

import math
from typing import List, Sequence

from .exceptions import InvalidInputError
from .models import Pool

# Representative XRPL AMM pools
DEFAULT_POOLS = (
    Pool(name="RLUSD/XRP", base_apy=0.35, is_stable=True, liquidity=2_500_000.0),
    Pool(name="Solar/XRP", base_apy=0.30, is_eco=True, liquidity=400_000.0),
    Pool(name="XRP/USD", base_apy=0.45, liquidity=1_800_000.0),
    Pool(name="Eco-RWA/XRP", base_apy=0.35, is_eco=True, liquidity=650_000.0),
    Pool(name="XRP/BTC", base_apy=0.50, liquidity=900_000.0),
)


def default_pools() -> List[Pool]:
    """Get a fresh list of the default pools."""
    return list(DEFAULT_POOLS)


def validate_pools(pools: Sequence[Pool]) -> None:
    """
    Check a pool list before allocation or simulation.

    Raises:
        InvalidInputError: empty list, duplicate names, or a pool with a
            negative/non-finite APY or negative liquidity
    """
    if not pools:
        raise InvalidInputError("pools must be a non-empty list")

    seen = set()
    for pool in pools:
        if pool.name in seen:
            raise InvalidInputError(f"duplicate pool name: {pool.name}")
        seen.add(pool.name)

        if not math.isfinite(pool.base_apy) or pool.base_apy < 0:
            raise InvalidInputError(
                f"pool {pool.name} has invalid base APY: {pool.base_apy}"
            )
        if not math.isfinite(pool.liquidity) or pool.liquidity < 0:
            raise InvalidInputError(
                f"pool {pool.name} has invalid liquidity: {pool.liquidity}"
            )
