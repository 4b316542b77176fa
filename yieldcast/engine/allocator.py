"""Volatility-conditioned capital allocator."""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from yieldcast.core.constants import (
    ALLOCATION_PRESETS,
    DEFAULT_ECO_BOOST,
    DEFAULT_HIGH_VOL_THRESHOLD,
    DEFAULT_STABLE_SHIFT,
)
from yieldcast.core.exceptions import InvalidInputError
from yieldcast.core.models import (
    AllocationRegime,
    AllocationVector,
    MarketConditions,
    Pool,
)
from yieldcast.core.pools import validate_pools

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AllocatorConfig:
    """
    Tunable allocator parameters.

    These are the only multipliers the allocator applies:
    - high_vol_threshold: volatility strictly above this triggers the stable shift
    - stable_shift: fraction of capital routed to stable pools in that regime
    - eco_boost: multiplier on the weight of eco-flagged pools
    """

    high_vol_threshold: float = DEFAULT_HIGH_VOL_THRESHOLD
    stable_shift: float = DEFAULT_STABLE_SHIFT
    eco_boost: float = DEFAULT_ECO_BOOST

    def __post_init__(self):
        if not 0.0 <= self.high_vol_threshold <= 1.0:
            raise InvalidInputError(
                f"high_vol_threshold must be in [0, 1], got {self.high_vol_threshold}"
            )
        if not 0.0 <= self.stable_shift <= 1.0:
            raise InvalidInputError(
                f"stable_shift must be in [0, 1], got {self.stable_shift}"
            )
        if not math.isfinite(self.eco_boost) or self.eco_boost <= 0:
            raise InvalidInputError(f"eco_boost must be positive, got {self.eco_boost}")

    @classmethod
    def preset(cls, name: str) -> "AllocatorConfig":
        """Build a config from a named governance preset."""
        try:
            params = ALLOCATION_PRESETS[name]
        except KeyError:
            raise InvalidInputError(
                f"Unknown preset: {name} (expected one of {', '.join(ALLOCATION_PRESETS)})"
            ) from None
        return cls(**params)

    @classmethod
    def from_settings(cls, settings) -> "AllocatorConfig":
        return cls(
            high_vol_threshold=settings.high_vol_threshold,
            stable_shift=settings.stable_shift_fraction,
            eco_boost=settings.eco_boost_multiplier,
        )

    def to_dict(self) -> dict:
        return {
            "high_vol_threshold": self.high_vol_threshold,
            "stable_shift": self.stable_shift,
            "eco_boost": self.eco_boost,
        }


def validate_capital(capital: float) -> float:
    """Return capital as float or raise InvalidInputError."""
    try:
        value = float(capital)
    except (TypeError, ValueError):
        raise InvalidInputError(f"capital must be a number, got {capital!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise InvalidInputError(f"capital must be finite and positive, got {capital}")
    return value


def pool_weight(pool: Pool, config: AllocatorConfig) -> float:
    """Allocation weight of a pool: base APY, eco-boosted when flagged."""
    weight = pool.base_apy
    if pool.is_eco:
        weight *= config.eco_boost
    return weight


def _split(amount: float, weights: Sequence[float]) -> List[float]:
    """Split amount proportionally to weights, evenly if they sum to zero."""
    total = sum(weights)
    if total <= 0:
        return [amount / len(weights)] * len(weights)
    return [amount * (w / total) for w in weights]


def allocate(
    capital: float,
    pools: Sequence[Pool],
    conditions: MarketConditions,
    config: Optional[AllocatorConfig] = None,
    strict: bool = False,
) -> AllocationVector:
    """
    Split capital across pools given market conditions.

    Normal volatility: capital is split proportionally to pool weights.
    High volatility (above the threshold): `stable_shift` of capital goes to
    stable pools and the remainder to non-stable pools, each group split by
    weight. With no stable pool available the split is even.

    Sentiment is clamped and accepted but does not affect weights.

    Args:
        capital: Total capital, finite and > 0
        pools: Non-empty list of pools with unique names
        conditions: Market volatility and sentiment
        config: Allocator parameters (defaults if None)
        strict: Reject out-of-range conditions instead of clamping

    Returns:
        AllocationVector in pool order summing to capital

    Raises:
        InvalidInputError: on invalid capital, pools or (strict) conditions
    """
    config = config or AllocatorConfig()
    capital = validate_capital(capital)
    validate_pools(pools)

    if strict:
        conditions.validate_strict()
    conditions = conditions.clamped()

    weights = [pool_weight(p, config) for p in pools]
    amounts = [0.0] * len(pools)

    if not conditions.is_high_volatility(config.high_vol_threshold):
        regime = AllocationRegime.NORMAL
        amounts = _split(capital, weights)
    else:
        stable_idx = [i for i, p in enumerate(pools) if p.is_stable]
        other_idx = [i for i, p in enumerate(pools) if not p.is_stable]

        if not stable_idx:
            regime = AllocationRegime.EVEN_FALLBACK
            amounts = [capital / len(pools)] * len(pools)
        else:
            regime = AllocationRegime.HIGH_VOLATILITY
            stable_amount = capital * config.stable_shift if other_idx else capital
            groups = [(stable_idx, stable_amount), (other_idx, capital - stable_amount)]
            for indices, group_amount in groups:
                if not indices:
                    continue
                split = _split(group_amount, [weights[i] for i in indices])
                for i, value in zip(indices, split):
                    amounts[i] = value

    # Fold rounding residual into the largest entry
    residual = capital - sum(amounts)
    if residual != 0.0:
        largest = max(range(len(amounts)), key=lambda i: amounts[i])
        amounts[largest] = max(0.0, amounts[largest] + residual)

    logger.debug(
        f"Allocated {capital:.2f} across {len(pools)} pools "
        f"(regime={regime.value}, vol={conditions.volatility:.2f})"
    )

    return AllocationVector(
        pool_names=tuple(p.name for p in pools),
        amounts=tuple(amounts),
        capital=capital,
        regime=regime,
    )
