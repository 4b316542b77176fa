"""Allocation vector model."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Tuple


class AllocationRegime(Enum):
    """Which allocator branch produced a vector."""

    NORMAL = "normal"                    # proportional to weights
    HIGH_VOLATILITY = "high_volatility"  # stable shift applied
    EVEN_FALLBACK = "even_fallback"      # high volatility, no stable pool


@dataclass(frozen=True)
class AllocationVector:
    """
    Capital assigned to each pool, in pool order.

    Sums to `capital` (within float rounding) and every entry is >= 0.
    Behaves like a read-only sequence of amounts.
    """

    pool_names: Tuple[str, ...]
    amounts: Tuple[float, ...]
    capital: float
    regime: AllocationRegime = AllocationRegime.NORMAL

    def __len__(self) -> int:
        return len(self.amounts)

    def __iter__(self) -> Iterator[float]:
        return iter(self.amounts)

    def __getitem__(self, index: int) -> float:
        return self.amounts[index]

    @property
    def total(self) -> float:
        return sum(self.amounts)

    @property
    def weights(self) -> List[float]:
        """Share of capital per pool (0-1)."""
        total = self.total
        if total <= 0:
            return [0.0 for _ in self.amounts]
        return [amount / total for amount in self.amounts]

    def amount_for(self, pool_name: str) -> float:
        """Amount allocated to a pool by name."""
        try:
            return self.amounts[self.pool_names.index(pool_name)]
        except ValueError:
            raise KeyError(pool_name) from None

    def as_dict(self) -> Dict[str, float]:
        return dict(zip(self.pool_names, self.amounts))

    def to_dict(self) -> dict:
        return {
            "pool_names": list(self.pool_names),
            "amounts": list(self.amounts),
            "capital": self.capital,
            "regime": self.regime.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AllocationVector":
        return cls(
            pool_names=tuple(data["pool_names"]),
            amounts=tuple(float(a) for a in data["amounts"]),
            capital=float(data["capital"]),
            regime=AllocationRegime(data.get("regime", "normal")),
        )
