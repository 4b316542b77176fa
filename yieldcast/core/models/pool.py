"""Liquidity pool model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Pool:
    """
    A named capital-allocation target.

    Immutable for the duration of a simulation run. `base_apy` is an
    annual rate expressed as a fraction (0.35 = 35%).
    """

    name: str
    base_apy: float
    is_stable: bool = False
    is_eco: bool = False
    liquidity: float = 0.0

    @property
    def display_apy(self) -> str:
        """Format base APY for display."""
        return f"{self.base_apy * 100:.2f}%"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "base_apy": self.base_apy,
            "is_stable": self.is_stable,
            "is_eco": self.is_eco,
            "liquidity": self.liquidity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Pool":
        return cls(
            name=data["name"],
            base_apy=float(data["base_apy"]),
            is_stable=bool(data.get("is_stable", False)),
            is_eco=bool(data.get("is_eco", False)),
            liquidity=float(data.get("liquidity", 0.0)),
        )
