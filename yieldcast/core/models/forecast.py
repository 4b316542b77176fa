"""Forecast result model."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any

from .pool import Pool
from .conditions import MarketConditions
from .allocation import AllocationVector
from .summary import SimulationSummary


def _utcnow() -> datetime:
    """Get current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


@dataclass
class ForecastResult:
    """
    Complete result of a forecast.

    Bundles the inputs (pools, conditions, allocator parameters) with the
    allocation and the Monte Carlo summary so a snapshot can be stored and
    rendered later.
    """

    label: str
    capital: float
    pools: List[Pool]
    conditions: MarketConditions
    allocation: AllocationVector
    summary: SimulationSummary

    # Raw trial yields (may be dropped when serializing)
    yields: List[float] = field(default_factory=list)

    # Metadata
    parameters: Dict[str, Any] = field(default_factory=dict)
    seed: Optional[int] = None
    created_at: datetime = field(default_factory=_utcnow)

    @property
    def expected_annual_yield(self) -> float:
        """Mean yield applied to the allocated capital."""
        return self.summary.mean_yield * self.capital

    def to_dict(self, include_yields: bool = False) -> dict:
        """Serialize for storage."""
        data = {
            "label": self.label,
            "capital": self.capital,
            "pools": [p.to_dict() for p in self.pools],
            "conditions": self.conditions.to_dict(),
            "allocation": self.allocation.to_dict(),
            "summary": self.summary.to_dict(),
            "parameters": self.parameters,
            "seed": self.seed,
            "created_at": self.created_at.isoformat(),
        }
        if include_yields:
            data["yields"] = list(self.yields)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ForecastResult":
        return cls(
            label=data["label"],
            capital=float(data["capital"]),
            pools=[Pool.from_dict(p) for p in data["pools"]],
            conditions=MarketConditions.from_dict(data["conditions"]),
            allocation=AllocationVector.from_dict(data["allocation"]),
            summary=SimulationSummary.from_dict(data["summary"]),
            yields=[float(y) for y in data.get("yields", [])],
            parameters=data.get("parameters", {}),
            seed=data.get("seed"),
            created_at=datetime.fromisoformat(data["created_at"]),
        )
