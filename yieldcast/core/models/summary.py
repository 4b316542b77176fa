"""Monte Carlo summary statistics."""

from dataclasses import dataclass, field
from typing import Dict, Tuple

from scipy import stats


@dataclass(frozen=True)
class SimulationSummary:
    """
    Aggregate statistics over the per-trial yields of one Monte Carlo run.

    All yields are annualized fractions (0.35 = 35%). `std_dev` is the
    population standard deviation. When `std_dev` is zero the Sharpe ratio
    is reported as 0.0 and `sharpe_defined` is False.
    """

    mean_yield: float
    std_dev: float
    min_yield: float
    max_yield: float
    sharpe_ratio: float
    success_rate: float             # fraction of trials with yield > 0
    trial_count: int
    sharpe_defined: bool = True

    # Percentile bounds
    percentiles: Dict[int, float] = field(default_factory=dict)
    confidence_level: float = 0.95
    confidence_lower: float = 0.0
    confidence_upper: float = 0.0

    def normal_interval(self, confidence: float = None) -> Tuple[float, float]:
        """
        Normal-approximation interval mean ± z·σ.

        Args:
            confidence: Two-sided coverage (default: this summary's level)

        Returns:
            Tuple of (lower, upper)
        """
        confidence = self.confidence_level if confidence is None else confidence
        z = float(stats.norm.ppf(0.5 + confidence / 2))
        return self.mean_yield - z * self.std_dev, self.mean_yield + z * self.std_dev

    def meets_target(self, target_yield: float) -> bool:
        """Deployment readiness: mean yield at or above the target."""
        return self.mean_yield >= target_yield

    def to_dict(self) -> dict:
        return {
            "mean_yield": self.mean_yield,
            "std_dev": self.std_dev,
            "min_yield": self.min_yield,
            "max_yield": self.max_yield,
            "sharpe_ratio": self.sharpe_ratio,
            "sharpe_defined": self.sharpe_defined,
            "success_rate": self.success_rate,
            "trial_count": self.trial_count,
            "percentiles": {str(k): v for k, v in self.percentiles.items()},
            "confidence_level": self.confidence_level,
            "confidence_lower": self.confidence_lower,
            "confidence_upper": self.confidence_upper,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SimulationSummary":
        return cls(
            mean_yield=float(data["mean_yield"]),
            std_dev=float(data["std_dev"]),
            min_yield=float(data["min_yield"]),
            max_yield=float(data["max_yield"]),
            sharpe_ratio=float(data["sharpe_ratio"]),
            sharpe_defined=bool(data.get("sharpe_defined", True)),
            success_rate=float(data["success_rate"]),
            trial_count=int(data["trial_count"]),
            percentiles={int(k): float(v) for k, v in data.get("percentiles", {}).items()},
            confidence_level=float(data.get("confidence_level", 0.95)),
            confidence_lower=float(data.get("confidence_lower", 0.0)),
            confidence_upper=float(data.get("confidence_upper", 0.0)),
        )
