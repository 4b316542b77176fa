"""Market conditions supplied by the caller."""

import math
from dataclasses import dataclass

from ..exceptions import InvalidInputError


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    if math.isnan(value):
        return low
    return max(low, min(high, value))


@dataclass(frozen=True)
class MarketConditions:
    """
    Volatility and sentiment scores, both expected in [0, 1].

    Never mutated by the engine; use `clamped()` to obtain an in-range copy.
    """

    volatility: float
    sentiment: float = 0.5

    def clamped(self) -> "MarketConditions":
        """Return a copy with both fields clamped to [0, 1]."""
        return MarketConditions(
            volatility=_clamp(float(self.volatility)),
            sentiment=_clamp(float(self.sentiment)),
        )

    def validate_strict(self) -> None:
        """Raise InvalidInputError if either field is outside [0, 1]."""
        for name in ("volatility", "sentiment"):
            value = getattr(self, name)
            if not math.isfinite(value) or not 0.0 <= value <= 1.0:
                raise InvalidInputError(f"{name} must be in [0, 1], got {value}")

    def is_high_volatility(self, threshold: float) -> bool:
        return self.volatility > threshold

    def to_dict(self) -> dict:
        return {"volatility": self.volatility, "sentiment": self.sentiment}

    @classmethod
    def from_dict(cls, data: dict) -> "MarketConditions":
        return cls(
            volatility=float(data["volatility"]),
            sentiment=float(data.get("sentiment", 0.5)),
        )
