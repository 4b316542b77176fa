"""Market-condition providers."""

from .conditions import (
    ConditionsProvider,
    StaticConditionsProvider,
    PriceSeriesConditionsProvider,
    realized_volatility,
)

__all__ = [
    "ConditionsProvider",
    "StaticConditionsProvider",
    "PriceSeriesConditionsProvider",
    "realized_volatility",
]
