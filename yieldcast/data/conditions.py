"""Market-condition providers.

The engine treats volatility and sentiment as opaque inputs. Anything that
decides them (price feeds, sentiment scores, governance votes) plugs in as a
ConditionsProvider and is injected by the caller.
"""

import logging
from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from yieldcast.core.constants import DEFAULT_VOLATILITY
from yieldcast.core.models import MarketConditions

logger = logging.getLogger(__name__)


def realized_volatility(
    prices: Sequence[float],
    default: float = DEFAULT_VOLATILITY,
) -> float:
    """
    Population standard deviation of simple returns of a price series.

    Returns whose previous price is zero or negative are skipped. Falls
    back to `default` when no return can be computed.
    """
    values = np.asarray(list(prices), dtype=float)
    if values.size < 2:
        return default

    previous = values[:-1]
    valid = previous > 0
    if not np.any(valid):
        return default

    returns = (values[1:][valid] - previous[valid]) / previous[valid]
    return float(np.std(returns))


class ConditionsProvider(ABC):
    """Port supplying the market inputs the allocator and simulator need."""

    @abstractmethod
    def get_volatility(self) -> float:
        """Current volatility score in [0, 1]."""
        pass

    @abstractmethod
    def get_sentiment(self) -> float:
        """Current sentiment score in [0, 1]."""
        pass

    def get_conditions(self) -> MarketConditions:
        """Read both inputs and clamp them into MarketConditions."""
        return MarketConditions(
            volatility=self.get_volatility(),
            sentiment=self.get_sentiment(),
        ).clamped()


class StaticConditionsProvider(ConditionsProvider):
    """Provider returning fixed, caller-set values."""

    def __init__(self, volatility: float, sentiment: float = 0.5):
        self.volatility = volatility
        self.sentiment = sentiment

    def get_volatility(self) -> float:
        return self.volatility

    def get_sentiment(self) -> float:
        return self.sentiment


class PriceSeriesConditionsProvider(ConditionsProvider):
    """
    Provider deriving volatility from a recent price series.

    Prices can be replaced between polls with `update_prices`; sentiment is
    supplied externally.
    """

    def __init__(
        self,
        prices: Sequence[float],
        sentiment: float = 0.5,
        default_volatility: float = DEFAULT_VOLATILITY,
    ):
        self.prices = list(prices)
        self.sentiment = sentiment
        self.default_volatility = default_volatility

    def update_prices(self, prices: Sequence[float]) -> None:
        self.prices = list(prices)

    def get_volatility(self) -> float:
        if len(self.prices) < 2:
            logger.warning(
                f"Not enough price data ({len(self.prices)} points), "
                f"using default volatility {self.default_volatility}"
            )
        return realized_volatility(self.prices, self.default_volatility)

    def get_sentiment(self) -> float:
        return self.sentiment
