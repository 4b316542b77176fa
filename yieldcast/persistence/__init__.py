"""Forecast snapshot persistence."""

from .storage import ForecastStorage

__all__ = ["ForecastStorage"]
