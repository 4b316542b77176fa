"""Terminal rendering for forecasts."""

from .report import (
    render_summary,
    render_allocation,
    render_histogram,
    render_distribution,
    render_forecast,
    yield_histogram,
)

__all__ = [
    "render_summary",
    "render_allocation",
    "render_histogram",
    "render_distribution",
    "render_forecast",
    "yield_histogram",
]
