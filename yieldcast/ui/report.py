"""Rich/ASCII rendering of forecast results."""

import math
from typing import Dict, List, Optional, Sequence

import asciichartpy as acp
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from yieldcast.core.models import AllocationVector, ForecastResult, Pool, SimulationSummary


def yield_histogram(yields: Sequence[float], bin_size: float = 0.02) -> Dict[float, int]:
    """
    Bucket yields into fixed-width bins.

    Args:
        yields: Trial yields (fractions)
        bin_size: Bin width (0.02 = 2 percentage points)

    Returns:
        Ordered mapping of bin start -> count, including empty bins
    """
    if bin_size <= 0:
        raise ValueError(f"bin_size must be positive, got {bin_size}")
    if not yields:
        return {}

    indices = [math.floor(y / bin_size) for y in yields]
    counts: Dict[int, int] = {i: 0 for i in range(min(indices), max(indices) + 1)}
    for i in indices:
        counts[i] += 1

    return {round(i * bin_size, 10): count for i, count in counts.items()}


def render_summary(summary: SimulationSummary, target_yield: Optional[float] = None) -> Panel:
    """Summary statistics panel."""
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Metric", style="dim")
    table.add_column("Value", justify="right")

    table.add_row("Trials", f"{summary.trial_count:,}")
    table.add_row("Mean Yield", Text(f"{summary.mean_yield * 100:.2f}%", style="bold green"))
    table.add_row("Std Dev", f"±{summary.std_dev * 100:.2f}%")
    table.add_row("Min / Max", f"{summary.min_yield * 100:.2f}% / {summary.max_yield * 100:.2f}%")

    if summary.sharpe_defined:
        table.add_row("Sharpe Ratio", f"{summary.sharpe_ratio:.2f}")
    else:
        table.add_row("Sharpe Ratio", Text("n/a (zero spread)", style="yellow"))

    table.add_row("Success Rate", f"{summary.success_rate * 100:.1f}%")
    table.add_row(
        f"{summary.confidence_level * 100:.0f}% Interval",
        f"{summary.confidence_lower * 100:.2f}% to {summary.confidence_upper * 100:.2f}%",
    )

    for pct, value in summary.percentiles.items():
        table.add_row(f"P{pct}", f"{value * 100:.2f}%")

    if target_yield is not None:
        if summary.meets_target(target_yield):
            verdict = Text(f"DEPLOY READY (≥ {target_yield * 100:.0f}%)", style="bold green")
        else:
            verdict = Text(f"NOT READY (< {target_yield * 100:.0f}%)", style="bold red")
        table.add_row("Recommendation", verdict)

    return Panel(table, title="Yield Forecast", border_style="#ff8c00")


def render_allocation(allocation: AllocationVector, pools: Sequence[Pool]) -> Table:
    """Allocation table with pool flags and shares."""
    table = Table(title=f"Allocation ({allocation.regime.value})")
    table.add_column("Pool", style="bold")
    table.add_column("Base APY", justify="right")
    table.add_column("Flags")
    table.add_column("Amount", justify="right")
    table.add_column("Share", justify="right")

    for pool, amount, weight in zip(pools, allocation.amounts, allocation.weights):
        flags = []
        if pool.is_stable:
            flags.append("stable")
        if pool.is_eco:
            flags.append("eco")
        table.add_row(
            pool.name,
            pool.display_apy,
            ", ".join(flags) or "-",
            f"{amount:,.2f}",
            f"{weight * 100:.1f}%",
        )

    return table


def render_histogram(yields: Sequence[float], bin_size: float = 0.02, width: int = 40) -> Text:
    """Horizontal bar histogram of trial yields."""
    histogram = yield_histogram(yields, bin_size)
    if not histogram:
        return Text("No data", style="dim")

    peak = max(histogram.values()) or 1
    output = Text()

    for start, count in histogram.items():
        bar = "█" * int(round(count / peak * width))
        output.append(f"{start * 100:7.1f}% ", style="dim")
        output.append(bar, style="cyan")
        output.append(f" {count}\n", style="dim")

    return output


def render_distribution(yields: Sequence[float], height: int = 10, max_points: int = 80) -> Text:
    """ASCII chart of sorted trial yields (inverse CDF) using asciichartpy."""
    if not yields:
        return Text("No data available", style="dim")

    y_data: List[float] = sorted(y * 100 for y in yields)

    if len(y_data) > max_points:
        step = len(y_data) / max_points
        y_data = [y_data[int(i * step)] for i in range(max_points)]

    config = {
        "height": height,
        "colors": [acp.green],
        "format": "{:8.2f}",
    }

    output = Text()
    output.append("  Sorted trial yields (%)\n", style="bold #ff8c00")
    output.append_text(Text.from_ansi(acp.plot(y_data, config)))
    return output


def render_forecast(result: ForecastResult, target_yield: Optional[float] = None) -> Group:
    """Full report for one forecast."""
    parts = [
        render_allocation(result.allocation, result.pools),
        render_summary(result.summary, target_yield),
    ]
    if result.yields:
        parts.append(render_histogram(result.yields))
        parts.append(render_distribution(result.yields))
    return Group(*parts)
