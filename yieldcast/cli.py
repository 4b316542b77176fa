"""Command-line forecast runner."""

import argparse
import json
import logging
import sys
from typing import List, Optional

from rich.console import Console

from config.settings import get_settings
from yieldcast.core.constants import ALLOCATION_PRESETS
from yieldcast.core.exceptions import InvalidInputError
from yieldcast.core.models import MarketConditions
from yieldcast.core.pools import default_pools
from yieldcast.engine import AllocatorConfig, MonteCarloForecaster, NoiseModel
from yieldcast.persistence import ForecastStorage
from yieldcast.ui import render_forecast

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yieldcast",
        description="Monte Carlo yield forecast for XRPL pool allocations",
    )
    parser.add_argument("--capital", type=float, default=10_000.0, help="Capital to allocate")
    parser.add_argument("--trials", type=int, default=None, help="Number of Monte Carlo trials")
    parser.add_argument("--volatility", type=float, default=0.5, help="Market volatility (0-1)")
    parser.add_argument("--sentiment", type=float, default=0.5, help="Market sentiment (0-1)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")
    parser.add_argument("--workers", type=int, default=None, help="Worker processes")
    parser.add_argument("--preset", choices=sorted(ALLOCATION_PRESETS), default=None, help="Governance parameter preset")
    parser.add_argument("--noise", choices=[m.value for m in NoiseModel], default=None, help="Noise distribution")
    parser.add_argument("--regime-variability", action="store_true", help="Redraw market conditions every trial")
    parser.add_argument("--target", type=float, default=None, help="Mean yield required to recommend deployment")
    parser.add_argument("--compare-presets", action="store_true", help="Compare all governance presets")
    parser.add_argument("--save", action="store_true", help="Store the forecast snapshot")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of the report")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
    console = Console()

    try:
        config = (
            AllocatorConfig.preset(args.preset)
            if args.preset
            else AllocatorConfig.from_settings(settings)
        )
        forecaster = MonteCarloForecaster(
            config=config,
            trial_count=args.trials if args.trials is not None else settings.default_trial_count,
            seed=args.seed if args.seed is not None else settings.random_seed,
            noise_model=NoiseModel(args.noise or settings.noise_model),
            workers=args.workers if args.workers is not None else settings.worker_count,
            confidence_level=settings.confidence_level,
            regime_variability=args.regime_variability,
        )
        pools = default_pools()
        conditions = MarketConditions(volatility=args.volatility, sentiment=args.sentiment)
        target = args.target if args.target is not None else settings.deploy_target_yield

        if args.compare_presets:
            results = forecaster.compare_presets(args.capital, pools, conditions)
            if args.save:
                storage = ForecastStorage(settings.ensure_storage_dir())
                for r in results:
                    forecast_id = storage.save_forecast(r)
                    logger.info(f"Saved snapshot {r.label}/{forecast_id}")
            if args.json:
                print(json.dumps([r.to_dict() for r in results], indent=2))
            else:
                console.print(forecaster.format_comparison(results))
            return 0

        result = forecaster.forecast(args.capital, pools, conditions, label=args.preset or "forecast")
    except InvalidInputError as e:
        logger.error(f"Invalid input: {e}")
        return 2

    if args.save:
        storage = ForecastStorage(settings.ensure_storage_dir())
        forecast_id = storage.save_forecast(result)
        console.print(f"Saved snapshot {result.label}/{forecast_id}", style="dim")

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        console.print(render_forecast(result, target_yield=target))

    return 0


if __name__ == "__main__":
    sys.exit(main())
