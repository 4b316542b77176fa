"""Pytest configuration and fixtures."""

from typing import List

import pytest

from yieldcast.core.models import MarketConditions, Pool
from yieldcast.engine import AllocatorConfig, SeededRandomSourceFactory


@pytest.fixture
def scenario_pools() -> List[Pool]:
    """RLUSD/XRP stable pool plus an eco Solar/XRP pool."""
    return [
        Pool(name="RLUSD/XRP", base_apy=0.35, is_stable=True, is_eco=False),
        Pool(name="Solar/XRP", base_apy=0.30, is_stable=False, is_eco=True),
    ]


@pytest.fixture
def mixed_pools() -> List[Pool]:
    """Four pools covering every stable/eco flag combination."""
    return [
        Pool(name="RLUSD/XRP", base_apy=0.35, is_stable=True, liquidity=2_500_000.0),
        Pool(name="Solar/XRP", base_apy=0.30, is_eco=True, liquidity=400_000.0),
        Pool(name="XRP/USD", base_apy=0.45, liquidity=1_800_000.0),
        Pool(name="Green-USD/XRP", base_apy=0.12, is_stable=True, is_eco=True, liquidity=300_000.0),
    ]


@pytest.fixture
def high_vol_conditions() -> MarketConditions:
    return MarketConditions(volatility=0.96, sentiment=0.7)


@pytest.fixture
def calm_conditions() -> MarketConditions:
    return MarketConditions(volatility=0.2, sentiment=0.5)


@pytest.fixture
def default_config() -> AllocatorConfig:
    return AllocatorConfig()


@pytest.fixture
def rng_factory() -> SeededRandomSourceFactory:
    """Seeded factory for reproducible simulations."""
    return SeededRandomSourceFactory(seed=42)


@pytest.fixture
def mock_settings(tmp_path):
    """Create mock settings for testing."""
    from unittest.mock import MagicMock

    settings = MagicMock()
    settings.high_vol_threshold = 0.5
    settings.stable_shift_fraction = 0.8
    settings.eco_boost_multiplier = 1.24
    settings.default_trial_count = 200
    settings.random_seed = 7
    settings.noise_model = "normal"
    settings.worker_count = 1
    settings.confidence_level = 0.95
    settings.deploy_target_yield = 0.6
    settings.storage_dir = tmp_path / "yieldcast"
    settings.poll_interval_seconds = 0.0
    settings.ensure_storage_dir.return_value = settings.storage_dir

    return settings
