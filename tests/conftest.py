"""Pytest configuration and shared fixtures for backtest tests.

This module provides:
- Shared fixtures for pools, configs and price paths
- Pytest markers for test categorization
"""

import numpy as np
import pytest

from fx_amm_backtest.core.interfaces import MarketMakerModel
from fx_amm_backtest.core.trade import PricePoint
from fx_amm_backtest.market.price_process import GBMPriceProcess
from fx_amm_backtest.simulation.config import BacktestConfig, build_config
from tests.fixtures.pool_fixtures import POOL_KINDS, create_pool, make_flat_path


# ============================================================================
# Pytest Hooks
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "numerics: Solver and pricing-formula tests"
    )
    config.addinivalue_line(
        "markers", "integration: Full backtest runs spanning multiple components"
    )
    config.addinivalue_line(
        "markers", "slow: Tests taking more than 5 seconds to run"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on location."""
    for item in items:
        if any(keyword in item.nodeid for keyword in ["stableswap", "amplification"]):
            item.add_marker(pytest.mark.numerics)
        if any(keyword in item.nodeid for keyword in ["engine", "cli"]):
            item.add_marker(pytest.mark.integration)


# ============================================================================
# Random and Config Fixtures
# ============================================================================


@pytest.fixture
def fixed_seed() -> int:
    """Fixed random seed for deterministic tests."""
    return 42


@pytest.fixture
def rng(fixed_seed) -> np.random.Generator:
    return np.random.default_rng(fixed_seed)


@pytest.fixture
def default_config() -> BacktestConfig:
    """Default config with a fixed seed and a short horizon."""
    return build_config(sim={"days": 10, "seed": 42})


@pytest.fixture
def quiet_config() -> BacktestConfig:
    """No retail flow and no arbitrage: reserves may only move through explicit swaps."""
    return build_config(sim={"daily_volume_fraction": 0.0, "arbitrage_mode": "none", "seed": 42})


# ============================================================================
# Pool and Path Fixtures
# ============================================================================


@pytest.fixture(params=POOL_KINDS)
def any_pool(request) -> MarketMakerModel:
    """Each pool variant with default parameters."""
    return create_pool(request.param)


@pytest.fixture
def flat_path() -> list[PricePoint]:
    """20 steps at the default reference price."""
    return make_flat_path(20)


@pytest.fixture
def gbm_path(fixed_seed) -> list[PricePoint]:
    """30 days of 4 steps per day at 10% annualized volatility."""
    process = GBMPriceProcess(initial_price=1400.0, volatility=0.10, steps_per_day=4, seed=fixed_seed)
    return process.generate_path(30)
