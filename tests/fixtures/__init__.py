"""Test fixtures for pool and backtest testing."""

from tests.fixtures.pool_fixtures import (
    FEE,
    POOL_KINDS,
    PRICE,
    WEALTH,
    PoolStateSnapshot,
    create_pool,
    make_flat_path,
    make_price_path,
    price_deviation,
    snapshot_pool_state,
)

__all__ = [
    "FEE",
    "POOL_KINDS",
    "PRICE",
    "WEALTH",
    "PoolStateSnapshot",
    "create_pool",
    "make_flat_path",
    "make_price_path",
    "price_deviation",
    "snapshot_pool_state",
]
