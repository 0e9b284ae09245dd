"""Pool and price-path fixtures for backtest testing.

Standard pool setup mirrors the default backtest configuration:
- Wealth: 10,000,000 A split 50/50
- Reference price: 1400 B per A
- Fee: 5 bps

Pool profiles:
- cpmm: constant product
- stableswap: fixed A = 200, reference fixed at creation
- dynamic: A decays 500 -> 10 with delta0 = 1%, halts beyond 2%
- crypto: fixed A = 200 with a lagging price scale (alpha = 0.1)
- peg: two ~$1 assets, fixed A = 200
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from fx_amm_backtest.core.interfaces import MarketMakerModel
from fx_amm_backtest.core.pools import (
    ConstantProductPool,
    DynamicStableSwapPool,
    RepricingPool,
    StablePegPool,
    StableSwapPool,
)
from fx_amm_backtest.core.trade import PricePoint

WEALTH = 10_000_000.0
PRICE = 1400.0
FEE = 0.0005

POOL_KINDS = ("cpmm", "stableswap", "dynamic", "crypto", "peg")


@dataclass(frozen=True)
class PoolStateSnapshot:
    """Immutable copy of a pool's reserves."""
    name: str
    reserve_a: float
    reserve_b: float

    @property
    def spot_price(self) -> float:
        return self.reserve_b / self.reserve_a


def create_pool(
    kind: str,
    wealth: float = WEALTH,
    price: float = PRICE,
    fee: float = FEE,
    rng: Optional[np.random.Generator] = None,
) -> MarketMakerModel:
    """Create a pool of the given profile with default parameters.

    Raises:
        ValueError: If kind is not one of POOL_KINDS
    """
    if kind == "cpmm":
        return ConstantProductPool(wealth, price, fee)
    if kind == "stableswap":
        return StableSwapPool(wealth, price, fee, amp=200.0)
    if kind == "dynamic":
        return DynamicStableSwapPool(wealth, price, fee, a_max=500.0, a_min=10.0, delta0=0.01)
    if kind == "crypto":
        return RepricingPool(wealth, price, fee, amp=200.0, alpha=0.1)
    if kind == "peg":
        return StablePegPool(wealth, fee, amp=200.0, rng=rng or np.random.default_rng(42))
    raise ValueError(f"unknown pool kind {kind!r}")


def snapshot_pool_state(pool: MarketMakerModel) -> PoolStateSnapshot:
    return PoolStateSnapshot(name=pool.name, reserve_a=pool.reserve_a, reserve_b=pool.reserve_b)


def price_deviation(pool: MarketMakerModel, target: float) -> float:
    """|spot / target - 1|"""
    return abs(pool.spot_price / target - 1)


def make_price_path(prices: list[float], steps_per_day: int = 4) -> list[PricePoint]:
    """Turn a list of prices into consecutive PricePoints."""
    return [
        PricePoint(step=i, day=i // steps_per_day, price=p)
        for i, p in enumerate(prices)
    ]


def make_flat_path(n_steps: int, price: float = PRICE, steps_per_day: int = 4) -> list[PricePoint]:
    return make_price_path([price] * n_steps, steps_per_day)
