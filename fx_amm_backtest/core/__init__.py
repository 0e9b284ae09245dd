"""Core pool math and model variants."""

from fx_amm_backtest.core.interfaces import DegeneratePoolError, MarketMakerModel
from fx_amm_backtest.core.trade import ModelKind, ModelState, PricePoint, SwapDirection
from fx_amm_backtest.core.pools import (
    ConstantProductPool,
    DynamicStableSwapPool,
    RepricingPool,
    StablePegPool,
    StableSwapPool,
)

__all__ = [
    "DegeneratePoolError",
    "MarketMakerModel",
    "ModelKind",
    "ModelState",
    "PricePoint",
    "SwapDirection",
    "ConstantProductPool",
    "DynamicStableSwapPool",
    "RepricingPool",
    "StablePegPool",
    "StableSwapPool",
]
