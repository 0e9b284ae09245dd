"""FX AMM backtesting framework."""

import logging

from fx_amm_backtest.core.interfaces import MarketMakerModel
from fx_amm_backtest.core.trade import PricePoint, SwapDirection
from fx_amm_backtest.simulation.config import BacktestConfig, build_config
from fx_amm_backtest.simulation.engine import BacktestEngine, run_backtest

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "MarketMakerModel",
    "PricePoint",
    "SwapDirection",
    "BacktestConfig",
    "build_config",
    "BacktestEngine",
    "run_backtest",
]
