"""Backtest configuration, driver and results."""

from fx_amm_backtest.simulation.config import (
    ArbitrageProfile,
    BacktestConfig,
    DEFAULT_CONFIG,
    build_config,
)
from fx_amm_backtest.simulation.results import BacktestResult, ModelStats, StepRecord
from fx_amm_backtest.simulation.engine import BacktestEngine, create_pools, run_backtest

__all__ = [
    "ArbitrageProfile",
    "BacktestConfig",
    "DEFAULT_CONFIG",
    "build_config",
    "BacktestResult",
    "ModelStats",
    "StepRecord",
    "BacktestEngine",
    "create_pools",
    "run_backtest",
]
