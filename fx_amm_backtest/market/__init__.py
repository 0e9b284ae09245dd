"""Market simulation components."""

from fx_amm_backtest.market.price_process import GBMPriceProcess
from fx_amm_backtest.market.arbitrageur import ArbitrageProfile, Arbitrageur, ArbResult
from fx_amm_backtest.market.retail import RetailOrder, RetailTrader
from fx_amm_backtest.market.historical import load_historical_path

__all__ = [
    "GBMPriceProcess",
    "ArbitrageProfile",
    "Arbitrageur",
    "ArbResult",
    "RetailOrder",
    "RetailTrader",
    "load_historical_path",
]
