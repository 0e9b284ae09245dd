"""Backtest driver: runs every pool over a reference price path in lockstep."""

import logging
from typing import Optional, Sequence

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
from fx_amm_backtest.market.arbitrageur import Arbitrageur
from fx_amm_backtest.market.retail import RetailTrader
from fx_amm_backtest.simulation.config import BacktestConfig, DEFAULT_CONFIG
from fx_amm_backtest.simulation.results import BacktestResult, ModelStats, StepRecord

logger = logging.getLogger(__name__)


def create_pools(
    config: BacktestConfig, initial_price: float, rng: np.random.Generator
) -> list[MarketMakerModel]:
    """Instantiate the compared pools: dynamic, curve slot, uniswap slot."""
    wealth = config.pool.initial_wealth
    fee = config.pool.fee_tier
    strict = config.sim.strict_convergence

    pools: list[MarketMakerModel] = [
        DynamicStableSwapPool(
            wealth,
            initial_price,
            fee,
            a_max=config.dynamic.a_max,
            a_min=config.dynamic.a_min,
            delta0=config.dynamic.delta0,
            halt_threshold=config.dynamic.halt_threshold,
            strict=strict,
        )
    ]

    curve_model = config.sim.curve_model
    if curve_model == "curve_stable":
        pools.append(
            StablePegPool(
                wealth, fee, config.curve.a_fixed, rng,
                wobble=config.curve.peg_wobble, strict=strict,
            )
        )
    elif curve_model == "curve_crypto":
        pools.append(
            RepricingPool(
                wealth, initial_price, fee, config.curve.a_fixed,
                alpha=config.curve.reprice_alpha, strict=strict,
            )
        )
    else:
        pools.append(
            StableSwapPool(
                wealth, initial_price, fee, config.curve.a_fixed,
                recenter=config.curve.recenter, strict=strict,
            )
        )

    if config.sim.uniswap_model == "uniswap_std":
        pools.append(ConstantProductPool(wealth, initial_price, fee, name="Uniswap V2 (Standard)"))
    else:
        pools.append(ConstantProductPool(wealth, initial_price, fee))

    return pools


class BacktestEngine:
    """Runs the configured pools over a reference price path.

    Per sample, each pool in turn:
    1. receives the new reference price, then updates any internal scale
    2. is arbitraged towards its target price
    3. receives one random retail order
    4. has its valuation, hold value and impermanent loss recorded
    """

    def __init__(
        self,
        config: BacktestConfig = DEFAULT_CONFIG,
        rng: Optional[np.random.Generator] = None,
    ):
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(config.sim.seed)
        self.arbitrageur = Arbitrageur(config.arbitrage_profiles)
        self.retail = RetailTrader(config.retail_notional_per_step, self.rng)

    def run(
        self,
        prices: Sequence[PricePoint],
        pools: Optional[list[MarketMakerModel]] = None,
    ) -> BacktestResult:
        """Run the backtest.

        Args:
            prices: Reference price samples ordered by step
            pools: Pools to simulate; built from the config at the first
                sample's price when omitted

        Returns:
            BacktestResult with one ModelStats per pool and the input prices
        """
        if not prices:
            raise ValueError("price path is empty")

        if pools is None:
            pools = create_pools(self.config, prices[0].price, self.rng)
        stats = [ModelStats(name=pool.name) for pool in pools]

        logger.info(
            "Running %d steps for %s (arbitrage mode %s)",
            len(prices), [p.name for p in pools], self.config.sim.arbitrage_mode,
        )

        for point in prices:
            for pool, stat in zip(pools, stats):
                self._step(pool, stat, point)

        for stat in stats:
            logger.info(
                "%s: fees=%.2f volume=%.2f halts=%d IL=%.4f%%",
                stat.name, stat.cumulative_fees, stat.cumulative_volume,
                stat.halt_count, stat.final_il_pct,
            )
        return BacktestResult(stats=stats, prices=prices)

    def _step(self, pool: MarketMakerModel, stat: ModelStats, point: PricePoint) -> None:
        fee_tier = self.config.pool.fee_tier
        price = point.price

        pool.update_reference(price)
        pool.update_internal_scale()

        arb = self.arbitrageur.run_arbitrage(
            pool, pool.target_price(price), fee_tier, self.config.sim.arbitrage_mode
        )
        stat.cumulative_fees += arb.fees
        stat.cumulative_volume += arb.volume

        order = self.retail.generate_order()
        amount_in = pool.input_amount(order.notional, order.direction, price)
        amount_out = pool.swap(amount_in, order.direction)

        if amount_out > 0:
            trade_value = pool.trade_value(amount_in, order.direction, price)
            stat.cumulative_fees += trade_value * fee_tier
            stat.cumulative_volume += trade_value
        elif pool.can_halt and order.notional > 0:
            stat.halt_count += 1

        valuation = pool.valuation(price)
        hold_value = pool.hold_value(price)
        stat.record(
            StepRecord(
                step=point.step,
                day=point.day,
                price=price,
                valuation=valuation,
                hold_value=hold_value,
                il_pct=(valuation / hold_value - 1) * 100,
                cumulative_fees=stat.cumulative_fees,
                halted=amount_out <= 0 and order.notional > 0,
                reserve_a=pool.reserve_a,
                reserve_b=pool.reserve_b,
            )
        )


def run_backtest(
    prices: Sequence[PricePoint],
    config: BacktestConfig = DEFAULT_CONFIG,
    rng: Optional[np.random.Generator] = None,
) -> BacktestResult:
    """Convenience wrapper around BacktestEngine.run."""
    return BacktestEngine(config, rng).run(prices)
