"""Arbitrageur logic for pulling pool prices back towards a target."""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from fx_amm_backtest.core.interfaces import MarketMakerModel
from fx_amm_backtest.core.trade import SwapDirection

logger = logging.getLogger(__name__)

# Deviations below this multiple of the fee are not worth trading.
FEE_BUFFER = 1.5


@dataclass(frozen=True)
class ArbitrageProfile:
    """How hard arbitrageurs push a pool back to the target each step."""
    max_passes: int
    convergence_factor: float

    def __post_init__(self) -> None:
        if self.max_passes < 0:
            raise ValueError(f"max_passes must be >= 0, got {self.max_passes}")
        if not 0 <= self.convergence_factor <= 1:
            raise ValueError(
                f"convergence_factor must be in [0, 1], got {self.convergence_factor}"
            )


DEFAULT_ARBITRAGE_PROFILES: dict[str, ArbitrageProfile] = {
    "100": ArbitrageProfile(max_passes=10, convergence_factor=0.6),  # near-full convergence
    "87": ArbitrageProfile(max_passes=3, convergence_factor=0.5),    # ~87.5% of the gap
    "50": ArbitrageProfile(max_passes=1, convergence_factor=0.5),
    "none": ArbitrageProfile(max_passes=0, convergence_factor=0.0),
}


class UnknownArbitrageMode(ValueError):
    """Raised when an arbitrage mode has no matching profile."""


@dataclass
class ArbResult:
    """Totals of the corrective trades executed in one step."""
    volume: float = 0.0
    fees: float = 0.0
    passes: int = 0


class Arbitrageur:
    """Closes the gap between a pool's implied price and a target price.

    Each pass sizes the trade that would move the surplus side of the pool to
    parity at the target, scales it by the profile's convergence factor and
    executes it through the pool's own swap. The pool price is the reserve
    ratio (B per A):
    - Pool above target: B is cheap in the pool, so pay A and take B.
    - Pool below target: A is cheap in the pool, so pay B and take A.
    """

    def __init__(self, profiles: Optional[Mapping[str, ArbitrageProfile]] = None):
        self.profiles = dict(profiles) if profiles is not None else dict(DEFAULT_ARBITRAGE_PROFILES)

    def profile_for(self, mode: str) -> ArbitrageProfile:
        try:
            return self.profiles[mode]
        except KeyError:
            raise UnknownArbitrageMode(
                f"unknown arbitrage mode {mode!r}, expected one of {sorted(self.profiles)}"
            ) from None

    def compute_trade(
        self, model: MarketMakerModel, target_price: float, convergence_factor: float
    ) -> tuple[float, SwapDirection]:
        """Size the next corrective trade.

        Returns:
            (amount_in, direction); amount_in may be non-positive when
            there is nothing to correct.
        """
        current_price = model.spot_price
        if current_price > target_price:
            target_b = model.reserve_a * target_price
            surplus_b = model.reserve_b - target_b
            return surplus_b / current_price * convergence_factor, SwapDirection.A_TO_B

        target_a = model.reserve_b / target_price
        surplus_a = model.reserve_a - target_a
        return surplus_a * current_price * convergence_factor, SwapDirection.B_TO_A

    def run_arbitrage(
        self,
        model: MarketMakerModel,
        target_price: float,
        fee_tier: float,
        mode: str = "87",
    ) -> ArbResult:
        """Run up to the profile's number of passes against one pool.

        Args:
            model: Pool to arbitrage
            target_price: Price to converge towards (B per A)
            fee_tier: Fee charged per unit of traded value
            mode: Name of the arbitrage profile

        Returns:
            ArbResult with traded volume and fees in units of A
        """
        profile = self.profile_for(mode)
        result = ArbResult()

        for _ in range(profile.max_passes):
            ratio = model.spot_price / target_price
            if abs(ratio - 1) < fee_tier * FEE_BUFFER:
                break

            amount_in, direction = self.compute_trade(
                model, target_price, profile.convergence_factor
            )
            if amount_in <= 0:
                break

            amount_out = model.swap(amount_in, direction)
            if amount_out <= 0:
                logger.debug("%s rejected arbitrage of %.4f", model.name, amount_in)
                break

            trade_value = amount_in if direction.pays_a else amount_in / target_price
            result.volume += trade_value
            result.fees += trade_value * fee_tier
            result.passes += 1

        return result
