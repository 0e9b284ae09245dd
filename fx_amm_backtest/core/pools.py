"""Pool variants: constant product, StableSwap family and stable peg.

Every variant starts from a 50/50 split of the initial wealth at the initial
reference price, except the stable-peg pool which holds two ~$1 assets.
"""

import logging
import math
from typing import Optional

import numpy as np

from fx_amm_backtest.core.amplification import compute_effective_amplification
from fx_amm_backtest.core.interfaces import MarketMakerModel
from fx_amm_backtest.core.stableswap import (
    quote_constant_product_output,
    quote_curve_output,
)
from fx_amm_backtest.core.trade import ModelKind, ModelState, SwapDirection

logger = logging.getLogger(__name__)


def split_wealth(initial_wealth: float, initial_price: float) -> tuple[float, float]:
    """Initial (reserve_a, reserve_b) worth half the wealth each."""
    per_side = initial_wealth / 2
    return per_side, per_side * initial_price


class ConstantProductPool(MarketMakerModel):
    """x * y = k on raw reserves. No reference price dependency."""

    kind = ModelKind.CONSTANT_PRODUCT

    def __init__(
        self,
        initial_wealth: float,
        initial_price: float,
        fee: float,
        name: str = "Uniswap V2",
    ):
        reserve_a, reserve_b = split_wealth(initial_wealth, initial_price)
        super().__init__(name, reserve_a, reserve_b, fee)

    def swap(self, amount_in: float, direction: SwapDirection) -> float:
        if amount_in <= 0:
            return 0.0
        self._check_reserves()
        if direction.pays_a:
            amount_out = quote_constant_product_output(
                amount_in, self.reserve_a, self.reserve_b, self.fee
            )
        else:
            amount_out = quote_constant_product_output(
                amount_in, self.reserve_b, self.reserve_a, self.fee
            )
        self._apply(amount_in, amount_out, direction)
        return amount_out

    def snapshot(self) -> ModelState:
        return ModelState(
            name=self.name,
            kind=self.kind,
            reserve_a=self.reserve_a,
            reserve_b=self.reserve_b,
        )


class _NormalizedStableSwap(MarketMakerModel):
    """StableSwap quoting in a space where both sides are worth the same.

    With scale price p, A balances are multiplied by sqrt(p) and B balances
    divided by it; at a pool price of p both sides then hold equal amounts.
    """

    def __init__(
        self,
        name: str,
        initial_wealth: float,
        initial_price: float,
        fee: float,
        strict: bool = False,
    ):
        reserve_a, reserve_b = split_wealth(initial_wealth, initial_price)
        super().__init__(name, reserve_a, reserve_b, fee)
        self.strict = strict
        self.last_amplification: Optional[float] = None

    def _normalized_swap(
        self, amount_in: float, direction: SwapDirection, scale_price: float, amp: float
    ) -> float:
        self._check_reserves()
        root = math.sqrt(scale_price)
        if direction.pays_a:
            in_scale, out_scale = root, 1 / root
            reserve_in, reserve_out = self.reserve_a, self.reserve_b
        else:
            in_scale, out_scale = 1 / root, root
            reserve_in, reserve_out = self.reserve_b, self.reserve_a

        out_norm = quote_curve_output(
            amount_in * in_scale,
            reserve_in * in_scale,
            reserve_out * out_scale,
            amp,
            self.fee,
            strict=self.strict,
        )
        amount_out = out_norm / out_scale
        self.last_amplification = amp
        self._apply(amount_in, amount_out, direction)
        return amount_out


class StableSwapPool(_NormalizedStableSwap):
    """Fixed-A StableSwap normalized against a reference price.

    The reference stays at its creation value unless recenter is set, so by
    default the curve drifts away from the market over time.
    """

    kind = ModelKind.STABLESWAP

    def __init__(
        self,
        initial_wealth: float,
        initial_price: float,
        fee: float,
        amp: float,
        recenter: bool = False,
        strict: bool = False,
        name: str = "Curve (Fixed A)",
    ):
        super().__init__(name, initial_wealth, initial_price, fee, strict)
        self.amp = amp
        self.recenter = recenter
        self.reference_price = initial_price

    def update_reference(self, price: float) -> None:
        if self.recenter:
            self.reference_price = price

    def swap(self, amount_in: float, direction: SwapDirection) -> float:
        if amount_in <= 0:
            return 0.0
        return self._normalized_swap(amount_in, direction, self.reference_price, self.amp)

    def snapshot(self) -> ModelState:
        return ModelState(
            name=self.name,
            kind=self.kind,
            reserve_a=self.reserve_a,
            reserve_b=self.reserve_b,
            reference_price=self.reference_price,
            amplification=self.amp,
        )


class DynamicStableSwapPool(_NormalizedStableSwap):
    """StableSwap whose amplification decays with deviation from the reference.

    The reference is re-centred on every update. Trades are refused while the
    pool price sits more than halt_threshold (log-deviation) away from it.
    """

    kind = ModelKind.DYNAMIC_STABLESWAP
    can_halt = True

    def __init__(
        self,
        initial_wealth: float,
        initial_price: float,
        fee: float,
        a_max: float,
        a_min: float,
        delta0: float,
        halt_threshold: float = 0.02,
        strict: bool = False,
        name: str = "Dynamic A",
    ):
        super().__init__(name, initial_wealth, initial_price, fee, strict)
        self.a_max = a_max
        self.a_min = a_min
        self.delta0 = delta0
        self.halt_threshold = halt_threshold
        self.reference_price = initial_price
        self.last_deviation = 0.0

    def update_reference(self, price: float) -> None:
        self.reference_price = price

    def swap(self, amount_in: float, direction: SwapDirection) -> float:
        if amount_in <= 0:
            return 0.0
        self._check_reserves()

        amp = compute_effective_amplification(
            self.spot_price, self.reference_price, self.a_max, self.a_min, self.delta0
        )
        self.last_deviation = amp.deviation
        if amp.deviation > self.halt_threshold:
            self.halt_count += 1
            logger.debug(
                "%s halted: deviation %.5f > %.5f",
                self.name, amp.deviation, self.halt_threshold,
            )
            return 0.0

        return self._normalized_swap(
            amount_in, direction, self.reference_price, amp.amplification
        )

    def snapshot(self) -> ModelState:
        return ModelState(
            name=self.name,
            kind=self.kind,
            reserve_a=self.reserve_a,
            reserve_b=self.reserve_b,
            reference_price=self.reference_price,
            amplification=self.last_amplification,
        )


class RepricingPool(_NormalizedStableSwap):
    """CryptoSwap-style pool that normalizes with a lagging internal price scale.

    The scale follows the pool's own reserve ratio via an exponential moving
    average and never looks at the external reference.
    """

    kind = ModelKind.CRYPTOSWAP

    def __init__(
        self,
        initial_wealth: float,
        initial_price: float,
        fee: float,
        amp: float,
        alpha: float = 0.1,
        strict: bool = False,
        name: str = "Curve (Crypto V2)",
    ):
        super().__init__(name, initial_wealth, initial_price, fee, strict)
        self.amp = amp
        self.alpha = alpha
        self.price_scale = initial_price

    def update_internal_scale(self) -> None:
        if self.reserve_a > 0:
            internal_price = self.reserve_b / self.reserve_a
            self.price_scale += self.alpha * (internal_price - self.price_scale)

    def swap(self, amount_in: float, direction: SwapDirection) -> float:
        if amount_in <= 0:
            return 0.0
        return self._normalized_swap(amount_in, direction, self.price_scale, self.amp)

    def snapshot(self) -> ModelState:
        return ModelState(
            name=self.name,
            kind=self.kind,
            reserve_a=self.reserve_a,
            reserve_b=self.reserve_b,
            price_scale=self.price_scale,
            amplification=self.amp,
        )


class StablePegPool(MarketMakerModel):
    """Two ~$1 stablecoins traded 1:1 through the raw StableSwap curve.

    The FX reference is ignored. Each update draws a small wobble of the
    pair's own exchange rate around 1.0, which only arbitrageurs see.
    """

    kind = ModelKind.STABLE_PEG

    def __init__(
        self,
        initial_wealth: float,
        fee: float,
        amp: float,
        rng: np.random.Generator,
        wobble: float = 0.0005,
        strict: bool = False,
        name: str = "Curve (USDT/USDC)",
    ):
        per_side = initial_wealth / 2
        super().__init__(name, per_side, per_side, fee)
        self.amp = amp
        self.wobble = wobble
        self.strict = strict
        self._rng = rng
        self.peg_target = 1.0

    def update_reference(self, price: float) -> None:
        self.peg_target = 1.0 + self._rng.uniform(-self.wobble, self.wobble)

    def target_price(self, reference_price: float) -> float:
        return self.peg_target

    def input_amount(
        self, notional: float, direction: SwapDirection, reference_price: float
    ) -> float:
        return notional

    def trade_value(
        self, amount_in: float, direction: SwapDirection, reference_price: float
    ) -> float:
        return amount_in

    def _value_of(self, amount_a: float, amount_b: float, reference_price: float) -> float:
        return amount_a + amount_b

    def swap(self, amount_in: float, direction: SwapDirection) -> float:
        if amount_in <= 0:
            return 0.0
        self._check_reserves()
        if direction.pays_a:
            reserve_in, reserve_out = self.reserve_a, self.reserve_b
        else:
            reserve_in, reserve_out = self.reserve_b, self.reserve_a
        amount_out = quote_curve_output(
            amount_in, reserve_in, reserve_out, self.amp, self.fee, strict=self.strict
        )
        self._apply(amount_in, amount_out, direction)
        return amount_out

    def snapshot(self) -> ModelState:
        return ModelState(
            name=self.name,
            kind=self.kind,
            reserve_a=self.reserve_a,
            reserve_b=self.reserve_b,
            reference_price=self.peg_target,
            amplification=self.amp,
        )
