"""Retail trader simulation with uniformly jittered order sizes."""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from fx_amm_backtest.core.trade import SwapDirection


@dataclass
class RetailOrder:
    """A retail order sized in units of A."""
    direction: SwapDirection
    notional: float


class RetailTrader:
    """Generates one uninformed retail order per step.

    Sizes are the mean notional scaled by U(low, high); the direction is a
    fair coin flip.
    """

    def __init__(
        self,
        mean_notional: float,
        rng: Optional[np.random.Generator] = None,
        size_low: float = 0.5,
        size_high: float = 1.5,
    ):
        """
        Args:
            mean_notional: Target trade size per step (in A)
            rng: Shared random generator
            size_low: Lower bound of the size multiplier
            size_high: Upper bound of the size multiplier
        """
        self.mean_notional = mean_notional
        self.size_low = size_low
        self.size_high = size_high
        self._rng = rng if rng is not None else np.random.default_rng()

    def generate_order(self) -> RetailOrder:
        notional = self.mean_notional * self._rng.uniform(self.size_low, self.size_high)
        if self._rng.random() > 0.5:
            direction = SwapDirection.A_TO_B
        else:
            direction = SwapDirection.B_TO_A
        return RetailOrder(direction=direction, notional=notional)
