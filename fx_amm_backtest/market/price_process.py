"""Geometric Brownian Motion reference price generator."""

from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np

from fx_amm_backtest.core.trade import PricePoint

DAYS_PER_YEAR = 365


@dataclass
class GBMPriceProcess:
    """Generates reference prices using Geometric Brownian Motion.

    The GBM model: dS = mu * S * dt + sigma * S * dW
    where:
    - S is the price
    - mu is the annualized drift
    - sigma is the annualized volatility
    - dt is one step expressed in years
    """
    initial_price: float
    volatility: float = 0.10
    drift: float = 0.0
    steps_per_day: int = 24
    seed: Optional[int] = None
    rng: Optional[np.random.Generator] = None

    def __post_init__(self) -> None:
        if self.rng is None:
            self.rng = np.random.default_rng(self.seed)
        self._current_price = self.initial_price

    @property
    def dt(self) -> float:
        return 1.0 / (DAYS_PER_YEAR * self.steps_per_day)

    def reset(self, seed: Optional[int] = None) -> None:
        """Reset the price process to initial state."""
        if seed is not None:
            self.rng = np.random.default_rng(seed)
        self._current_price = self.initial_price

    @property
    def current_price(self) -> float:
        return self._current_price

    def step(self) -> float:
        """Advance one step and return the new price."""
        # S(t+dt) = S(t) * exp((mu - 0.5*sigma^2)*dt + sigma*sqrt(dt)*Z)
        z = self.rng.standard_normal()
        drift = (self.drift - 0.5 * self.volatility ** 2) * self.dt
        diffusion = self.volatility * np.sqrt(self.dt) * z
        self._current_price = float(self._current_price * np.exp(drift + diffusion))
        return self._current_price

    def generate(self, days: int) -> Iterator[PricePoint]:
        """Yield days * steps_per_day + 1 samples, starting at the current price."""
        total_steps = days * self.steps_per_day
        for i in range(total_steps + 1):
            yield PricePoint(step=i, day=i // self.steps_per_day, price=self._current_price)
            if i < total_steps:
                self.step()

    def generate_path(self, days: int) -> list[PricePoint]:
        """Generate a complete price path."""
        return list(self.generate(days))
