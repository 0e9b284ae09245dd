"""Backtest configuration and shared defaults."""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional

from fx_amm_backtest.market.arbitrageur import ArbitrageProfile, DEFAULT_ARBITRAGE_PROFILES

CURVE_MODELS = ("curve_norm", "curve_stable", "curve_crypto")
UNISWAP_MODELS = ("uniswap_v2", "uniswap_std")


@dataclass(frozen=True)
class PoolSettings:
    initial_wealth: float = 10_000_000.0  # In A (USD)
    fee_tier: float = 0.0005              # 5 bps

    def __post_init__(self) -> None:
        if self.initial_wealth <= 0:
            raise ValueError(f"initial_wealth must be > 0, got {self.initial_wealth}")
        if not 0 <= self.fee_tier < 1:
            raise ValueError(f"fee_tier must be in [0, 1), got {self.fee_tier}")


@dataclass(frozen=True)
class DynamicAmplificationSettings:
    a_max: float = 500.0
    a_min: float = 10.0
    delta0: float = 0.01          # One-sigma deviation of the decay
    halt_threshold: float = 0.02  # Log-deviation above which swaps are refused

    def __post_init__(self) -> None:
        if self.a_min <= 0 or self.a_min > self.a_max:
            raise ValueError(
                f"need 0 < a_min <= a_max, got a_min={self.a_min}, a_max={self.a_max}"
            )
        if self.delta0 <= 0:
            raise ValueError(f"delta0 must be > 0, got {self.delta0}")
        if self.halt_threshold <= 0:
            raise ValueError(f"halt_threshold must be > 0, got {self.halt_threshold}")


@dataclass(frozen=True)
class CurveSettings:
    a_fixed: float = 200.0
    recenter: bool = False
    reprice_alpha: float = 0.1
    peg_wobble: float = 0.0005

    def __post_init__(self) -> None:
        if self.a_fixed <= 0:
            raise ValueError(f"a_fixed must be > 0, got {self.a_fixed}")
        if not 0 <= self.reprice_alpha <= 1:
            raise ValueError(f"reprice_alpha must be in [0, 1], got {self.reprice_alpha}")
        if self.peg_wobble < 0:
            raise ValueError(f"peg_wobble must be >= 0, got {self.peg_wobble}")


@dataclass(frozen=True)
class SimulationSettings:
    days: int = 365
    steps_per_day: int = 4
    initial_price: float = 1400.0         # B per A (KRW/USD)
    daily_volume_fraction: float = 0.05   # Retail volume per day as a fraction of wealth
    volatility: float = 0.10              # Annualized
    drift: float = 0.0                    # Annualized
    arbitrage_mode: str = "87"
    curve_model: str = "curve_norm"
    uniswap_model: str = "uniswap_v2"
    seed: Optional[int] = None
    strict_convergence: bool = False

    def __post_init__(self) -> None:
        if self.days < 0:
            raise ValueError(f"days must be >= 0, got {self.days}")
        if self.steps_per_day < 1:
            raise ValueError(f"steps_per_day must be >= 1, got {self.steps_per_day}")
        if self.initial_price <= 0:
            raise ValueError(f"initial_price must be > 0, got {self.initial_price}")
        if self.daily_volume_fraction < 0:
            raise ValueError(
                f"daily_volume_fraction must be >= 0, got {self.daily_volume_fraction}"
            )
        if self.curve_model not in CURVE_MODELS:
            raise ValueError(f"unknown curve_model {self.curve_model!r}, expected one of {CURVE_MODELS}")
        if self.uniswap_model not in UNISWAP_MODELS:
            raise ValueError(
                f"unknown uniswap_model {self.uniswap_model!r}, expected one of {UNISWAP_MODELS}"
            )


@dataclass(frozen=True)
class BacktestConfig:
    """Complete, read-only configuration of one backtest run."""
    pool: PoolSettings = field(default_factory=PoolSettings)
    dynamic: DynamicAmplificationSettings = field(default_factory=DynamicAmplificationSettings)
    curve: CurveSettings = field(default_factory=CurveSettings)
    sim: SimulationSettings = field(default_factory=SimulationSettings)
    arbitrage_profiles: Mapping[str, ArbitrageProfile] = field(
        default_factory=lambda: dict(DEFAULT_ARBITRAGE_PROFILES), hash=False
    )

    def __post_init__(self) -> None:
        # Read-only view over a private copy
        object.__setattr__(
            self, "arbitrage_profiles", MappingProxyType(dict(self.arbitrage_profiles))
        )
        if self.sim.arbitrage_mode not in self.arbitrage_profiles:
            raise ValueError(
                f"unknown arbitrage_mode {self.sim.arbitrage_mode!r}, "
                f"expected one of {sorted(self.arbitrage_profiles)}"
            )

    @property
    def retail_notional_per_step(self) -> float:
        """Mean retail trade size per step, in A."""
        return (
            self.pool.initial_wealth * self.sim.daily_volume_fraction / self.sim.steps_per_day
        )


DEFAULT_CONFIG = BacktestConfig()


def build_config(
    *,
    pool: Optional[Mapping[str, Any]] = None,
    dynamic: Optional[Mapping[str, Any]] = None,
    curve: Optional[Mapping[str, Any]] = None,
    sim: Optional[Mapping[str, Any]] = None,
    arbitrage_profiles: Optional[Mapping[str, ArbitrageProfile]] = None,
) -> BacktestConfig:
    """Build a config from the defaults with per-section overrides."""
    profiles = dict(DEFAULT_ARBITRAGE_PROFILES)
    if arbitrage_profiles:
        profiles.update(arbitrage_profiles)
    return BacktestConfig(
        pool=replace(DEFAULT_CONFIG.pool, **(pool or {})),
        dynamic=replace(DEFAULT_CONFIG.dynamic, **(dynamic or {})),
        curve=replace(DEFAULT_CONFIG.curve, **(curve or {})),
        sim=replace(DEFAULT_CONFIG.sim, **(sim or {})),
        arbitrage_profiles=profiles,
    )
