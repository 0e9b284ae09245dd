"""Trade and pool-state data classes."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SwapDirection(Enum):
    """Direction of a swap from the trader's perspective."""
    A_TO_B = "a_to_b"  # Trader pays A (USD), receives B (KRW)
    B_TO_A = "b_to_a"  # Trader pays B, receives A

    @property
    def pays_a(self) -> bool:
        return self is SwapDirection.A_TO_B


class ModelKind(Enum):
    """Family of swap rule a model implements."""
    CONSTANT_PRODUCT = "cpmm"
    STABLESWAP = "stableswap"
    DYNAMIC_STABLESWAP = "dynamic_stableswap"
    CRYPTOSWAP = "cryptoswap"
    STABLE_PEG = "stableswap_peg"


@dataclass(frozen=True)
class PricePoint:
    """One sample of the external reference price (B per A)."""
    step: int
    day: int
    price: float

    def __post_init__(self) -> None:
        if self.price <= 0:
            raise ValueError(f"price must be > 0, got {self.price}")


@dataclass(frozen=True)
class ModelState:
    """Snapshot of a model's reserves and the parameters currently in effect."""
    name: str
    kind: ModelKind
    reserve_a: float
    reserve_b: float
    reference_price: Optional[float] = None
    price_scale: Optional[float] = None
    amplification: Optional[float] = None

    @property
    def spot_price(self) -> float:
        """Implied pool price (B per A)."""
        if self.reserve_a == 0:
            return 0.0
        return self.reserve_b / self.reserve_a
