"""Dynamic amplification derived from deviation against a reference price."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class AmplificationResult:
    amplification: float
    deviation: float


def compute_effective_amplification(
    pool_price: float,
    reference_price: float,
    a_max: float,
    a_min: float,
    sensitivity: float,
) -> AmplificationResult:
    """Gaussian decay of A with log-deviation from the reference price.

    δ = |ln(pool_price / reference_price)|
    A_eff = a_min + (a_max - a_min) · exp(-(δ / sensitivity)²)

    At zero deviation A_eff equals a_max; it approaches a_min as δ grows.
    """
    deviation = abs(math.log(pool_price / reference_price))
    amplification = a_min + (a_max - a_min) * math.exp(-((deviation / sensitivity) ** 2))
    return AmplificationResult(amplification=amplification, deviation=deviation)
