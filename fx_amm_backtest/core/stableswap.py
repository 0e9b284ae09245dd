"""Two-coin StableSwap invariant solver and swap quoting.

All balances handed to the solver are in the normalized space where both
coins are worth roughly the same, so the absolute tolerance of one unit is
small relative to realistic pool sizes.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

logger = logging.getLogger(__name__)

N_COINS = 2
MAX_ITERATIONS = 255
TOLERANCE = 1.0


class ConvergenceError(ArithmeticError):
    """Raised in strict mode when Newton's method fails to converge."""


@dataclass(frozen=True)
class SolverResult:
    """Outcome of a Newton solve."""
    value: float
    iterations: int
    converged: bool


def compute_invariant(xp: Sequence[float], amp: float) -> SolverResult:
    """Solve for the StableSwap invariant D.

    Equation: A·n^n·S + D = A·n^n·D + D^(n+1) / (n^n·Πx)

    Args:
        xp: Normalized balances [x, y]
        amp: Amplification coefficient A

    Returns:
        SolverResult with D; converged is False if the iteration budget
        ran out before successive estimates came within the tolerance.
    """
    s = xp[0] + xp[1]
    if s == 0:
        return SolverResult(value=0.0, iterations=0, converged=True)

    ann = amp * N_COINS ** N_COINS
    d = s
    for i in range(MAX_ITERATIONS):
        d_p = d * d / (xp[0] * N_COINS)
        d_p = d_p * d / (xp[1] * N_COINS)
        d_prev = d
        d = (ann * s + d_p * N_COINS) * d / ((ann - 1) * d + (N_COINS + 1) * d_p)
        if abs(d - d_prev) <= TOLERANCE:
            return SolverResult(value=d, iterations=i + 1, converged=True)

    logger.warning("Invariant did not converge: xp=%s A=%s D=%s", list(xp), amp, d)
    return SolverResult(value=d, iterations=MAX_ITERATIONS, converged=False)


def solve_output_balance(
    i: int, j: int, x_new: float, xp: Sequence[float], amp: float
) -> SolverResult:
    """Find the balance of coin j that keeps D fixed once coin i holds x_new.

    Solves y² + (b - D)·y = c iteratively, with
    c = D^3 / (n^n · x_new · A·n^n) and b = x_new + D / (A·n^n).
    """
    if i == j or {i, j} != {0, 1}:
        raise ValueError(f"invalid coin indices i={i}, j={j}")

    invariant = compute_invariant(xp, amp)
    d = invariant.value
    ann = amp * N_COINS ** N_COINS

    c = d * d / (x_new * N_COINS)
    c = c * d / (N_COINS * ann)
    b = x_new + d / ann

    y = d
    for k in range(MAX_ITERATIONS):
        y_prev = y
        y = (y * y + c) / (2 * y + b - d)
        if abs(y - y_prev) <= TOLERANCE:
            return SolverResult(
                value=y, iterations=k + 1, converged=invariant.converged
            )

    logger.warning(
        "Output balance did not converge: x_new=%s xp=%s A=%s y=%s",
        x_new, list(xp), amp, y,
    )
    return SolverResult(value=y, iterations=MAX_ITERATIONS, converged=False)


def quote_curve_output(
    amount_in: float,
    reserve_in: float,
    reserve_out: float,
    amp: float,
    fee: float,
    strict: bool = False,
) -> float:
    """Net output of a StableSwap trade, fee taken from the gross output.

    Args:
        amount_in: Input amount (normalized units)
        reserve_in: Input-side reserve (normalized)
        reserve_out: Output-side reserve (normalized)
        amp: Amplification coefficient
        fee: Fee fraction in [0, 1)
        strict: Raise ConvergenceError instead of using an unconverged estimate

    Returns:
        Output amount after fees (normalized units)
    """
    if amount_in <= 0:
        return 0.0

    result = solve_output_balance(0, 1, reserve_in + amount_in, [reserve_in, reserve_out], amp)
    if strict and not result.converged:
        raise ConvergenceError(
            f"StableSwap solve did not converge (amount_in={amount_in}, A={amp})"
        )
    return (reserve_out - result.value) * (1 - fee)


def quote_constant_product_output(
    amount_in: float, reserve_in: float, reserve_out: float, fee: float
) -> float:
    """Uniswap V2 output with the fee taken on input: γ = 1 - f."""
    if amount_in <= 0:
        return 0.0
    amount_in_with_fee = amount_in * (1 - fee)
    return amount_in_with_fee * reserve_out / (reserve_in + amount_in_with_fee)
