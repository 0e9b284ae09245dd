"""Market maker model interface shared by all pool variants."""

from abc import ABC, abstractmethod

from fx_amm_backtest.core.trade import ModelKind, ModelState, SwapDirection


class DegeneratePoolError(ArithmeticError):
    """A pool was asked to quote against a non-positive reserve.

    This means the configuration (amplification bounds, trade sizes) is too
    aggressive for the pool; the run cannot continue meaningfully.
    """


class MarketMakerModel(ABC):
    """Abstract base class for two-asset pools.

    Token A is the valuation currency and token B is priced in A through the
    reference price (B per A). Every hook the simulation driver calls is
    declared here; variants that have no use for a hook inherit the no-op.
    """

    kind: ModelKind
    can_halt: bool = False

    def __init__(self, name: str, reserve_a: float, reserve_b: float, fee: float):
        self.name = name
        self.reserve_a = reserve_a
        self.reserve_b = reserve_b
        self.fee = fee
        self.initial_reserve_a = reserve_a
        self.initial_reserve_b = reserve_b
        self.halt_count = 0

    @abstractmethod
    def swap(self, amount_in: float, direction: SwapDirection) -> float:
        """Execute a swap and return the amount paid out.

        Args:
            amount_in: Raw amount of the input token
            direction: Which token the trader pays

        Returns:
            Output amount, or 0.0 if the trade was rejected
        """

    @abstractmethod
    def snapshot(self) -> ModelState:
        """Return the current reserves and parameters in effect."""

    def valuation(self, reference_price: float) -> float:
        """Value of the pool's reserves in units of A."""
        return self._value_of(self.reserve_a, self.reserve_b, reference_price)

    def hold_value(self, reference_price: float) -> float:
        """Value of the initial reserves had they simply been held."""
        return self._value_of(self.initial_reserve_a, self.initial_reserve_b, reference_price)

    def _value_of(self, amount_a: float, amount_b: float, reference_price: float) -> float:
        return amount_a + amount_b / reference_price

    def update_reference(self, price: float) -> None:
        """Receive the latest external reference price."""

    def update_internal_scale(self) -> None:
        """Adapt any internal price scale from the pool's own reserves."""

    def target_price(self, reference_price: float) -> float:
        """Price arbitrageurs push this pool towards."""
        return reference_price

    def input_amount(
        self, notional: float, direction: SwapDirection, reference_price: float
    ) -> float:
        """Convert a notional in A into a raw input amount for the given direction."""
        if direction.pays_a:
            return notional
        return notional * reference_price

    def trade_value(
        self, amount_in: float, direction: SwapDirection, reference_price: float
    ) -> float:
        """Value in A of a raw input amount."""
        if direction.pays_a:
            return amount_in
        return amount_in / reference_price

    @property
    def spot_price(self) -> float:
        """Implied pool price (B per A)."""
        return self.reserve_b / self.reserve_a

    def _check_reserves(self) -> None:
        if self.reserve_a <= 0 or self.reserve_b <= 0:
            raise DegeneratePoolError(
                f"{self.name}: reserves exhausted "
                f"(reserve_a={self.reserve_a}, reserve_b={self.reserve_b})"
            )

    def _apply(self, amount_in: float, amount_out: float, direction: SwapDirection) -> None:
        if direction.pays_a:
            self.reserve_a += amount_in
            self.reserve_b -= amount_out
        else:
            self.reserve_b += amount_in
            self.reserve_a -= amount_out
