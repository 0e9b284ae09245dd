"""Per-step and per-model backtest results."""

from dataclasses import asdict, dataclass, field
from typing import Sequence

import pandas as pd

from fx_amm_backtest.core.trade import PricePoint


@dataclass(frozen=True)
class StepRecord:
    """Observation of one model at one step."""
    step: int
    day: int
    price: float
    valuation: float        # Pool value in A
    hold_value: float       # Value of the initial reserves if simply held
    il_pct: float           # (valuation / hold_value - 1) * 100
    cumulative_fees: float
    halted: bool
    reserve_a: float
    reserve_b: float


@dataclass
class ModelStats:
    """Running totals and history for one model across a run."""
    name: str
    cumulative_fees: float = 0.0
    cumulative_volume: float = 0.0
    halt_count: int = 0
    history: list[StepRecord] = field(default_factory=list)

    def record(self, step: StepRecord) -> None:
        self.history.append(step)

    @property
    def final_il_pct(self) -> float:
        if not self.history:
            return 0.0
        return self.history[-1].il_pct

    def to_frame(self) -> pd.DataFrame:
        """History as a DataFrame indexed by step."""
        columns = list(StepRecord.__dataclass_fields__)
        frame = pd.DataFrame([asdict(r) for r in self.history], columns=columns)
        return frame.set_index("step")


@dataclass
class BacktestResult:
    """Statistics for every model plus the price path they were run on."""
    stats: list[ModelStats]
    prices: Sequence[PricePoint]

    def by_name(self, name: str) -> ModelStats:
        for stat in self.stats:
            if stat.name == name:
                return stat
        raise KeyError(name)

    def summary(self) -> pd.DataFrame:
        """One row per model with the headline totals."""
        return pd.DataFrame(
            [
                {
                    "name": s.name,
                    "cumulative_fees": s.cumulative_fees,
                    "cumulative_volume": s.cumulative_volume,
                    "halt_count": s.halt_count,
                    "final_il_pct": s.final_il_pct,
                }
                for s in self.stats
            ]
        ).set_index("name")
