"""Historical reference prices from a daily OHLC CSV file.

Expected columns, in order: date, open, high, low, close[, volume]. The first
row is a header and is skipped. Daily bars are expanded into intraday steps
that hit the open, high, low and close of each day.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np
import pandas as pd

from fx_amm_backtest.core.trade import PricePoint

logger = logging.getLogger(__name__)

OHLC_COLUMNS = ["open", "high", "low", "close"]
NOISE_FRACTION = 0.05  # Of the day's high-low range


def load_daily_ohlc(path: Union[str, Path]) -> pd.DataFrame:
    """Read daily bars, dropping rows with missing or unparseable fields.

    Returns:
        DataFrame indexed by date (sorted, unique) with open/high/low/close
    """
    raw = pd.read_csv(path, header=0, dtype=str, skip_blank_lines=True)
    if raw.shape[1] < 5:
        raise ValueError(f"{path}: expected at least 5 columns, got {raw.shape[1]}")

    frame = raw.iloc[:, :5].copy()
    frame.columns = ["date"] + OHLC_COLUMNS
    frame["date"] = pd.to_datetime(frame["date"].str.strip(), errors="coerce")
    for column in OHLC_COLUMNS:
        frame[column] = pd.to_numeric(frame[column], errors="coerce")

    n_rows = len(frame)
    frame = frame.dropna()
    if len(frame) < n_rows:
        logger.info("%s: skipped %d incomplete rows", path, n_rows - len(frame))
    if frame.empty:
        raise ValueError(f"{path}: no usable OHLC rows")

    frame = frame.drop_duplicates(subset="date", keep="last").sort_values("date")
    return frame.set_index("date")


def fill_missing_days(daily: pd.DataFrame) -> pd.DataFrame:
    """Insert calendar days absent from the data as flat bars at the previous close."""
    if daily.empty:
        return daily
    calendar = pd.date_range(daily.index[0], daily.index[-1], freq="D")
    filled = daily.reindex(calendar)
    previous_close = filled["close"].ffill()
    for column in OHLC_COLUMNS:
        filled[column] = filled[column].fillna(previous_close)
    filled.index.name = "date"
    return filled


def expand_to_intraday(
    daily: pd.DataFrame,
    rng: Optional[np.random.Generator] = None,
    steps_per_day: int = 24,
) -> list[PricePoint]:
    """Synthesize intraday steps that fit each daily bar.

    Open is pinned to the first step and close to the last; high and low land
    on distinct random interior steps. Steps in between are linearly
    interpolated with a little noise and clipped into [low, high].
    """
    if steps_per_day < 4:
        raise ValueError(f"steps_per_day must be >= 4 to place OHLC anchors, got {steps_per_day}")
    rng = rng if rng is not None else np.random.default_rng()

    last = steps_per_day - 1
    hours = np.arange(steps_per_day)
    points: list[PricePoint] = []

    for day_index, bar in enumerate(daily.itertuples(index=False)):
        h_high = int(rng.integers(1, last))
        h_low = int(rng.integers(1, last))
        if h_high == h_low:
            h_high = h_high + 1 if h_high < steps_per_day // 2 else h_high - 1

        anchors = sorted([(0, bar.open), (last, bar.close), (h_high, bar.high), (h_low, bar.low)])
        anchor_hours = [h for h, _ in anchors]
        prices = np.interp(hours, anchor_hours, [p for _, p in anchors])

        day_range = bar.high - bar.low
        noise = (rng.random(steps_per_day) - 0.5) * (day_range * NOISE_FRACTION)
        noise[anchor_hours] = 0.0
        prices = np.clip(prices + noise, bar.low, bar.high)

        for hour, price in zip(hours, prices):
            points.append(
                PricePoint(step=day_index * steps_per_day + int(hour), day=day_index, price=float(price))
            )

    return points


def load_historical_path(
    path: Union[str, Path],
    rng: Optional[np.random.Generator] = None,
    steps_per_day: int = 24,
) -> list[PricePoint]:
    """Load, gap-fill and expand a daily OHLC file into a reference price path."""
    daily = fill_missing_days(load_daily_ohlc(path))
    logger.info("Loaded %d daily bars from %s", len(daily), path)
    return expand_to_intraday(daily, rng, steps_per_day)
