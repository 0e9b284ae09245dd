"""GBM reference price path tests."""

import numpy as np
import pytest

from fx_amm_backtest.market.price_process import GBMPriceProcess


def test_path_length_and_indexing():
    process = GBMPriceProcess(initial_price=1400.0, steps_per_day=4, seed=1)
    path = process.generate_path(10)
    assert len(path) == 10 * 4 + 1
    assert [p.step for p in path] == list(range(41))
    assert path[0].day == 0
    assert path[3].day == 0
    assert path[4].day == 1
    assert path[-1].day == 10


def test_path_starts_at_initial_price():
    path = GBMPriceProcess(initial_price=1400.0, seed=1).generate_path(2)
    assert path[0].price == 1400.0


def test_zero_days_yields_single_sample():
    path = GBMPriceProcess(initial_price=1400.0, seed=1).generate_path(0)
    assert len(path) == 1


def test_no_volatility_no_drift_is_constant():
    path = GBMPriceProcess(initial_price=1400.0, volatility=0.0, drift=0.0, seed=1).generate_path(5)
    assert all(p.price == pytest.approx(1400.0) for p in path)


def test_prices_stay_positive():
    path = GBMPriceProcess(initial_price=1400.0, volatility=0.8, seed=3).generate_path(60)
    assert all(p.price > 0 for p in path)


def test_same_seed_same_path():
    first = GBMPriceProcess(initial_price=1400.0, seed=7).generate_path(20)
    second = GBMPriceProcess(initial_price=1400.0, seed=7).generate_path(20)
    assert first == second


def test_injected_generator_matches_seed():
    seeded = GBMPriceProcess(initial_price=1400.0, seed=7).generate_path(5)
    injected = GBMPriceProcess(initial_price=1400.0, rng=np.random.default_rng(7)).generate_path(5)
    assert seeded == injected


def test_reset_restarts_path():
    process = GBMPriceProcess(initial_price=1400.0, seed=7)
    first = process.generate_path(3)
    process.reset(seed=7)
    assert process.current_price == 1400.0
    assert process.generate_path(3) == first


def test_step_volatility_is_annualized():
    """Log returns have standard deviation sigma * sqrt(dt)."""
    process = GBMPriceProcess(initial_price=1400.0, volatility=0.10, steps_per_day=24, seed=11)
    prices = np.array([p.price for p in process.generate_path(365)])
    log_returns = np.diff(np.log(prices))
    expected = 0.10 * np.sqrt(1 / (365 * 24))
    assert np.std(log_returns) == pytest.approx(expected, rel=0.05)
