"""Dynamic amplification decay tests."""

import math

import pytest

from fx_amm_backtest.core.amplification import compute_effective_amplification


def test_zero_deviation_gives_max_amplification():
    result = compute_effective_amplification(1400, 1400, 500, 10, 0.01)
    assert result.amplification == 500
    assert result.deviation == 0


def test_amplification_strictly_decreases_with_deviation():
    multipliers = [1.0, 1.0025, 1.005, 1.01, 1.015, 1.02]
    values = [
        compute_effective_amplification(1400 * m, 1400, 500, 10, 0.01).amplification
        for m in multipliers
    ]
    for before, after in zip(values, values[1:]):
        assert after < before
    assert all(10 < v <= 500 for v in values)


def test_approaches_min_amplification():
    result = compute_effective_amplification(1400 * 1.2, 1400, 500, 10, 0.01)
    assert result.amplification == pytest.approx(10)
    assert result.amplification >= 10


def test_deviation_is_absolute_log_ratio():
    above = compute_effective_amplification(1400 * 1.01, 1400, 500, 10, 0.01)
    below = compute_effective_amplification(1400 / 1.01, 1400, 500, 10, 0.01)
    assert above.deviation == pytest.approx(math.log(1.01))
    assert below.deviation == pytest.approx(above.deviation)
    assert below.amplification == pytest.approx(above.amplification)


def test_one_sensitivity_deviation_matches_gaussian():
    # At δ = sensitivity the excess amplification is scaled by 1/e
    result = compute_effective_amplification(1400 * math.exp(0.01), 1400, 500, 10, 0.01)
    assert result.amplification == pytest.approx(10 + 490 / math.e)
