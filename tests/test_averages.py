import math

import numpy as np
import pytest

from asian_impact import NumericDegeneracyError
from asian_impact.numerics.averages import (
    arithmetic_mean,
    geometric_mean,
    spread_parameter,
)


def test_means_of_a_single_trajectory_are_floats():
    g = geometric_mean([1.0, 4.0, 16.0])
    a = arithmetic_mean([1.0, 4.0, 16.0])

    assert isinstance(g, float)
    assert g == pytest.approx(4.0)
    assert a == pytest.approx(7.0)


def test_means_reduce_over_last_axis():
    S = np.array([[100.0, 120.0, 144.0], [100.0, 80.0, 64.0]])

    np.testing.assert_allclose(geometric_mean(S), [120.0, 80.0])
    np.testing.assert_allclose(arithmetic_mean(S), [364.0 / 3.0, 244.0 / 3.0])


def test_geometric_mean_does_not_overflow_on_long_paths():
    prices = np.full(2_000, 1e200)
    assert geometric_mean(prices) == pytest.approx(1e200)


def test_am_gm_and_reverse_am_gm(rng):
    S = rng(3).uniform(50.0, 150.0, size=(500, 11))
    A = arithmetic_mean(S)
    G = geometric_mean(S)
    rho = spread_parameter(S.min(axis=1), S.max(axis=1))

    assert np.all(A >= G * (1.0 - 1e-12))
    assert np.all(A <= rho * G * (1.0 + 1e-12))
    assert np.all(rho >= 1.0)


def test_spread_parameter_values():
    assert spread_parameter(5.0, 5.0) == 1.0
    assert spread_parameter(0.5, 2.0) == pytest.approx(math.exp(1.5**2 / 4.0))
    assert spread_parameter(1.0, 4.0) == pytest.approx(math.exp(9.0 / 16.0))


def test_spread_parameter_overflows_to_inf():
    assert math.isinf(spread_parameter(1e-300, 1e300))
    assert math.isinf(spread_parameter(1.0, math.inf))


@pytest.mark.parametrize(
    "prices",
    [[], [100.0, 0.0, 90.0], [100.0, -5.0], [100.0, float("nan")], [100.0, math.inf]],
)
def test_degenerate_prices_raise(prices):
    with pytest.raises(NumericDegeneracyError):
        geometric_mean(prices)
