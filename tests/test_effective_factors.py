import math

import pytest

from asian_impact import (
    ArbitrageViolationError,
    InvalidParameterError,
    check_no_arbitrage,
    compute_effective_factors,
)


def test_effective_factors_reference_values():
    f = compute_effective_factors(1.05, 1.2, 0.8, 0.1, 1.0, 1.0)

    assert f.u_tilde == pytest.approx(1.2 * math.exp(0.1), rel=1e-15)
    assert f.d_tilde == pytest.approx(0.8 * math.exp(-0.1), rel=1e-15)
    assert f.u_tilde == pytest.approx(1.32621, abs=1e-5)
    assert f.d_tilde == pytest.approx(0.723870, abs=1e-6)
    assert f.p_eff == pytest.approx((1.05 - f.d_tilde) / (f.u_tilde - f.d_tilde))
    assert 0.0 < f.p_eff < 1.0


def test_zero_impact_reduces_to_crr_exactly():
    """Without impact the factors are the plain CRR ones, bit for bit."""
    f = compute_effective_factors(1.05, 1.2, 0.8, 0.0, 0.0, 0.0)

    assert f.u_tilde == 1.2
    assert f.d_tilde == 0.8
    assert f.p_eff == (1.05 - 0.8) / (1.2 - 0.8)


def test_zero_lambda_ignores_volumes():
    f = compute_effective_factors(1.05, 1.2, 0.8, 0.0, 5.0, 3.0)
    assert (f.u_tilde, f.d_tilde) == (1.2, 0.8)


def test_effective_factors_are_deterministic():
    args = (1.05, 1.2, 0.8, 0.1, 1.0, 1.0)
    assert compute_effective_factors(*args) == compute_effective_factors(*args)


def test_impact_widens_the_tree():
    f = compute_effective_factors(1.05, 1.2, 0.8, 0.3, 2.0, 0.5)
    assert f.u_tilde > 1.2
    assert f.d_tilde < 0.8


def test_rate_above_u_tilde_raises_with_values():
    with pytest.raises(ArbitrageViolationError, match=r"r=2 >= u_tilde=1\.32621") as exc:
        compute_effective_factors(2.0, 1.2, 0.8, 0.1, 1.0, 1.0)

    err = exc.value
    assert (err.lhs_name, err.rhs_name) == ("r", "u_tilde")
    assert err.lhs == 2.0
    assert err.rhs == pytest.approx(1.2 * math.exp(0.1))


def test_rate_below_d_tilde_raises_with_values():
    with pytest.raises(ArbitrageViolationError, match=r"d_tilde=0\.72387 >= r=0\.7"):
        compute_effective_factors(0.7, 1.2, 0.8, 0.1, 1.0, 1.0)


def test_rate_equal_to_d_tilde_is_arbitrage():
    with pytest.raises(ArbitrageViolationError):
        compute_effective_factors(0.8, 1.2, 0.8, 0.0, 0.0, 0.0)


def test_arbitrage_error_is_a_value_error():
    with pytest.raises(ValueError):
        compute_effective_factors(2.0, 1.2, 0.8, 0.1, 1.0, 1.0)


def test_impact_can_restore_no_arbitrage():
    """A rate above u is fine once impact pushes u_tilde past it."""
    assert not check_no_arbitrage(1.25, 1.2, 0.8, 0.0, 0.0, 0.0)
    assert check_no_arbitrage(1.25, 1.2, 0.8, 0.1, 1.0, 1.0)


def test_check_no_arbitrage_flags_violation():
    assert check_no_arbitrage(1.05, 1.2, 0.8, 0.1, 1.0, 1.0)
    assert not check_no_arbitrage(2.0, 1.2, 0.8, 0.1, 1.0, 1.0)


def test_check_no_arbitrage_still_raises_on_bad_domain():
    with pytest.raises(InvalidParameterError):
        check_no_arbitrage(1.05, 1.2, 0.8, -0.1, 1.0, 1.0)


@pytest.mark.parametrize(
    "r,u,d,lam,v_u,v_d",
    [
        (0.0, 1.2, 0.8, 0.1, 1.0, 1.0),
        (1.05, 0.0, 0.8, 0.1, 1.0, 1.0),
        (1.05, 1.2, 0.0, 0.1, 1.0, 1.0),
        (1.05, 1.2, 0.8, -0.1, 1.0, 1.0),
        (1.05, 1.2, 0.8, 0.1, -1.0, 1.0),
        (1.05, 1.2, 0.8, 0.1, 1.0, -1.0),
        (1.05, 0.8, 1.2, 0.1, 1.0, 1.0),
        (1.05, 1.0, 1.0, 0.1, 1.0, 1.0),
        (float("nan"), 1.2, 0.8, 0.1, 1.0, 1.0),
    ],
)
def test_invalid_factor_inputs_raise(r, u, d, lam, v_u, v_d):
    with pytest.raises(InvalidParameterError):
        compute_effective_factors(r, u, d, lam, v_u, v_d)


def test_overflowing_u_tilde_is_rejected():
    with pytest.raises(InvalidParameterError, match="degenerate"):
        compute_effective_factors(1.05, 1.2, 0.8, 1000.0, 1.0, 0.0)
