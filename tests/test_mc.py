import numpy as np
import pytest

from asian_impact import MCConfig, OptionType, RandomConfig, arithmetic_bounds, mc_arithmetic_asian
from asian_impact.models.bs import geometric_asian_price
from asian_impact.pricers.mc import (
    mc_arithmetic_asian_binomial,
    mc_arithmetic_asian_gbm,
    mc_arithmetic_asian_impact,
)


def test_impact_mc_lies_within_bounds(make_params):
    """The arithmetic price must sit between the geometric and path-specific bounds."""
    p = make_params(n=8)
    b = arithmetic_bounds(p, path_specific=True)
    mc, se = mc_arithmetic_asian(p, cfg=MCConfig(n_paths=40_000, random=RandomConfig(seed=1)))

    assert se > 0.0
    assert b.lower_bound - 3.0 * se <= mc <= b.upper_bound_path_specific + 3.0 * se


@pytest.mark.parametrize("kind", [OptionType.CALL, OptionType.PUT])
def test_impact_mc_matches_exact_arithmetic_price(make_params, brute_force_price, kind):
    p = make_params(n=8, kind=kind)
    exact = brute_force_price(p)
    mc, se = mc_arithmetic_asian(p, cfg=MCConfig(n_paths=40_000, random=RandomConfig(seed=6)))

    assert se > 0.0
    assert abs(mc - exact) <= 4.0 * se + 1e-3


def test_arithmetic_call_exceeds_geometric_call(make_params):
    p = make_params(n=8)
    b = arithmetic_bounds(p)
    mc, se = mc_arithmetic_asian(p, cfg=MCConfig(n_paths=40_000, random=RandomConfig(seed=2)))
    assert mc - 3.0 * se > b.lower_bound


def test_control_variate_reduces_standard_error(make_params):
    p = make_params(n=8)
    cfg = MCConfig(n_paths=20_000, random=RandomConfig(seed=5))

    cv, se_cv = mc_arithmetic_asian(p, cfg=cfg, control=True)
    plain, se_plain = mc_arithmetic_asian(p, cfg=cfg, control=False)

    assert se_cv < 0.5 * se_plain
    assert abs(cv - plain) <= 4.0 * se_plain


def test_mc_is_reproducible_for_a_seed(base_params):
    cfg = MCConfig(n_paths=5_000, random=RandomConfig(seed=11, rng_type="mt19937"))
    assert mc_arithmetic_asian_impact(**base_params, cfg=cfg) == mc_arithmetic_asian_impact(
        **base_params, cfg=cfg
    )


def test_antithetic_estimate(make_params):
    p = make_params(n=6)
    b = arithmetic_bounds(p, path_specific=True)
    cfg = MCConfig(n_paths=20_000, antithetic=True, random=RandomConfig(seed=3))
    mc, se = mc_arithmetic_asian(p, cfg=cfg)

    assert se > 0.0
    assert b.lower_bound - 3.0 * se <= mc <= b.upper_bound_path_specific + 3.0 * se


def test_gbm_arithmetic_asian_exceeds_geometric():
    geo = geometric_asian_price(
        spot=100.0, strike=100.0, r=0.05, sigma=0.2, tau=1.0, n_fixings=12
    )
    mc, se = mc_arithmetic_asian_gbm(
        100.0, 100.0, 0.05, 0.2, 1.0, 12, cfg=MCConfig(n_paths=50_000)
    )

    assert se > 0.0
    assert mc - 3.0 * se > geo
    assert mc < geo + 1.0


def test_gbm_control_variate_agrees_with_plain_estimate():
    cfg = MCConfig(n_paths=40_000, random=RandomConfig(seed=9))
    cv, se_cv = mc_arithmetic_asian_gbm(100.0, 95.0, 0.03, 0.3, 1.0, 10, "put", cfg=cfg)
    plain, se_plain = mc_arithmetic_asian_gbm(
        100.0, 95.0, 0.03, 0.3, 1.0, 10, "put", cfg=cfg, control=False
    )

    assert se_cv < se_plain
    assert abs(cv - plain) <= 4.0 * se_plain


def test_binomial_mapped_gbm_estimate_is_finite():
    mc, se = mc_arithmetic_asian_binomial(
        100.0, 100.0, 1.05, 1.2, 0.8, 6, cfg=MCConfig(n_paths=10_000)
    )
    assert np.isfinite(mc)
    assert se > 0.0


def test_mc_config_validation():
    with pytest.raises(ValueError):
        MCConfig(n_paths=1)
    with pytest.raises(ValueError):
        MCConfig(n_paths=1_001, antithetic=True)
