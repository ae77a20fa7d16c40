"""Pytest helpers for the asian_impact library."""

from __future__ import annotations

import numpy as np
import pytest

from asian_impact.models.impact_binomial import compute_effective_factors
from asian_impact.numerics.averages import arithmetic_mean, geometric_mean
from asian_impact.numerics.paths import build_trajectory, iter_paths
from asian_impact.payoffs import payoff
from asian_impact.types import BinomialParameters, OptionType


@pytest.fixture
def base_params() -> dict:
    """Reference parameterisation (5% gross rate, 10% impact, three steps)."""
    return {
        "S0": 100.0,
        "K": 100.0,
        "r": 1.05,
        "u": 1.2,
        "d": 0.8,
        "lam": 0.1,
        "v_u": 1.0,
        "v_d": 1.0,
        "n": 3,
    }


@pytest.fixture
def make_params(base_params):
    """Factory fixture for BinomialParameters, overriding the base case."""

    def _make(*, kind: OptionType = OptionType.CALL, **overrides) -> BinomialParameters:
        kwargs = {**base_params, **overrides}
        return BinomialParameters(option_type=kind, **kwargs)

    return _make


@pytest.fixture
def rng():
    """Seeded RNG factory."""

    def _rng(seed: int) -> np.random.Generator:
        return np.random.default_rng(seed)

    return _rng


@pytest.fixture
def brute_force_price():
    """Asian price by looping over every path one at a time (small n only)."""

    def _price(p: BinomialParameters, *, average: str = "arithmetic") -> float:
        f = compute_effective_factors(p.r, p.u, p.d, p.lam, p.v_u, p.v_d)
        mean = arithmetic_mean if average == "arithmetic" else geometric_mean
        total = 0.0
        for path in iter_paths(p.n):
            traj = build_trajectory(p.S0, path, f.u_tilde, f.d_tilde)
            n_up = sum(path)
            prob = f.p_eff**n_up * (1.0 - f.p_eff) ** (p.n - n_up)
            total += prob * float(payoff(mean(traj), p.K, p.option_type))
        return total * p.r ** (-p.n)

    return _price
