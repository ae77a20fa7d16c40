from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

import pandas as pd

from ..config import EnumerationConfig, MCConfig, SamplingConfig
from ..models.impact_binomial import compute_effective_factors
from ..pricers.black_scholes import (
    price_black_scholes_binomial,
    price_kemna_vorst_binomial,
)
from ..pricers.bounds import arithmetic_bounds
from ..pricers.mc import mc_arithmetic_asian
from ..pricers.tree import european_impact_price, geometric_asian_price
from ..types import BinomialParameters


def _with_params(base: BinomialParameters, **changes: float | int) -> BinomialParameters:
    """Modified copy of `base`; re-validates on construction."""
    return replace(base, **changes)


# -----------------------------
# Case generation
# -----------------------------


def default_cases(base: BinomialParameters) -> list[tuple[str, BinomialParameters]]:
    """Small curated set of regimes for demos."""
    return [
        ("ATM base", base),
        ("ITM (K=0.8 S0)", _with_params(base, K=0.8 * base.S0)),
        ("OTM (K=1.2 S0)", _with_params(base, K=1.2 * base.S0)),
        ("No impact", _with_params(base, lam=0.0, v_u=0.0, v_d=0.0)),
        ("Strong impact", _with_params(base, lam=2.0 * base.lam + 0.1)),
        ("Up-only volume", _with_params(base, v_d=0.0)),
        ("Down-only volume", _with_params(base, v_u=0.0)),
        ("Low spread (u=1.1, d=0.9)", _with_params(base, u=1.1, d=0.9)),
    ]


# -----------------------------
# Tables
# -----------------------------


def bounds_vs_mc_table(
    base: BinomialParameters,
    n_values: Iterable[int] = (2, 4, 6, 8, 10, 12),
    *,
    mc_cfg: MCConfig | None = None,
    sampling: SamplingConfig | None = None,
    enum_cfg: EnumerationConfig | None = None,
) -> pd.DataFrame:
    """
    Arithmetic bounds against a control-variate MC estimate, one row per n.

    ``within_bounds`` checks ``lower - 3 se <= mc <= upper + 3 se`` against the
    path-specific upper bound. `base` must be a call.
    """
    mc_cfg = mc_cfg or MCConfig(n_paths=50_000)
    rows: list[dict[str, object]] = []

    for n in n_values:
        p = _with_params(base, n=int(n))
        b = arithmetic_bounds(p, path_specific=True, sampling=sampling, cfg=enum_cfg)
        mc, se = mc_arithmetic_asian(p, cfg=mc_cfg, enum_cfg=enum_cfg)
        upper = b.upper_bound
        rows.append(
            {
                "n": int(n),
                "n_paths": p.n_paths,
                "lower": b.lower_bound,
                "upper_path": b.upper_bound_path_specific,
                "upper_global": b.upper_bound_global,
                "rho_star": b.rho_star,
                "mc": mc,
                "mc_se": se,
                "within_bounds": bool(
                    b.lower_bound - 3.0 * se <= mc <= upper + 3.0 * se
                ),
                "n_paths_sampled": b.n_paths_sampled,
            }
        )

    return pd.DataFrame(rows).set_index("n")


def price_impact_table(
    base: BinomialParameters,
    lambdas: Iterable[float] = (0.0, 0.05, 0.1, 0.2, 0.3),
    *,
    enum_cfg: EnumerationConfig | None = None,
) -> pd.DataFrame:
    """Geometric Asian and European prices as the impact coefficient grows."""
    rows: list[dict[str, float]] = []
    for lam in lambdas:
        p = _with_params(base, lam=float(lam))
        f = compute_effective_factors(p.r, p.u, p.d, p.lam, p.v_u, p.v_d)
        rows.append(
            {
                "lambda": float(lam),
                "u_tilde": f.u_tilde,
                "d_tilde": f.d_tilde,
                "p_eff": f.p_eff,
                "geometric_asian": geometric_asian_price(p, cfg=enum_cfg),
                "european": european_impact_price(p),
            }
        )
    return pd.DataFrame(rows).set_index("lambda")


def kemna_vorst_table(
    base: BinomialParameters,
    n_values: Iterable[int] = (2, 4, 6, 8, 10, 12),
    *,
    enum_cfg: EnumerationConfig | None = None,
) -> pd.DataFrame:
    """
    Zero-impact geometric binomial prices against GBM benchmarks.

    ``base.r`` is read as the gross rate over the whole horizon; the tree uses
    the per-step rate ``r ** (1/n)``. Requires ``u > 1 > d``.
    """
    rows: list[dict[str, float]] = []
    for n in n_values:
        n = int(n)
        p = _with_params(base, n=n, r=base.r ** (1.0 / n), lam=0.0, v_u=0.0, v_d=0.0)
        binom = geometric_asian_price(p, cfg=enum_cfg)
        args = (base.S0, base.K, base.r, base.u, base.d, n, base.option_type)
        kv_discrete = price_kemna_vorst_binomial(*args, discrete=True)
        rows.append(
            {
                "n": n,
                "binomial_geometric": binom,
                "kemna_vorst_discrete": kv_discrete,
                "kemna_vorst_continuous": price_kemna_vorst_binomial(*args),
                "black_scholes": price_black_scholes_binomial(*args),
                "abs_error": abs(binom - kv_discrete),
            }
        )
    return pd.DataFrame(rows).set_index("n")
