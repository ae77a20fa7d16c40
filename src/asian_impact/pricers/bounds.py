"""Lower and upper bounds for the arithmetic-average Asian option.

Since ``A_n >= G_n`` on every path (AM-GM), the geometric price is a lower
bound. For prices in ``[m, M]`` the reverse inequality
``A <= exp((M - m)^2 / (4 m M)) G`` gives the upper bounds: with the tree-wide
worst case ``m = d_tilde^n, M = u_tilde^n`` (global, closed form) or with each
path's own realised extremes (path-specific, enumerated or sampled).
"""

from __future__ import annotations

import logging
import math
import warnings

import numpy as np
from joblib import Parallel, delayed

from ..config import EnumerationConfig, RandomConfig, SamplingConfig
from ..exceptions import InvalidParameterError, SampleSizeWarning
from ..models.impact_binomial import ImpactBinomialModel
from ..models.stochastic_processes import make_rng
from ..numerics.averages import spread_parameter
from ..numerics.paths import chunk_ranges
from ..payoffs import make_average_payoff
from ..types import BinomialParameters, BoundsResult, OptionType
from .tree import PathSums, enumerate_paths, evaluate_codes

logger = logging.getLogger(__name__)

# Fixed number of strata for sampling so the draw does not depend on n_jobs
SAMPLE_STRATA = 8


def global_spread(model: ImpactBinomialModel) -> float:
    """``rho* = exp((u~^n - d~^n)^2 / (4 u~^n d~^n))``; may be ``inf``."""
    n = model.n_steps
    with np.errstate(over="ignore", under="ignore"):
        u_n = np.float64(model.u_tilde) ** n
        d_n = np.float64(model.d_tilde) ** n
    return float(spread_parameter(d_n, u_n))


def sample_size(n_paths: int, sampling: SamplingConfig) -> int:
    return min(sampling.max_sample_size, math.ceil(sampling.sample_fraction * n_paths))


def _allocate(m: int, ranges: list[tuple[int, int]], n_paths: int) -> list[int]:
    sizes = [(m * (stop - start)) // n_paths for start, stop in ranges]
    for i in range(m - sum(sizes)):
        sizes[i % len(sizes)] += 1
    return sizes


def _sample_stratum(
    model: ImpactBinomialModel,
    n_paths: int,
    start: int,
    stop: int,
    size: int,
    random: RandomConfig,
    seed_seq: np.random.SeedSequence,
) -> PathSums:
    if size == 0:
        return PathSums()
    rng = make_rng(random, seed_seq)
    idx = np.sort(rng.choice(stop - start, size=size, replace=False)) + start
    codes = (n_paths - 1 - idx).astype(np.int64)
    payoff = make_average_payoff(model.params.option_type, K=model.params.K)
    return evaluate_codes(model, codes, payoff, with_spread=True)


def sample_path_spreads(
    model: ImpactBinomialModel,
    sampling: SamplingConfig,
    *,
    n_jobs: int = 1,
) -> PathSums:
    """Sample distinct paths uniformly and accumulate their weighted spreads.

    The path index space is cut into :data:`SAMPLE_STRATA` contiguous strata;
    each stratum receives a proportional share of the draws and its own
    generator spawned from the configured seed.
    """
    n_paths = 1 << model.n_steps
    m = sample_size(n_paths, sampling)
    n_strata = min(SAMPLE_STRATA, n_paths)
    ranges = chunk_ranges(n_paths, math.ceil(n_paths / n_strata))
    sizes = _allocate(m, ranges, n_paths)
    children = np.random.SeedSequence(sampling.random.seed).spawn(len(ranges))
    logger.debug(
        "sampling %d of %d paths over %d strata (seed=%d)",
        m,
        n_paths,
        len(ranges),
        sampling.random.seed,
    )

    jobs = zip(ranges, sizes, children, strict=True)
    if n_jobs == 1:
        parts = [
            _sample_stratum(model, n_paths, a, b, k, sampling.random, ss)
            for (a, b), k, ss in jobs
        ]
    else:
        parts = Parallel(n_jobs=n_jobs, backend="threading")(
            delayed(_sample_stratum)(model, n_paths, a, b, k, sampling.random, ss)
            for (a, b), k, ss in jobs
        )

    total = PathSums()
    for part in parts:
        total = total + part
    return total


def arithmetic_bounds(
    p: BinomialParameters,
    *,
    path_specific: bool = False,
    sampling: SamplingConfig | None = None,
    cfg: EnumerationConfig | None = None,
) -> BoundsResult:
    """Bounds on the arithmetic Asian price for validated parameters.

    The lower bound is produced by the same enumeration as
    :func:`~asian_impact.pricers.tree.geometric_asian_price` and is identical
    to it for the same `cfg`.

    Only calls are supported: for a put the inequality ``A >= G`` makes the
    geometric price an upper bound, so the bounds below would be inverted.

    Raises
    ------
    InvalidParameterError
        If ``p.option_type`` is not a call.
    """
    if p.option_type != OptionType.CALL:
        raise InvalidParameterError(
            f"Arithmetic bounds require option_type='call'; got {p.option_type.value!r}"
        )

    sampling = sampling or SamplingConfig()
    model = ImpactBinomialModel.from_params(p)
    n_paths = p.n_paths
    exhaustive = path_specific and n_paths <= sampling.max_sample_size

    sums = enumerate_paths(model, cfg=cfg, with_spread=exhaustive)
    disc = model.disc
    lower = sums.payoff * disc
    EQ_G = sums.geo

    rho_star = global_spread(model)
    with np.errstate(over="ignore", invalid="ignore"):
        upper_global = float(lower + (rho_star - 1.0) * disc * EQ_G)

    upper_path: float | None = None
    n_used: int | None = None
    if exhaustive:
        upper_path = lower + disc * sums.spread
        n_used = sums.count
    elif path_specific:
        n_jobs = (cfg or EnumerationConfig()).n_jobs
        sampled = sample_path_spreads(model, sampling, n_jobs=n_jobs)
        n_used = sampled.count
        upper_path = lower + disc * sampled.spread / sampled.mass
        if n_used < sampling.min_reliable_samples:
            warnings.warn(
                SampleSizeWarning(n_used, sampling.min_reliable_samples),
                stacklevel=2,
            )

    return BoundsResult(
        lower_bound=lower,
        upper_bound_global=upper_global,
        rho_star=rho_star,
        EQ_G=EQ_G,
        upper_bound_path_specific=upper_path,
        n_paths_sampled=n_used,
    )


def arithmetic_asian_bounds(
    S0: float,
    K: float,
    r: float,
    u: float,
    d: float,
    lam: float,
    v_u: float,
    v_d: float,
    n: int,
    option_type: OptionType | str = OptionType.CALL,
    path_specific: bool = False,
    max_sample_size: int = 100_000,
    sample_fraction: float = 0.10,
    seed: int = 0,
    *,
    cfg: EnumerationConfig | None = None,
) -> BoundsResult:
    """Lower and upper bounds for the arithmetic Asian option.

    Parameters
    ----------
    S0, K, r, u, d, lam, v_u, v_d, n
        As in :func:`~asian_impact.pricers.tree.price_geometric_asian`.
    option_type : OptionType or {"call"}, default "call"
        Puts are rejected.
    path_specific : bool, default False
        Also compute the path-specific upper bound.
    max_sample_size : int, default 100_000
        Paths are enumerated exhaustively when ``2**n`` fits under this cap,
        otherwise at most this many are sampled.
    sample_fraction : float, default 0.10
        Fraction of ``2**n`` to sample when sampling.
    seed : int, default 0
        Seed of the sampling generator.
    cfg : EnumerationConfig, optional

    Returns
    -------
    BoundsResult

    Raises
    ------
    InvalidParameterError
        For invalid parameters or a put.
    ArbitrageViolationError
        If ``d_tilde >= r`` or ``r >= u_tilde``.

    Warns
    -----
    PathExplosionWarning
        If ``n`` exceeds the enumeration ceiling.
    SampleSizeWarning
        If the path-specific bound was sampled from too few paths.
    """
    p = BinomialParameters(
        S0=S0, K=K, r=r, u=u, d=d, lam=lam, v_u=v_u, v_d=v_d, n=n,
        option_type=option_type,
    )  # fmt: skip
    sampling = SamplingConfig(
        max_sample_size=int(max_sample_size),
        sample_fraction=float(sample_fraction),
        random=RandomConfig(seed=int(seed)),
    )
    return arithmetic_bounds(p, path_specific=path_specific, sampling=sampling, cfg=cfg)
