from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from math import comb

import numpy as np
from joblib import Parallel, delayed

from ..config import EnumerationConfig
from ..exceptions import NumericDegeneracyError
from ..models.impact_binomial import ImpactBinomialModel
from ..numerics.averages import geometric_mean, spread_parameter
from ..numerics.paths import (
    build_trajectories,
    chunk_ranges,
    codes_for_range,
    decode_moves,
    guard_path_count,
    path_probabilities,
)
from ..payoffs import make_average_payoff
from ..types import BinomialParameters, OptionType
from ..typing import FloatArray

logger = logging.getLogger(__name__)


# ----------------------------
# Enumeration engine
# ----------------------------


@dataclass(frozen=True, slots=True)
class PathSums:
    """Probability-weighted sums accumulated over a set of paths.

    ``payoff`` and ``geo`` are undiscounted. ``spread`` is
    ``sum p(w) (rho(w) - 1) G(w)`` and is only filled when requested.
    """

    payoff: float = 0.0
    geo: float = 0.0
    spread: float = 0.0
    mass: float = 0.0
    count: int = 0

    def __add__(self, other: PathSums) -> PathSums:
        return PathSums(
            payoff=self.payoff + other.payoff,
            geo=self.geo + other.geo,
            spread=self.spread + other.spread,
            mass=self.mass + other.mass,
            count=self.count + other.count,
        )


def evaluate_codes(
    model: ImpactBinomialModel,
    codes: np.ndarray,
    payoff: Callable[[FloatArray], FloatArray],
    *,
    with_spread: bool = False,
) -> PathSums:
    """Evaluate one batch of paths and reduce it to :class:`PathSums`."""
    moves = decode_moves(codes, model.n_steps)
    S = build_trajectories(model.S0, moves, model.u_tilde, model.d_tilde)
    G = geometric_mean(S)
    prob = path_probabilities(moves, model.p_star)

    pay = payoff(G)
    spread = 0.0
    if with_spread:
        rho = spread_parameter(S.min(axis=1), S.max(axis=1))
        with np.errstate(invalid="ignore", over="ignore"):
            spread = float(np.sum(prob * (rho - 1.0) * G))

    return PathSums(
        payoff=float(np.sum(prob * pay)),
        geo=float(np.sum(prob * G)),
        spread=spread,
        mass=float(np.sum(prob)),
        count=int(codes.shape[0]),
    )


def _evaluate_range(
    model: ImpactBinomialModel,
    n_paths: int,
    start: int,
    stop: int,
    payoff: Callable[[FloatArray], FloatArray],
    with_spread: bool,
) -> PathSums:
    codes = codes_for_range(n_paths, start, stop)
    return evaluate_codes(model, codes, payoff, with_spread=with_spread)


def enumerate_paths(
    model: ImpactBinomialModel,
    *,
    cfg: EnumerationConfig | None = None,
    with_spread: bool = False,
) -> PathSums:
    """Exhaustive reduction over all ``2**n`` paths of `model`.

    Chunks are evaluated independently (in worker threads when
    ``cfg.n_jobs != 1``) and combined in canonical order by addition.
    """
    cfg = cfg or EnumerationConfig()
    n_paths = guard_path_count(model.n_steps, cfg)
    payoff = make_average_payoff(model.params.option_type, K=model.params.K)
    ranges = chunk_ranges(n_paths, cfg.chunk_size)
    logger.debug(
        "path loop: %d chunk(s) of <= %d paths, n_jobs=%d",
        len(ranges),
        cfg.chunk_size,
        cfg.n_jobs,
    )

    if cfg.n_jobs == 1 or len(ranges) == 1:
        parts = [
            _evaluate_range(model, n_paths, start, stop, payoff, with_spread)
            for start, stop in ranges
        ]
    else:
        parts = Parallel(n_jobs=cfg.n_jobs, backend="threading")(
            delayed(_evaluate_range)(model, n_paths, start, stop, payoff, with_spread)
            for start, stop in ranges
        )

    total = PathSums()
    for part in parts:
        total = total + part

    if not (np.isfinite(total.payoff) and np.isfinite(total.geo)):
        raise NumericDegeneracyError(
            f"Non-finite path sums: payoff={total.payoff!r}, geo={total.geo!r}"
        )
    return total


# ----------------------------
# Pricing engines
# ----------------------------


def geometric_asian_price(
    p: BinomialParameters, *, cfg: EnumerationConfig | None = None
) -> float:
    """Exact geometric Asian price for validated parameters.

    Enumerates all ``2**n`` paths, averages each trajectory geometrically
    (including ``S0``), weights the payoff by ``p_eff**#up (1 - p_eff)**#down``
    and discounts by ``r**-n``.
    """
    model = ImpactBinomialModel.from_params(p)
    sums = enumerate_paths(model, cfg=cfg)
    return sums.payoff * model.disc


def price_geometric_asian(
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
    *,
    cfg: EnumerationConfig | None = None,
) -> float:
    """Geometric Asian option price in the price-impact binomial model.

    Parameters
    ----------
    S0, K : float
        Spot and strike.
    r : float
        Gross risk-free rate per step (e.g. ``1.05``).
    u, d : float
        Base up/down factors.
    lam, v_u, v_d : float
        Price-impact coefficient and hedging volumes.
    n : int
        Number of steps; ``2**n`` paths are enumerated.
    option_type : OptionType or {"call", "put"}
    cfg : EnumerationConfig, optional
        Explosion guard, chunking and worker count.

    Raises
    ------
    InvalidParameterError, ArbitrageViolationError, PathExplosionError

    Examples
    --------
    >>> price_geometric_asian(100, 100, 1.05, 1.2, 0.8, 0.1, 1, 1, 3)  # doctest: +SKIP
    12.3519...
    """
    p = BinomialParameters(
        S0=S0, K=K, r=r, u=u, d=d, lam=lam, v_u=v_u, v_d=v_d, n=n,
        option_type=option_type,
    )  # fmt: skip
    return geometric_asian_price(p, cfg=cfg)


def european_impact_price(p: BinomialParameters) -> float:
    """
    European pricing on the impact tree via the binomial distribution.

    The terminal price recombines, so this is O(n) and needs no path guard.
    """
    model = ImpactBinomialModel.from_params(p)
    payoff = make_average_payoff(p.option_type, K=p.K)
    N = model.n_steps
    q = model.p_star

    total = 0.0
    for j in range(N + 1):
        S_T = model.S0 * (model.u_tilde**j) * (model.d_tilde ** (N - j))
        total += comb(N, j) * (q**j) * ((1.0 - q) ** (N - j)) * float(payoff(S_T))

    return model.disc * total


def price_european_impact(
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
) -> float:
    p = BinomialParameters(
        S0=S0, K=K, r=r, u=u, d=d, lam=lam, v_u=v_u, v_d=v_d, n=n,
        option_type=option_type,
    )  # fmt: skip
    return european_impact_price(p)
