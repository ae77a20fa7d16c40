from __future__ import annotations

import numpy as np

from ..config import RandomConfig
from ..numerics.paths import build_trajectories
from .impact_binomial import ImpactBinomialModel


def make_rng(
    random: RandomConfig, seed_seq: np.random.SeedSequence | None = None
) -> np.random.Generator:
    """Generator of the configured bit generator, seeded from `random.seed`
    unless an explicit (spawned) seed sequence is given."""
    ss = seed_seq if seed_seq is not None else np.random.SeedSequence(random.seed)
    if random.rng_type == "mt19937":
        return np.random.Generator(np.random.MT19937(ss))
    return np.random.Generator(np.random.PCG64(ss))


def sim_gbm(
    n_paths: int,
    T: float,
    n_steps: int,
    mu: float = 0.0,
    sigma: float = 1.0,
    S0: float = 1.0,
    rng: np.random.Generator | None = None,
    antithetic: bool = False,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Simulate n_paths of Geometric Brownian Motion on ``n_steps + 1`` dates.

    Parameters
    ----------
    n_paths : int
        Number of paths. Must be even if `antithetic`.
    T : float
        Time horizon.
    n_steps : int
        Number of equal steps; the grid is ``0, T/n, ..., T``.
    mu : float, optional
        Drift.
    sigma : float, optional
        Volatility.
    S0 : float, optional
        Initial level.
    rng : np.random.Generator, optional
        Random number generator. If None, a new default_rng() is created.
    antithetic : bool, optional
        Second half of the paths reuses the first half's normals negated.

    Returns
    -------
    t : ndarray, shape (n_steps + 1,)
        Time grid.
    S : ndarray, shape (n_paths, n_steps + 1)
        Simulated GBM paths, ``S[:, 0] == S0``.
    """
    if rng is None:
        rng = np.random.default_rng()

    dt = T / n_steps
    if antithetic:
        Z = rng.standard_normal((n_paths // 2, n_steps))
        Z = np.concatenate([Z, -Z])
    else:
        Z = rng.standard_normal((n_paths, n_steps))

    log_incr = (mu - 0.5 * sigma**2) * dt + sigma * np.sqrt(dt) * Z
    log_S = np.hstack([np.zeros((n_paths, 1)), np.cumsum(log_incr, axis=1)])

    t = np.arange(n_steps + 1) * dt
    return t, S0 * np.exp(log_S)


def sim_impact_tree(
    model: ImpactBinomialModel,
    n_paths: int,
    rng: np.random.Generator | None = None,
    antithetic: bool = False,
) -> np.ndarray:
    """
    Simulate price trajectories of the impact tree under ``p_eff``.

    Each move is up when ``U < p_eff`` with ``U ~ Uniform(0, 1)``; the
    antithetic half uses ``1 - U``.

    Returns
    -------
    S : ndarray, shape (n_paths, n_steps + 1)
    """
    if rng is None:
        rng = np.random.default_rng()

    shape = (n_paths // 2 if antithetic else n_paths, model.n_steps)
    U = rng.random(shape)
    if antithetic:
        U = np.concatenate([U, 1.0 - U])

    moves = U < model.p_star
    return build_trajectories(model.S0, moves, model.u_tilde, model.d_tilde)
