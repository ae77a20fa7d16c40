"""Enumeration of binomial paths and reconstruction of price trajectories.

A path of ``n`` moves is encoded as an ``int64`` bit pattern whose most
significant bit is the first move (1 = up, 0 = down). Paths are visited in
canonical lexicographic order with up first, i.e. codes ``2**n - 1`` down to
``0``; the first path is all-up and the last all-down.
"""

from __future__ import annotations

import itertools
import logging
import warnings
from collections.abc import Iterator, Sequence

import numpy as np

from ..config import EnumerationConfig
from ..exceptions import PathExplosionError, PathExplosionWarning
from ..typing import BoolArray, CodeDType, FloatArray, FloatDType, PathCodes

logger = logging.getLogger(__name__)

# int64 codes leave 62 usable bits once the sign bit and a spare are excluded
MAX_ENCODABLE_STEPS = 62


def guard_path_count(n: int, cfg: EnumerationConfig | None = None) -> int:
    """Return ``2**n`` after applying the explosion guard.

    Emits :class:`PathExplosionWarning` when ``n > cfg.max_steps`` or raises
    :class:`PathExplosionError` if ``cfg.strict``. Step counts that cannot be
    encoded in an ``int64`` are always refused.
    """
    cfg = cfg or EnumerationConfig()
    n_paths = 1 << int(n)

    if n > MAX_ENCODABLE_STEPS:
        raise PathExplosionError(n, n_paths, MAX_ENCODABLE_STEPS)
    if n > cfg.max_steps:
        if cfg.strict:
            raise PathExplosionError(n, n_paths, cfg.max_steps)
        warnings.warn(
            PathExplosionWarning(n, n_paths, cfg.max_steps),
            stacklevel=3,
        )

    logger.debug("enumerating 2^%d = %d paths", n, n_paths)
    return n_paths


def chunk_ranges(n_paths: int, chunk_size: int) -> list[tuple[int, int]]:
    """Split ``[0, n_paths)`` (canonical path indices) into contiguous chunks."""
    return [
        (start, min(start + chunk_size, n_paths))
        for start in range(0, n_paths, chunk_size)
    ]


def codes_for_range(n_paths: int, start: int, stop: int) -> PathCodes:
    """Bit codes of the paths with canonical index ``start <= i < stop``."""
    hi = n_paths - 1 - start
    lo = n_paths - 1 - (stop - 1)
    return np.arange(hi, lo - 1, -1, dtype=CodeDType)


def iter_path_codes(n: int, chunk_size: int = 65_536) -> Iterator[PathCodes]:
    """Stream all ``2**n`` path codes in canonical order, one chunk at a time."""
    n_paths = 1 << int(n)
    for start, stop in chunk_ranges(n_paths, chunk_size):
        yield codes_for_range(n_paths, start, stop)


def decode_moves(codes: PathCodes, n: int) -> BoolArray:
    """Expand codes into an ``(m, n)`` boolean move matrix (True = up)."""
    codes = np.asarray(codes, dtype=CodeDType)
    shifts = np.arange(n - 1, -1, -1, dtype=CodeDType)
    return ((codes[:, None] >> shifts[None, :]) & 1).astype(bool)


def iter_paths(n: int) -> Iterator[tuple[bool, ...]]:
    """Yield every path as a tuple of moves, in the same canonical order.

    Reference form of :func:`iter_path_codes` for small `n`; the pricers use
    the vectorised codes.
    """
    yield from itertools.product((True, False), repeat=int(n))


def build_trajectory(
    S0: float, path: Sequence[bool] | Sequence[int], u_tilde: float, d_tilde: float
) -> list[float]:
    """Prices ``[S_0, ..., S_n]`` along one path.

    Scalar reference form of :func:`build_trajectories`.
    """
    prices = [float(S0)]
    s = float(S0)
    for move in path:
        s *= u_tilde if move else d_tilde
        prices.append(s)
    return prices


def build_trajectories(
    S0: float, moves: BoolArray, u_tilde: float, d_tilde: float
) -> FloatArray:
    """Vectorised :func:`build_trajectory` for an ``(m, n)`` move matrix.

    Returns
    -------
    ndarray, shape (m, n + 1)
        Column 0 is ``S0``; column ``i + 1`` is the price after move ``i``.
    """
    moves = np.asarray(moves, dtype=bool)
    steps = np.where(moves, u_tilde, d_tilde).astype(FloatDType, copy=False)
    out = np.empty((moves.shape[0], moves.shape[1] + 1), dtype=FloatDType)
    out[:, 0] = S0
    out[:, 1:] = S0 * np.cumprod(steps, axis=1)
    return out


def path_probabilities(moves: BoolArray, p: float) -> FloatArray:
    """Risk-neutral probability ``p**#up * (1 - p)**#down`` of each path."""
    n = moves.shape[1]
    n_up = moves.sum(axis=1)
    return np.power(p, n_up) * np.power(1.0 - p, n - n_up)
