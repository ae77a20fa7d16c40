from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

RngType = Literal["pcg64", "mt19937"]


@dataclass(frozen=True, slots=True)
class RandomConfig:
    seed: int = 0
    rng_type: RngType = "pcg64"

    def __post_init__(self) -> None:
        if self.rng_type not in ("pcg64", "mt19937"):
            raise ValueError(f"Unsupported rng_type: {self.rng_type!r}")


@dataclass(frozen=True, slots=True)
class EnumerationConfig:
    """Controls for exhaustive path enumeration.

    Parameters
    ----------
    max_steps : int, default 20
        Comfortable ceiling on ``n``. Above it a
        :class:`~asian_impact.exceptions.PathExplosionWarning` is emitted, or a
        :class:`~asian_impact.exceptions.PathExplosionError` raised if `strict`.
    strict : bool, default False
        Refuse to enumerate above `max_steps` instead of warning.
    chunk_size : int, default 65_536
        Number of paths evaluated per vectorised chunk.
    n_jobs : int, default 1
        Worker threads for the chunk loop. ``1`` is the serial reference path
        with a fixed summation order; ``-1`` uses every core.
    """

    max_steps: int = 20
    strict: bool = False
    chunk_size: int = 65_536
    n_jobs: int = 1

    def __post_init__(self) -> None:
        if self.max_steps <= 0:
            raise ValueError("max_steps must be > 0")
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")
        if self.n_jobs == 0 or self.n_jobs < -1:
            raise ValueError("n_jobs must be a positive integer or -1")


@dataclass(frozen=True, slots=True)
class SamplingConfig:
    """Sampling policy for the path-specific upper bound.

    If ``2**n <= max_sample_size`` every path is used. Otherwise
    ``min(max_sample_size, ceil(sample_fraction * 2**n))`` distinct paths are
    drawn uniformly without replacement.
    """

    max_sample_size: int = 100_000
    sample_fraction: float = 0.10
    min_reliable_samples: int = 1_000
    random: RandomConfig = field(default_factory=RandomConfig)

    def __post_init__(self) -> None:
        if self.max_sample_size <= 0:
            raise ValueError("max_sample_size must be > 0")
        if not (0.0 < self.sample_fraction <= 1.0):
            raise ValueError("sample_fraction must be in (0, 1]")
        if self.min_reliable_samples < 0:
            raise ValueError("min_reliable_samples must be >= 0")


@dataclass(frozen=True, slots=True)
class MCConfig:
    n_paths: int = 100_000
    antithetic: bool = False
    random: RandomConfig = field(default_factory=RandomConfig)

    def __post_init__(self) -> None:
        if self.n_paths <= 1:
            raise ValueError("n_paths must be > 1")
        if self.antithetic and (self.n_paths % 2 != 0):
            raise ValueError("antithetic=True requires an even n_paths")
