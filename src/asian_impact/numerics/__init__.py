"""
Path enumeration and averaging primitives (advanced API).

Top-level package `asian_impact` exposes the everyday pricing API.
This subpackage exposes the building blocks of the enumeration engine.
"""

from .averages import arithmetic_mean, geometric_mean, spread_parameter
from .paths import (
    MAX_ENCODABLE_STEPS,
    build_trajectories,
    build_trajectory,
    decode_moves,
    guard_path_count,
    iter_path_codes,
    iter_paths,
    path_probabilities,
)

__all__ = [
    # Paths
    "MAX_ENCODABLE_STEPS",
    "guard_path_count",
    "iter_path_codes",
    "iter_paths",
    "decode_moves",
    "build_trajectory",
    "build_trajectories",
    "path_probabilities",
    # Averages
    "geometric_mean",
    "arithmetic_mean",
    "spread_parameter",
]
