from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from ..exceptions import NumericDegeneracyError
from ..typing import FloatArray, FloatDType


def _check_prices(prices: FloatArray) -> None:
    if prices.shape[-1] == 0:
        raise NumericDegeneracyError("Cannot average an empty price trajectory")
    if not np.all(np.isfinite(prices)):
        raise NumericDegeneracyError("Non-finite price in trajectory")
    if np.any(prices <= 0.0):
        bad = float(prices[prices <= 0.0].flat[0])
        raise NumericDegeneracyError(f"Non-positive price in trajectory: {bad!r}")


def geometric_mean(prices: Sequence[float] | FloatArray) -> float | FloatArray:
    """Geometric mean over the last axis, computed as ``exp(mean(log S))``.

    The log form avoids overflow of the raw product for long or extreme paths.
    A 1-D input returns a float; an ``(m, n + 1)`` input returns ``(m,)``.
    """
    arr = np.asarray(prices, dtype=FloatDType)
    _check_prices(arr)
    out = np.exp(np.mean(np.log(arr), axis=-1))
    return float(out) if arr.ndim == 1 else out


def arithmetic_mean(prices: Sequence[float] | FloatArray) -> float | FloatArray:
    """Arithmetic mean over the last axis (same shape rules as geometric_mean)."""
    arr = np.asarray(prices, dtype=FloatDType)
    _check_prices(arr)
    out = np.mean(arr, axis=-1)
    return float(out) if arr.ndim == 1 else out


def spread_parameter(
    s_min: float | FloatArray, s_max: float | FloatArray
) -> float | FloatArray:
    """Reverse AM-GM spread ``exp((M - m)^2 / (4 m M))`` for prices in ``[m, M]``.

    For any values in that range ``A <= rho * G``. Overflow to ``inf`` is
    returned as is.
    """
    s_min = np.asarray(s_min, dtype=FloatDType)
    s_max = np.asarray(s_max, dtype=FloatDType)
    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        # (M - m)^2 / (4 m M) == (t - 1)^2 / (4 t) with t = M/m, which stays
        # finite for longer than the raw products do
        t = s_max / s_min
        expo = (t - 1.0) * ((t - 1.0) / (4.0 * t))
        rho = np.where(np.isposinf(t), np.inf, np.exp(expo))
    return float(rho) if rho.ndim == 0 else rho
