from __future__ import annotations

from collections.abc import Callable

import numpy as np

from .types import OptionType, as_option_type
from .typing import FloatArray


def call_payoff(avg: FloatArray, *, K: float) -> FloatArray:
    return np.maximum(avg - K, 0.0)


def put_payoff(avg: FloatArray, *, K: float) -> FloatArray:
    return np.maximum(K - avg, 0.0)


def payoff(avg: FloatArray | float, K: float, kind: OptionType | str) -> FloatArray:
    """Shared call/put payoff on an average (or any underlying level)."""
    kind = as_option_type(kind)
    avg = np.asarray(avg, dtype=np.float64)
    if kind == OptionType.CALL:
        return call_payoff(avg, K=K)
    return put_payoff(avg, K=K)


def make_average_payoff(
    kind: OptionType | str, *, K: float
) -> Callable[[FloatArray], FloatArray]:
    kind = as_option_type(kind)
    if kind == OptionType.CALL:

        def _payoff(avg: FloatArray) -> FloatArray:
            return call_payoff(avg, K=K)

        return _payoff

    def _payoff(avg: FloatArray) -> FloatArray:
        return put_payoff(avg, K=K)

    return _payoff
