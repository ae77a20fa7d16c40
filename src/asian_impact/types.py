from __future__ import annotations

import math
import operator
from dataclasses import dataclass
from enum import Enum

from .exceptions import InvalidParameterError


class OptionType(str, Enum):
    """Option contract type.

    Attributes
    ----------
    CALL : str
        Call option ("call"), payoff ``max(avg - K, 0)``.
    PUT : str
        Put option ("put"), payoff ``max(K - avg, 0)``.
    """

    CALL = "call"
    PUT = "put"


def as_option_type(kind: OptionType | str) -> OptionType:
    if isinstance(kind, OptionType):
        return kind
    try:
        return OptionType(str(kind).lower())
    except ValueError:
        raise InvalidParameterError(
            f"option_type should be one of 'call', 'put'; got {kind!r}"
        ) from None


def as_step_count(n: object) -> int:
    """Return `n` as a positive ``int`` or raise :class:`InvalidParameterError`."""
    if isinstance(n, bool):
        raise InvalidParameterError("n must be a positive integer")
    try:
        steps = operator.index(n)  # type: ignore[arg-type]
    except TypeError:
        raise InvalidParameterError(
            f"n must be a positive integer; got {n!r}"
        ) from None
    if steps <= 0:
        raise InvalidParameterError(f"n must be a positive integer; got {steps}")
    return steps


def _require_positive(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0.0:
        raise InvalidParameterError(f"{name} must be positive; got {value!r}")


def _require_non_negative(name: str, value: float) -> None:
    if not math.isfinite(value) or value < 0.0:
        raise InvalidParameterError(f"{name} must be non-negative; got {value!r}")


def validate_factor_inputs(
    *, r: float, u: float, d: float, lam: float, v_u: float, v_d: float
) -> None:
    """Domain checks shared by every entry point that builds effective factors."""
    _require_positive("r", r)
    _require_positive("u", u)
    _require_positive("d", d)
    _require_non_negative("lambda", lam)
    _require_non_negative("v_u", v_u)
    _require_non_negative("v_d", v_d)
    if u <= d:
        raise InvalidParameterError(
            f"Up factor u must be greater than down factor d; got u={u!r}, d={d!r}"
        )


@dataclass(frozen=True, slots=True)
class BinomialParameters:
    """Inputs of the price-impact binomial model and the Asian contract.

    Parameters
    ----------
    S0 : float
        Initial price of the underlying, ``> 0``.
    K : float
        Strike, ``> 0``.
    r : float
        **Gross** risk-free rate per step (``1.05`` for 5%), ``> 0``.
    u, d : float
        Base up/down factors, ``0 < d < u``.
    lam : float
        Price-impact coefficient :math:`\\lambda`, ``>= 0``.
    v_u, v_d : float
        Hedging volumes on up and down moves, ``>= 0``.
    n : int
        Number of steps, a positive integer.
    option_type : OptionType
        Call or put. Strings ``"call"``/``"put"`` are accepted.

    Notes
    -----
    Validation happens on construction and raises
    :class:`~asian_impact.exceptions.InvalidParameterError`. The no-arbitrage
    condition is checked when effective factors are computed, since it depends
    only on ``r, u, d, lam, v_u, v_d``.
    """

    S0: float
    K: float
    r: float
    u: float
    d: float
    lam: float = 0.0
    v_u: float = 0.0
    v_d: float = 0.0
    n: int = 1
    option_type: OptionType = OptionType.CALL

    def __post_init__(self) -> None:
        for name in ("S0", "K", "r", "u", "d", "lam", "v_u", "v_d"):
            object.__setattr__(self, name, float(getattr(self, name)))
        object.__setattr__(self, "n", as_step_count(self.n))
        object.__setattr__(self, "option_type", as_option_type(self.option_type))

        _require_positive("S0", self.S0)
        _require_positive("K", self.K)
        validate_factor_inputs(
            r=self.r, u=self.u, d=self.d, lam=self.lam, v_u=self.v_u, v_d=self.v_d
        )

    @property
    def n_paths(self) -> int:
        return 1 << self.n


@dataclass(frozen=True, slots=True)
class EffectiveFactors:
    """Impact-adjusted tree factors.

    ``u_tilde = u * exp(lam * v_u)``, ``d_tilde = d * exp(-lam * v_d)`` and
    ``p_eff = (r - d_tilde) / (u_tilde - d_tilde)``.
    """

    u_tilde: float
    d_tilde: float
    p_eff: float


@dataclass(frozen=True, slots=True)
class BoundsResult:
    """Bounds on the arithmetic-average Asian option value.

    Attributes
    ----------
    lower_bound : float
        Geometric Asian price :math:`V_0^G` (AM-GM lower bound).
    upper_bound_global : float
        :math:`V_0^G + (\\rho^* - 1) E^Q[G_n] / r^n`. May be ``inf`` for large n.
    upper_bound_path_specific : float | None
        Bound using each path's own realised spread, if requested.
    rho_star : float
        Global spread parameter, always ``>= 1``.
    EQ_G : float
        Undiscounted risk-neutral expectation of the geometric average.
    n_paths_sampled : int | None
        Paths used for the path-specific bound (``2**n`` when exhaustive).
    """

    lower_bound: float
    upper_bound_global: float
    rho_star: float
    EQ_G: float
    upper_bound_path_specific: float | None = None
    n_paths_sampled: int | None = None

    @property
    def V0_G(self) -> float:
        return self.lower_bound

    @property
    def upper_bound(self) -> float:
        """Path-specific bound if computed, else the global one."""
        if self.upper_bound_path_specific is None:
            return self.upper_bound_global
        return self.upper_bound_path_specific

    @property
    def midpoint(self) -> float:
        return 0.5 * (self.lower_bound + self.upper_bound)

    def summary(self) -> str:
        lines = [
            "Arithmetic Asian Option Bounds",
            "================================",
            f"Lower bound (V0_G):    {self.lower_bound:.6f}",
            f"Upper bound (global):  {self.upper_bound_global:.6f}",
        ]
        if self.upper_bound_path_specific is not None:
            lines.append(
                f"Upper bound (path):    {self.upper_bound_path_specific:.6f}"
                f"  [{self.n_paths_sampled} paths]"
            )
        lines += [
            f"Midpoint estimate:     {self.midpoint:.6f}",
            f"Spread (rho*):         {self.rho_star:.6f}",
            f"E^Q[G_n]:              {self.EQ_G:.6f}",
        ]
        return "\n".join(lines)
