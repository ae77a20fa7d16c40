from __future__ import annotations

import math
from dataclasses import dataclass

from scipy.stats import norm

from ..exceptions import InvalidParameterError
from ..types import OptionType, as_option_type, as_step_count


def _validate_scalar_inputs(
    *, spot: float, strike: float, sigma: float, tau: float
) -> None:
    if spot <= 0.0:
        raise InvalidParameterError("spot must be positive")
    if strike <= 0.0:
        raise InvalidParameterError("strike must be positive")
    if sigma < 0.0:
        raise InvalidParameterError("sigma must be non-negative")
    if tau <= 0.0:
        raise InvalidParameterError("tau must be positive")


def discount_factor(rate: float, tau: float) -> float:
    return math.exp(-rate * tau)


def _lognormal_price(
    *, m: float, v: float, strike: float, df: float, kind: OptionType
) -> float:
    """Discounted call/put on ``X = exp(Y)``, ``Y ~ N(m, v)``.

    ``v = 0`` collapses to the discounted intrinsic value of ``exp(m)``.
    """
    if v <= 0.0:
        x = math.exp(m)
        intrinsic = x - strike if kind == OptionType.CALL else strike - x
        return df * max(intrinsic, 0.0)

    sd = math.sqrt(v)
    fwd = math.exp(m + 0.5 * v)
    d1 = (m - math.log(strike) + v) / sd
    d2 = d1 - sd
    if kind == OptionType.CALL:
        return df * (fwd * norm.cdf(d1) - strike * norm.cdf(d2))
    return df * (strike * norm.cdf(-d2) - fwd * norm.cdf(-d1))


def bs_price(
    *, spot: float, strike: float, r: float, sigma: float, tau: float,
    kind: OptionType | str = OptionType.CALL,
) -> float:  # fmt: skip
    """
    Black–Scholes European price. ``sigma = 0`` and negative rates are allowed.
    """
    _validate_scalar_inputs(spot=spot, strike=strike, sigma=sigma, tau=tau)
    m = math.log(spot) + (r - 0.5 * sigma * sigma) * tau
    v = sigma * sigma * tau
    return float(
        _lognormal_price(
            m=m, v=v, strike=strike, df=discount_factor(r, tau), kind=as_option_type(kind)
        )
    )


def call_price(*, spot: float, strike: float, r: float, sigma: float, tau: float) -> float:
    return bs_price(spot=spot, strike=strike, r=r, sigma=sigma, tau=tau, kind=OptionType.CALL)


def put_price(*, spot: float, strike: float, r: float, sigma: float, tau: float) -> float:
    return bs_price(spot=spot, strike=strike, r=r, sigma=sigma, tau=tau, kind=OptionType.PUT)


def geometric_asian_price(
    *,
    spot: float,
    strike: float,
    r: float,
    sigma: float,
    tau: float,
    n_fixings: int | None = None,
    kind: OptionType | str = OptionType.CALL,
) -> float:
    """
    Geometric Asian price under GBM.

    With ``n_fixings=None`` the average is continuous (Kemna–Vorst):
    ``ln G ~ N(ln S + (r - sigma^2/2) tau/2, sigma^2 tau/3)``.

    With ``n_fixings = n`` the average runs over the ``n + 1`` equally spaced
    prices ``S_0, ..., S_n`` (``S_0`` included), matching the binomial
    averaging convention; the variance becomes
    ``sigma^2 tau (2n + 1) / (6 (n + 1))``.
    """
    _validate_scalar_inputs(spot=spot, strike=strike, sigma=sigma, tau=tau)
    m = math.log(spot) + 0.5 * (r - 0.5 * sigma * sigma) * tau
    if n_fixings is None:
        v = sigma * sigma * tau / 3.0
    else:
        n = as_step_count(n_fixings)
        v = sigma * sigma * tau * (2 * n + 1) / (6.0 * (n + 1))
    return float(
        _lognormal_price(
            m=m, v=v, strike=strike, df=discount_factor(r, tau), kind=as_option_type(kind)
        )
    )


# -------------------------
# Binomial -> continuous parameter map
# -------------------------


@dataclass(frozen=True, slots=True)
class ContinuousEquivalent:
    """Continuous-time parameters implied by a binomial parameterisation.

    The tree spans ``T = 1`` with ``dt = 1/n``; ``r_gross`` is read as the gross
    rate over the whole horizon, so ``r = ln(r_gross)``, and
    ``sigma = ln(u/d) / (2 sqrt(dt))``.
    """

    r: float
    sigma: float
    T: float
    n: int

    @classmethod
    def from_binomial(
        cls, *, r_gross: float, u: float, d: float, n: int
    ) -> ContinuousEquivalent:
        n = as_step_count(n)
        if r_gross <= 0.0:
            raise InvalidParameterError("r must be positive (use gross rate, e.g. 1.05)")
        if u <= 1.0:
            raise InvalidParameterError("u must be greater than 1")
        if d <= 0.0:
            raise InvalidParameterError("d must be positive")
        if not (d < 1.0 and d < u):
            raise InvalidParameterError("d must be less than 1 and less than u")

        dt = 1.0 / n
        return cls(
            r=math.log(r_gross),
            sigma=math.log(u / d) / (2.0 * math.sqrt(dt)),
            T=1.0,
            n=n,
        )
