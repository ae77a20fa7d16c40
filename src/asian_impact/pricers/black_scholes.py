from __future__ import annotations

from ..models import bs as bs_model
from ..models.bs import ContinuousEquivalent
from ..types import OptionType


# -------------------------
# Binomial-parameterised benchmarks
# -------------------------
def price_black_scholes_binomial(
    S0: float,
    K: float,
    r: float,
    u: float,
    d: float,
    n: int,
    option_type: OptionType | str = OptionType.CALL,
) -> float:
    """Black–Scholes limit of a CRR tree with gross horizon rate `r`."""
    c = ContinuousEquivalent.from_binomial(r_gross=r, u=u, d=d, n=n)
    return bs_model.bs_price(
        spot=S0, strike=K, r=c.r, sigma=c.sigma, tau=c.T, kind=option_type
    )


def price_kemna_vorst_binomial(
    S0: float,
    K: float,
    r: float,
    u: float,
    d: float,
    n: int,
    option_type: OptionType | str = OptionType.CALL,
    *,
    discrete: bool = False,
) -> float:
    """Geometric Asian benchmark for a CRR tree.

    ``discrete=False`` gives the continuous Kemna–Vorst price; ``True`` the
    exact GBM price of the average over the tree's ``n + 1`` fixing dates.
    """
    c = ContinuousEquivalent.from_binomial(r_gross=r, u=u, d=d, n=n)
    return bs_model.geometric_asian_price(
        spot=S0,
        strike=K,
        r=c.r,
        sigma=c.sigma,
        tau=c.T,
        n_fixings=c.n if discrete else None,
        kind=option_type,
    )
