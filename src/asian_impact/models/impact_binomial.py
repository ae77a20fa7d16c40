from __future__ import annotations

from dataclasses import dataclass
from math import exp, inf, isfinite

from ..exceptions import ArbitrageViolationError, InvalidParameterError
from ..types import BinomialParameters, EffectiveFactors, validate_factor_inputs


def compute_effective_factors(
    r: float, u: float, d: float, lam: float, v_u: float, v_d: float
) -> EffectiveFactors:
    """Impact-adjusted up/down factors and risk-neutral probability.

    Parameters
    ----------
    r : float
        Gross risk-free rate per step.
    u, d : float
        Base CRR up/down factors, ``0 < d < u``.
    lam : float
        Price-impact coefficient.
    v_u, v_d : float
        Hedging volumes on up and down moves.

    Returns
    -------
    EffectiveFactors
        ``u_tilde = u e^{lam v_u}``, ``d_tilde = d e^{-lam v_d}`` and
        ``p_eff = (r - d_tilde) / (u_tilde - d_tilde)``.

    Raises
    ------
    InvalidParameterError
        If an input is outside its domain.
    ArbitrageViolationError
        If ``d_tilde >= r`` or ``r >= u_tilde``.
    """
    r, u, d = float(r), float(u), float(d)
    lam, v_u, v_d = float(lam), float(v_u), float(v_d)
    validate_factor_inputs(r=r, u=u, d=d, lam=lam, v_u=v_u, v_d=v_d)

    try:
        u_tilde = u * exp(lam * v_u)
    except OverflowError:
        u_tilde = inf
    d_tilde = d * exp(-lam * v_d)
    if not (isfinite(u_tilde) and d_tilde > 0.0):
        raise InvalidParameterError(
            f"Effective factors are degenerate: u_tilde={u_tilde!r}, d_tilde={d_tilde!r}"
        )

    if d_tilde >= r:
        raise ArbitrageViolationError("d_tilde", d_tilde, "r", r)
    if r >= u_tilde:
        raise ArbitrageViolationError("r", r, "u_tilde", u_tilde)

    p_eff = (r - d_tilde) / (u_tilde - d_tilde)
    return EffectiveFactors(u_tilde=u_tilde, d_tilde=d_tilde, p_eff=p_eff)


def check_no_arbitrage(
    r: float, u: float, d: float, lam: float, v_u: float, v_d: float
) -> bool:
    """``True`` iff ``d_tilde < r < u_tilde`` for the given inputs.

    Domain errors (negative volumes, ``u <= d``...) still raise.
    """
    try:
        compute_effective_factors(r, u, d, lam, v_u, v_d)
    except ArbitrageViolationError:
        return False
    return True


@dataclass(frozen=True, slots=True)
class ImpactBinomialModel:
    """CRR tree whose factors are widened by the hedger's price impact.

    Built from validated :class:`BinomialParameters`; construction fails with
    :class:`ArbitrageViolationError` when the effective tree admits arbitrage.
    """

    params: BinomialParameters
    factors: EffectiveFactors

    @classmethod
    def from_params(cls, params: BinomialParameters) -> ImpactBinomialModel:
        factors = compute_effective_factors(
            params.r, params.u, params.d, params.lam, params.v_u, params.v_d
        )
        return cls(params=params, factors=factors)

    @property
    def S0(self) -> float:
        return self.params.S0

    @property
    def n_steps(self) -> int:
        return self.params.n

    @property
    def u_tilde(self) -> float:
        return self.factors.u_tilde

    @property
    def d_tilde(self) -> float:
        return self.factors.d_tilde

    @property
    def p_star(self) -> float:
        return self.factors.p_eff

    @property
    def disc(self) -> float:
        # r is gross per step, so discounting over the tree is r^-n
        return float(self.params.r ** (-self.n_steps))
