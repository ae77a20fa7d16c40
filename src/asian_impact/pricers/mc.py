from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from ..config import EnumerationConfig, MCConfig
from ..models import bs as bs_model
from ..models.bs import ContinuousEquivalent
from ..models.impact_binomial import ImpactBinomialModel
from ..models.stochastic_processes import make_rng, sim_gbm, sim_impact_tree
from ..numerics import averages
from ..payoffs import make_average_payoff
from ..types import BinomialParameters, OptionType, as_option_type, as_step_count
from .tree import enumerate_paths

logger = logging.getLogger(__name__)


def _apply_control_variate(X: np.ndarray, Y: np.ndarray, EY: float) -> np.ndarray:
    # Guard against degenerate controls
    var_y = float(np.var(Y, ddof=1)) if Y.size > 1 else 0.0
    if var_y <= 0.0:
        return X

    cov = float(np.cov(X, Y, ddof=1)[0, 1])
    b = cov / var_y
    return X - b * (Y - float(EY))


@dataclass(frozen=True, slots=True)
class AsianMCSamples:
    """
    Per-path undiscounted payoffs of an arithmetic Asian option and its
    geometric twin, which serves as control variate.

    Attributes
    ----------
    arithmetic
        Payoffs on the arithmetic average, shape ``(n_paths,)``.
    geometric
        Payoffs on the geometric average of the same paths.
    control_mean
        Exact expectation of `geometric` under the pricing measure
        (undiscounted).
    antithetic
        Whether the second half of the paths mirrors the first.
    """

    arithmetic: np.ndarray
    geometric: np.ndarray
    control_mean: float
    antithetic: bool = False

    @classmethod
    def from_paths(
        cls,
        S: np.ndarray,
        *,
        kind: OptionType,
        K: float,
        control_mean: float,
        antithetic: bool = False,
    ) -> AsianMCSamples:
        payoff = make_average_payoff(kind, K=K)
        return cls(
            arithmetic=payoff(averages.arithmetic_mean(S)),
            geometric=payoff(averages.geometric_mean(S)),
            control_mean=control_mean,
            antithetic=antithetic,
        )

    def estimate(self, disc: float, *, control: bool = True) -> tuple[float, float]:
        """
        Discounted estimate and its standard error.

        Notes
        -----
        - With ``antithetic=True`` estimates are formed from pair-averaged
          samples and the standard error uses ``n_paths/2`` observations.
        - Sample standard deviation uses ``ddof=1``.
        """
        X, Y = self.arithmetic, self.geometric
        if self.antithetic:
            n_pairs = X.size // 2
            X = 0.5 * (X[:n_pairs] + X[n_pairs:])
            Y = 0.5 * (Y[:n_pairs] + Y[n_pairs:])

        X_eff = _apply_control_variate(X, Y, self.control_mean) if control else X

        mean = float(X_eff.mean())
        std = float(X_eff.std(ddof=1)) if X_eff.size > 1 else 0.0
        return disc * mean, disc * std / float(np.sqrt(X_eff.size))


def mc_arithmetic_asian(
    p: BinomialParameters,
    *,
    cfg: MCConfig | None = None,
    control: bool = True,
    enum_cfg: EnumerationConfig | None = None,
) -> tuple[float, float]:
    """
    Monte Carlo price of the arithmetic Asian option on the impact tree.

    Paths are simulated under ``p_eff``. The geometric payoff on the same paths
    is the control variate; its exact mean comes from full path enumeration,
    so ``2**n`` must be affordable (the enumeration guard applies).

    Returns
    -------
    (price, stderr) : tuple[float, float]
    """
    cfg = cfg or MCConfig()
    model = ImpactBinomialModel.from_params(p)
    EY = enumerate_paths(model, cfg=enum_cfg).payoff if control else 0.0

    S = sim_impact_tree(
        model, cfg.n_paths, rng=make_rng(cfg.random), antithetic=cfg.antithetic
    )
    samples = AsianMCSamples.from_paths(
        S, kind=p.option_type, K=p.K, control_mean=EY, antithetic=cfg.antithetic
    )
    price, se = samples.estimate(model.disc, control=control)
    logger.debug("impact-tree MC: n_paths=%d price=%.6g se=%.3g", cfg.n_paths, price, se)
    return price, se


def mc_arithmetic_asian_impact(
    S0: float,
    K: float,
    r: float,
    u: float,
    d: float,
    lam: float,
    v_u: float,
    v_d: float,
    n: int,
    option_type: OptionType | str = OptionType.CALL,
    *,
    cfg: MCConfig | None = None,
    control: bool = True,
) -> tuple[float, float]:
    p = BinomialParameters(
        S0=S0, K=K, r=r, u=u, d=d, lam=lam, v_u=v_u, v_d=v_d, n=n,
        option_type=option_type,
    )  # fmt: skip
    return mc_arithmetic_asian(p, cfg=cfg, control=control)


def mc_arithmetic_asian_gbm(
    S0: float,
    K: float,
    r: float,
    sigma: float,
    T: float,
    n_steps: int,
    option_type: OptionType | str = OptionType.CALL,
    *,
    cfg: MCConfig | None = None,
    control: bool = True,
) -> tuple[float, float]:
    """
    Monte Carlo arithmetic Asian under GBM with a geometric control variate.

    The average runs over ``S_0, ..., S_n``; the control's mean is the exact
    discrete-monitoring geometric Asian price.

    Examples
    --------
    >>> price, err = mc_arithmetic_asian_gbm(100, 100, 0.05, 0.2, 1.0, 12)  # doctest: +SKIP
    """
    cfg = cfg or MCConfig()
    kind = as_option_type(option_type)
    n_steps = as_step_count(n_steps)
    df = bs_model.discount_factor(r, T)

    EY = 0.0
    if control:
        EY = (
            bs_model.geometric_asian_price(
                spot=S0, strike=K, r=r, sigma=sigma, tau=T, n_fixings=n_steps, kind=kind
            )
            / df
        )

    _, S = sim_gbm(
        cfg.n_paths,
        T,
        n_steps,
        mu=r,
        sigma=sigma,
        S0=S0,
        rng=make_rng(cfg.random),
        antithetic=cfg.antithetic,
    )
    samples = AsianMCSamples.from_paths(
        S, kind=kind, K=K, control_mean=EY, antithetic=cfg.antithetic
    )
    return samples.estimate(df, control=control)


def mc_arithmetic_asian_binomial(
    S0: float,
    K: float,
    r: float,
    u: float,
    d: float,
    n: int,
    option_type: OptionType | str = OptionType.CALL,
    *,
    cfg: MCConfig | None = None,
    control: bool = True,
) -> tuple[float, float]:
    """GBM arithmetic Asian for the continuous equivalent of a CRR tree."""
    c = ContinuousEquivalent.from_binomial(r_gross=r, u=u, d=d, n=n)
    return mc_arithmetic_asian_gbm(
        S0, K, c.r, c.sigma, c.T, c.n, option_type, cfg=cfg, control=control
    )
