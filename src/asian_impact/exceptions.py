"""Error and warning taxonomy for the pricing engine.

Parameter and arbitrage errors are raised before any path is evaluated and are
never caught inside the library. Warnings are informational and do not stop the
computation.
"""

from __future__ import annotations


class AsianImpactError(Exception):
    """Base class for all errors raised by :mod:`asian_impact`."""


class AsianImpactWarning(UserWarning):
    """Base class for all warnings emitted by :mod:`asian_impact`."""


class InvalidParameterError(AsianImpactError, ValueError):
    """Raised when a model or contract parameter is outside its domain.

    Examples are non-positive prices or factors, negative impact inputs,
    ``u <= d`` or a step count that is not a positive integer.
    """


class ArbitrageViolationError(AsianImpactError, ValueError):
    """Raised when the effective factors admit arbitrage.

    The impact-adjusted tree is arbitrage free iff ``d_tilde < r < u_tilde``.
    The offending side of the inequality is kept on the instance so callers can
    inspect it without parsing the message.

    Attributes
    ----------
    lhs_name, lhs : str, float
        Name and value on the left of the violated ``<``.
    rhs_name, rhs : str, float
        Name and value on the right of the violated ``<``.
    """

    def __init__(self, lhs_name: str, lhs: float, rhs_name: str, rhs: float) -> None:
        self.lhs_name = lhs_name
        self.lhs = float(lhs)
        self.rhs_name = rhs_name
        self.rhs = float(rhs)
        super().__init__(
            f"No-arbitrage condition violated: {lhs_name}={self.lhs:.6g} >= "
            f"{rhs_name}={self.rhs:.6g}. Need d_tilde < r < u_tilde."
        )


class PathExplosionError(AsianImpactError, RuntimeError):
    """Raised in strict mode when ``2**n`` paths exceed the configured ceiling."""

    def __init__(self, n: int, n_paths: int, max_steps: int) -> None:
        self.n = int(n)
        self.n_paths = int(n_paths)
        self.max_steps = int(max_steps)
        super().__init__(
            f"n={self.n} would enumerate 2^{self.n} = {self.n_paths} paths "
            f"(ceiling is n={self.max_steps}); refusing in strict mode."
        )


class PathExplosionWarning(AsianImpactWarning):
    """Emitted when ``n`` exceeds the comfortable enumeration ceiling."""

    def __init__(self, n: int, n_paths: int, max_steps: int) -> None:
        self.n = int(n)
        self.n_paths = int(n_paths)
        self.max_steps = int(max_steps)
        super().__init__(
            f"n={self.n} will enumerate 2^{self.n} = {self.n_paths} paths "
            f"(above the ceiling n={self.max_steps}). This may be slow."
        )


class SampleSizeWarning(AsianImpactWarning):
    """Emitted when a sampled path-specific bound rests on too few paths."""

    def __init__(self, n_sampled: int, min_reliable: int) -> None:
        self.n_sampled = int(n_sampled)
        self.min_reliable = int(min_reliable)
        super().__init__(
            f"Path-specific bound estimated from only {self.n_sampled} sampled "
            f"paths (< {self.min_reliable}); treat the bound as indicative."
        )


class NumericDegeneracyError(AsianImpactError, ArithmeticError):
    """Raised when an intermediate price is non-positive or non-finite.

    Valid inputs can never produce this; it signals an internal bug rather than
    a user error.
    """
