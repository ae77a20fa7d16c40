"""
asian_impact

Asian option pricing in a binomial model with hedging price impact.

The package exposes the main user-facing functions at the top level, so you
can write, for example:

    from asian_impact import price_geometric_asian, arithmetic_asian_bounds
"""

# Re-export pricing entrypoints (nice public names)
from .config import EnumerationConfig, MCConfig, RandomConfig, SamplingConfig
from .exceptions import (
    ArbitrageViolationError,
    AsianImpactError,
    AsianImpactWarning,
    InvalidParameterError,
    NumericDegeneracyError,
    PathExplosionError,
    PathExplosionWarning,
    SampleSizeWarning,
)
from .models.impact_binomial import check_no_arbitrage, compute_effective_factors
from .pricers.black_scholes import (
    price_black_scholes_binomial,
    price_kemna_vorst_binomial,
)
from .pricers.bounds import arithmetic_asian_bounds, arithmetic_bounds
from .pricers.mc import mc_arithmetic_asian, mc_arithmetic_asian_binomial
from .pricers.tree import (
    european_impact_price,
    geometric_asian_price,
    price_european_impact,
    price_geometric_asian,
)
from .types import BinomialParameters, BoundsResult, EffectiveFactors, OptionType

__all__ = [
    # Types
    "OptionType",
    "BinomialParameters",
    "EffectiveFactors",
    "BoundsResult",
    # Config
    "EnumerationConfig",
    "SamplingConfig",
    "RandomConfig",
    "MCConfig",
    # Errors / warnings
    "AsianImpactError",
    "AsianImpactWarning",
    "InvalidParameterError",
    "ArbitrageViolationError",
    "PathExplosionError",
    "PathExplosionWarning",
    "SampleSizeWarning",
    "NumericDegeneracyError",
    # Core
    "compute_effective_factors",
    "check_no_arbitrage",
    "price_geometric_asian",
    "geometric_asian_price",
    "arithmetic_asian_bounds",
    "arithmetic_bounds",
    # Benchmarks
    "price_european_impact",
    "european_impact_price",
    "price_black_scholes_binomial",
    "price_kemna_vorst_binomial",
    "mc_arithmetic_asian",
    "mc_arithmetic_asian_binomial",
]
