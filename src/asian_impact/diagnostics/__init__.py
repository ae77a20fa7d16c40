"""Comparison tables for notebooks and reports (requires pandas)."""

from .comparison import (
    bounds_vs_mc_table,
    default_cases,
    kemna_vorst_table,
    price_impact_table,
)

__all__ = [
    "default_cases",
    "bounds_vs_mc_table",
    "price_impact_table",
    "kemna_vorst_table",
]
