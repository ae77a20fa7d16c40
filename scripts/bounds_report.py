"""Print the comparison tables for the price-impact Asian pricer.

This script is a manual validation harness: bounds against Monte Carlo, prices
against the impact coefficient, and the zero-impact tree against the GBM
benchmarks.

Run from the repository root:

    PYTHONPATH=src python scripts/bounds_report.py --table bounds
    PYTHONPATH=src python scripts/bounds_report.py --table all --n-max 14 -v
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace

import pandas as pd

from asian_impact import (
    BinomialParameters,
    MCConfig,
    RandomConfig,
    SamplingConfig,
    arithmetic_bounds,
    geometric_asian_price,
)
from asian_impact.diagnostics import (
    bounds_vs_mc_table,
    default_cases,
    kemna_vorst_table,
    price_impact_table,
)

BASE = BinomialParameters(
    S0=100.0, K=100.0, r=1.05, u=1.2, d=0.8, lam=0.1, v_u=1.0, v_d=1.0, n=3
)


def _print_table(title: str, df: pd.DataFrame) -> None:
    print()
    print(title)
    print("-" * len(title))
    with pd.option_context("display.width", 120, "display.float_format", "{:.6g}".format):
        print(df.to_string())


def run_cases(n: int) -> None:
    rows = []
    for name, p in default_cases(BASE):
        p = replace(p, n=n)
        b = arithmetic_bounds(p, path_specific=True)
        rows.append(
            {
                "case": name,
                "geometric": geometric_asian_price(p),
                "upper_path": b.upper_bound_path_specific,
                "upper_global": b.upper_bound_global,
                "midpoint": b.midpoint,
            }
        )
    _print_table(f"Regimes at n={n}", pd.DataFrame(rows).set_index("case"))


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument(
        "--table", choices=["bounds", "impact", "kv", "cases", "all"], default="all"
    )
    ap.add_argument("--n-max", type=int, default=12)
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument("--mc-paths", type=int, default=50_000)
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    n_values = range(2, args.n_max + 1, 2)
    random = RandomConfig(seed=args.seed)

    if args.table in ("bounds", "all"):
        df = bounds_vs_mc_table(
            BASE,
            n_values,
            mc_cfg=MCConfig(n_paths=args.mc_paths, random=random),
            sampling=SamplingConfig(random=random),
        )
        _print_table("Arithmetic bounds vs control-variate MC", df)

    if args.table in ("impact", "all"):
        _print_table("Price impact", price_impact_table(BASE))

    if args.table in ("kv", "all"):
        _print_table("Zero-impact tree vs Kemna-Vorst", kemna_vorst_table(BASE, n_values))

    if args.table in ("cases", "all"):
        run_cases(min(args.n_max, 10))


if __name__ == "__main__":
    main()
