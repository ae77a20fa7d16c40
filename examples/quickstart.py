from __future__ import annotations


def main() -> None:
    # [START README_QUICKSTART]
    from asian_impact import (
        BinomialParameters,
        OptionType,
        arithmetic_asian_bounds,
        check_no_arbitrage,
        compute_effective_factors,
        price_european_impact,
        price_geometric_asian,
    )
    from asian_impact.diagnostics import price_impact_table

    args = dict(S0=100.0, K=100.0, r=1.05, u=1.2, d=0.8, lam=0.1, v_u=1.0, v_d=1.0)

    print("No arbitrage:", check_no_arbitrage(1.05, 1.2, 0.8, 0.1, 1.0, 1.0))
    print("Factors:", compute_effective_factors(1.05, 1.2, 0.8, 0.1, 1.0, 1.0))

    print("Geometric Asian:", price_geometric_asian(**args, n=3, option_type=OptionType.CALL))
    print("European:", price_european_impact(**args, n=3))

    bounds = arithmetic_asian_bounds(**args, n=10, path_specific=True)
    print(bounds.summary())

    print(price_impact_table(BinomialParameters(**args, n=6)))
    # [END README_QUICKSTART]


if __name__ == "__main__":
    main()
