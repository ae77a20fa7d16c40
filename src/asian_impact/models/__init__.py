"""Model definitions: the price-impact tree and GBM benchmarks."""
