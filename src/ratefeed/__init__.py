"""Live swap-rate feed: price polling with simulation fallback and fee-adjusted quotes."""

__version__ = "0.1.0"
