"""Portfolio ledger and tax-lot accounting engine."""

__version__ = "0.1.0"
