"""Domain layer - pure business models and ledger rules with no storage dependencies."""

from portfolio_ledger.domain.models import (
    Portfolio,
    Transaction,
    Holding,
    TaxLot,
    LotSale,
    TransactionType,
)

__all__ = [
    "Portfolio",
    "Transaction",
    "Holding",
    "TaxLot",
    "LotSale",
    "TransactionType",
]
