"""Domain models package."""

from portfolio_ledger.domain.models.enums import TransactionType
from portfolio_ledger.domain.models.portfolio import Portfolio
from portfolio_ledger.domain.models.transaction import Transaction
from portfolio_ledger.domain.models.holding import Holding
from portfolio_ledger.domain.models.tax_lot import TaxLot, LotSale

__all__ = [
    "TransactionType",
    "Portfolio",
    "Transaction",
    "Holding",
    "TaxLot",
    "LotSale",
]
