"""Repository protocol definitions (interfaces)."""

from portfolio_ledger.repositories.protocols.portfolio_repo import PortfolioRepository
from portfolio_ledger.repositories.protocols.transaction_repo import TransactionRepository
from portfolio_ledger.repositories.protocols.ledger_repo import LedgerRepository
from portfolio_ledger.repositories.protocols.unit_of_work import UnitOfWork

__all__ = [
    "PortfolioRepository",
    "TransactionRepository",
    "LedgerRepository",
    "UnitOfWork",
]
