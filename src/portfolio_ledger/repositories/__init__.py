"""Repository layer - data access abstractions and implementations."""

from portfolio_ledger.repositories.protocols import (
    PortfolioRepository,
    TransactionRepository,
    LedgerRepository,
    UnitOfWork,
)

__all__ = [
    "PortfolioRepository",
    "TransactionRepository",
    "LedgerRepository",
    "UnitOfWork",
]
