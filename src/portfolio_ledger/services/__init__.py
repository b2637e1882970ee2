"""Service layer - orchestration over repositories and the ledger engine."""

from portfolio_ledger.services.locks import (
    PortfolioLockRegistry,
    get_lock_registry,
    reset_lock_registry,
)
from portfolio_ledger.services.ledger_service import (
    LedgerService,
    TransactionCreate,
    TransactionUpdate,
)
from portfolio_ledger.services.portfolio_service import PortfolioService
from portfolio_ledger.services.market_data_service import MarketDataService
from portfolio_ledger.services.valuation_service import ValuationService

__all__ = [
    "PortfolioLockRegistry",
    "get_lock_registry",
    "reset_lock_registry",
    "LedgerService",
    "TransactionCreate",
    "TransactionUpdate",
    "PortfolioService",
    "MarketDataService",
    "ValuationService",
]
