"""Dependency injection for FastAPI."""

from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from portfolio_ledger.config.settings import get_settings
from portfolio_ledger.providers import StubQuoteProvider
from portfolio_ledger.repositories.sqlalchemy import (
    get_db,
    SqlAlchemyLedgerRepository,
    SqlAlchemyPortfolioRepository,
    SqlAlchemyTransactionRepository,
    SqlAlchemyUnitOfWork,
)
from portfolio_ledger.services import (
    LedgerService,
    MarketDataService,
    PortfolioLockRegistry,
    PortfolioService,
    ValuationService,
    get_lock_registry,
)

# Quote cache outlives a single request
_market_data_service: Optional[MarketDataService] = None


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Resolve the caller from the X-User-Id header."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="X-User-Id header is required")
    return x_user_id.strip()


def get_portfolio_repo(db: Session = Depends(get_db)) -> SqlAlchemyPortfolioRepository:
    """Provide PortfolioRepository instance."""
    return SqlAlchemyPortfolioRepository(db)


def get_transaction_repo(db: Session = Depends(get_db)) -> SqlAlchemyTransactionRepository:
    """Provide TransactionRepository instance."""
    return SqlAlchemyTransactionRepository(db)


def get_ledger_repo(db: Session = Depends(get_db)) -> SqlAlchemyLedgerRepository:
    """Provide LedgerRepository instance."""
    return SqlAlchemyLedgerRepository(db)


def get_unit_of_work(db: Session = Depends(get_db)) -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(db)


def get_locks() -> PortfolioLockRegistry:
    return get_lock_registry()


def get_ledger_service(
    portfolio_repo: SqlAlchemyPortfolioRepository = Depends(get_portfolio_repo),
    transaction_repo: SqlAlchemyTransactionRepository = Depends(get_transaction_repo),
    ledger_repo: SqlAlchemyLedgerRepository = Depends(get_ledger_repo),
    unit_of_work: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    locks: PortfolioLockRegistry = Depends(get_locks),
) -> LedgerService:
    """Provide LedgerService instance."""
    return LedgerService(
        portfolio_repo=portfolio_repo,
        transaction_repo=transaction_repo,
        ledger_repo=ledger_repo,
        unit_of_work=unit_of_work,
        locks=locks,
    )


def get_portfolio_service(
    portfolio_repo: SqlAlchemyPortfolioRepository = Depends(get_portfolio_repo),
    transaction_repo: SqlAlchemyTransactionRepository = Depends(get_transaction_repo),
    ledger_repo: SqlAlchemyLedgerRepository = Depends(get_ledger_repo),
    unit_of_work: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    locks: PortfolioLockRegistry = Depends(get_locks),
) -> PortfolioService:
    """Provide PortfolioService instance."""
    return PortfolioService(
        portfolio_repo=portfolio_repo,
        transaction_repo=transaction_repo,
        ledger_repo=ledger_repo,
        unit_of_work=unit_of_work,
        locks=locks,
        recent_transactions_limit=get_settings().recent_transactions_limit,
    )


def get_market_data_service() -> MarketDataService:
    """Provide the shared MarketDataService (stub provider for offline operation)."""
    global _market_data_service
    if _market_data_service is None:
        _market_data_service = MarketDataService(
            provider=StubQuoteProvider(),
            cache_ttl_seconds=get_settings().quote_cache_ttl_seconds,
        )
    return _market_data_service


def get_valuation_service(
    ledger_service: LedgerService = Depends(get_ledger_service),
    market_data_service: MarketDataService = Depends(get_market_data_service),
) -> ValuationService:
    """Provide ValuationService instance."""
    return ValuationService(
        ledger_service=ledger_service,
        market_data_service=market_data_service,
    )
