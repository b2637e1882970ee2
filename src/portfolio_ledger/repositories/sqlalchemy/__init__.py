"""SQLAlchemy repository implementations."""

from portfolio_ledger.repositories.sqlalchemy.database import (
    build_engine,
    get_engine,
    get_session_factory,
    get_db,
    init_db,
    reset_database,
    Base,
)
from portfolio_ledger.repositories.sqlalchemy.portfolio_repo import SqlAlchemyPortfolioRepository
from portfolio_ledger.repositories.sqlalchemy.transaction_repo import SqlAlchemyTransactionRepository
from portfolio_ledger.repositories.sqlalchemy.ledger_repo import SqlAlchemyLedgerRepository
from portfolio_ledger.repositories.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork

__all__ = [
    "build_engine",
    "get_engine",
    "get_session_factory",
    "get_db",
    "init_db",
    "reset_database",
    "Base",
    "SqlAlchemyPortfolioRepository",
    "SqlAlchemyTransactionRepository",
    "SqlAlchemyLedgerRepository",
    "SqlAlchemyUnitOfWork",
]
