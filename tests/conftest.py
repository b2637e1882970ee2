"""
Pytest configuration and fixtures for portfolio ledger tests.

This module provides:
- In-memory SQLite database fixtures
- Factory helpers for portfolios, transactions and in-memory ledger states
- Deterministic and failing quote providers
- Time helpers for Eastern timezone
- Service and repository fixtures
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Optional

import pytest
from sqlalchemy import StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from portfolio_ledger.main import app
from portfolio_ledger.api import deps
from portfolio_ledger.repositories.sqlalchemy.database import Base, build_engine, get_db, reset_database
# Import ORM models to register them with Base before creating tables
from portfolio_ledger.repositories.sqlalchemy import orm_models  # noqa: F401
from portfolio_ledger.repositories.sqlalchemy import (
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
    TransactionCreate,
    ValuationService,
    reset_lock_registry,
)
from portfolio_ledger.domain.ledger import LedgerState
from portfolio_ledger.domain.models import Portfolio, Transaction, TransactionType
from portfolio_ledger.domain.views import Quote
from portfolio_ledger.core.timezone import EASTERN_TZ
from portfolio_ledger.config.settings import reset_settings

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


# =============================================================================
# TIMEZONE HELPERS
# =============================================================================


def eastern_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in US/Eastern timezone."""
    return EASTERN_TZ.localize(datetime(year, month, day, hour, minute, second))


def at(d: date, hour: int = 10) -> datetime:
    """Eastern datetime on a calendar date."""
    return eastern_datetime(d.year, d.month, d.day, hour)


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return eastern_datetime(2024, 6, 15, 14, 30, 0)


# =============================================================================
# IN-MEMORY LEDGER HELPERS
# =============================================================================


def make_state(
    symbols: tuple[str, ...] = ("AAPL",),
    cash: Decimal = Decimal("10000"),
    portfolio_id: str = "pf-001",
) -> LedgerState:
    """Empty ledger state for the given symbols."""
    return LedgerState(portfolio_id=portfolio_id, cash_balance=cash, symbols=set(symbols))


def make_txn(
    txn_type: TransactionType,
    shares: str,
    price: str = "0",
    symbol: str = "AAPL",
    fees: str = "0",
    executed_at: Optional[datetime] = None,
    txn_id: Optional[str] = None,
    portfolio_id: str = "pf-001",
) -> Transaction:
    """Unsaved transaction for pure ledger tests."""
    return Transaction(
        txn_id=txn_id or str(uuid.uuid4()),
        portfolio_id=portfolio_id,
        symbol=symbol,
        txn_type=txn_type,
        shares=Decimal(shares),
        price=Decimal(price),
        fees=Decimal(fees),
        executed_at=executed_at or eastern_datetime(2024, 1, 15),
    )


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    # Reset settings for clean state
    reset_settings()

    engine = build_engine("sqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_session_factory(test_engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def test_session(test_session_factory) -> Session:
    """Create test database session."""
    session = test_session_factory()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def portfolio_repo(test_session) -> SqlAlchemyPortfolioRepository:
    """Provide test PortfolioRepository."""
    return SqlAlchemyPortfolioRepository(test_session)


@pytest.fixture
def transaction_repo(test_session) -> SqlAlchemyTransactionRepository:
    """Provide test TransactionRepository."""
    return SqlAlchemyTransactionRepository(test_session)


@pytest.fixture
def ledger_repo(test_session) -> SqlAlchemyLedgerRepository:
    """Provide test LedgerRepository."""
    return SqlAlchemyLedgerRepository(test_session)


@pytest.fixture
def unit_of_work(test_session) -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(test_session)


@pytest.fixture
def lock_registry() -> PortfolioLockRegistry:
    return PortfolioLockRegistry()


# =============================================================================
# QUOTE PROVIDER FIXTURES
# =============================================================================


class DeterministicQuoteProvider:
    """
    Deterministic quote provider for testing.

    Provides fixed quotes with no randomness and counts provider calls.
    """

    FIXED_QUOTES = {
        "AAPL": (Decimal("185.50"), Decimal("184.25")),
        "MSFT": (Decimal("378.25"), Decimal("376.80")),
        "TSLA": (Decimal("248.75"), Decimal("250.10")),
        "SPY": (Decimal("485.25"), Decimal("484.10")),
    }

    def __init__(self, as_of: Optional[datetime] = None):
        self._as_of = as_of or eastern_datetime(2024, 6, 15, 16, 0, 0)
        self.calls = 0

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """Return deterministic quotes for requested symbols."""
        self.calls += 1
        result = {}
        for symbol in symbols:
            upper_symbol = symbol.upper()
            if upper_symbol in self.FIXED_QUOTES:
                last_price, prev_close = self.FIXED_QUOTES[upper_symbol]
                result[upper_symbol] = Quote(
                    symbol=upper_symbol,
                    last_price=last_price,
                    prev_close=prev_close,
                    as_of=self._as_of,
                )
        return result


class FailingQuoteProvider:
    """Quote provider that always raises an exception."""

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        raise ConnectionError("Network unavailable")


@pytest.fixture
def deterministic_provider(fixed_now) -> DeterministicQuoteProvider:
    """Provide deterministic quote provider."""
    return DeterministicQuoteProvider(as_of=fixed_now)


@pytest.fixture
def failing_provider() -> FailingQuoteProvider:
    """Provide a quote provider that always fails."""
    return FailingQuoteProvider()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def ledger_service(
    portfolio_repo,
    transaction_repo,
    ledger_repo,
    unit_of_work,
    lock_registry,
) -> LedgerService:
    """Provide test LedgerService."""
    return LedgerService(
        portfolio_repo=portfolio_repo,
        transaction_repo=transaction_repo,
        ledger_repo=ledger_repo,
        unit_of_work=unit_of_work,
        locks=lock_registry,
    )


@pytest.fixture
def portfolio_service(
    portfolio_repo,
    transaction_repo,
    ledger_repo,
    unit_of_work,
    lock_registry,
) -> PortfolioService:
    """Provide test PortfolioService."""
    return PortfolioService(
        portfolio_repo=portfolio_repo,
        transaction_repo=transaction_repo,
        ledger_repo=ledger_repo,
        unit_of_work=unit_of_work,
        locks=lock_registry,
        recent_transactions_limit=3,
    )


@pytest.fixture
def market_data_service(deterministic_provider) -> MarketDataService:
    """Provide test MarketDataService with deterministic provider."""
    return MarketDataService(
        provider=deterministic_provider,
        cache_ttl_seconds=60,
    )


@pytest.fixture
def valuation_service(ledger_service, market_data_service) -> ValuationService:
    """Provide test ValuationService."""
    return ValuationService(
        ledger_service=ledger_service,
        market_data_service=market_data_service,
    )


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def portfolio_factory(portfolio_service) -> Callable[..., Portfolio]:
    """Factory for creating test portfolios."""

    def _create_portfolio(
        user_id: str = USER_ID,
        name: Optional[str] = None,
        cash_balance: Decimal = Decimal("10000"),
    ) -> Portfolio:
        if name is None:
            name = f"Test Portfolio {uuid.uuid4().hex[:8]}"
        return portfolio_service.create_portfolio(
            user_id,
            name=name,
            cash_balance=cash_balance,
        )

    return _create_portfolio


@pytest.fixture
def transaction_factory(ledger_service) -> Callable[..., Transaction]:
    """Factory for applying test transactions through the ledger service."""

    def _apply(
        portfolio_id: str,
        txn_type: TransactionType,
        shares: str,
        price: Optional[str] = None,
        symbol: str = "AAPL",
        fees: str = "0",
        executed_at: Optional[datetime] = None,
        note: Optional[str] = None,
        user_id: str = USER_ID,
    ) -> Transaction:
        return ledger_service.apply_transaction(
            user_id,
            portfolio_id,
            TransactionCreate(
                symbol=symbol,
                txn_type=txn_type,
                shares=Decimal(shares),
                price=Decimal(price) if price is not None else None,
                fees=Decimal(fees),
                executed_at=executed_at or eastern_datetime(2024, 1, 15),
                note=note,
            ),
        )

    return _apply


# =============================================================================
# PRESET DATA FIXTURES
# =============================================================================


@pytest.fixture
def sample_portfolio(portfolio_factory) -> Portfolio:
    """Default portfolio with $10,000 cash."""
    return portfolio_factory(name="Brokerage")


@pytest.fixture
def portfolio_with_two_lots(sample_portfolio, transaction_factory) -> tuple[Portfolio, dict]:
    """Portfolio holding two AAPL lots: 10 @ $10 then 10 @ $20."""
    first = transaction_factory(
        sample_portfolio.portfolio_id,
        TransactionType.BUY,
        "10",
        "10",
        executed_at=eastern_datetime(2024, 1, 10),
    )
    second = transaction_factory(
        sample_portfolio.portfolio_id,
        TransactionType.BUY,
        "10",
        "20",
        executed_at=eastern_datetime(2024, 2, 10),
    )
    return sample_portfolio, {"first": first, "second": second}


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(test_engine, test_session_factory, deterministic_provider, monkeypatch) -> TestClient:
    """Provide FastAPI test client with test database."""
    monkeypatch.setenv("PORTFOLIO_LEDGER_DATABASE_URL", "sqlite:///:memory:")
    reset_settings()
    reset_database()
    reset_lock_registry()

    def override_get_db():
        session = test_session_factory()
        try:
            yield session
        finally:
            session.close()

    def override_market_data_service() -> MarketDataService:
        return MarketDataService(provider=deterministic_provider, cache_ttl_seconds=60)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_market_data_service] = override_market_data_service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    reset_database()
    reset_settings()


def user_headers(user_id: str = USER_ID) -> dict[str, str]:
    return {"X-User-Id": user_id}
