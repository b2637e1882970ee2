"""View models for portfolio and valuation outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from portfolio_ledger.domain.models import Portfolio, Holding, Transaction


@dataclass
class PortfolioSummary:
    """Portfolio list entry with holding aggregates."""

    portfolio: Portfolio
    holdings_count: int = 0
    total_invested: Decimal = field(default_factory=lambda: Decimal("0"))


@dataclass
class PortfolioDetail:
    """Portfolio with its holdings and most recent transactions."""

    portfolio: Portfolio
    holdings: list[Holding] = field(default_factory=list)
    recent_transactions: list[Transaction] = field(default_factory=list)


@dataclass
class TransactionPage:
    """One page of a portfolio's transactions, newest first."""

    transactions: list[Transaction]
    total: int
    limit: int
    offset: int


@dataclass
class Quote:
    """Market quote data for a symbol."""

    symbol: str
    last_price: Decimal
    prev_close: Decimal
    as_of: datetime


@dataclass
class PositionValuation:
    """A holding priced at the latest quote (display only)."""

    symbol: str
    total_shares: Decimal
    average_cost: Decimal
    cost_basis: Decimal
    last_price: Optional[Decimal] = None
    market_value: Optional[Decimal] = None
    unrealized_pnl: Optional[Decimal] = None
    unrealized_pnl_pct: Optional[Decimal] = None
    weight_pct: Optional[Decimal] = None


@dataclass
class ValuationView:
    """Portfolio valuation: cash plus priced holdings."""

    cash_balance: Decimal
    positions: list[PositionValuation] = field(default_factory=list)
    market_value: Decimal = field(default_factory=lambda: Decimal("0"))
    total_value: Decimal = field(default_factory=lambda: Decimal("0"))
    as_of: Optional[datetime] = None
