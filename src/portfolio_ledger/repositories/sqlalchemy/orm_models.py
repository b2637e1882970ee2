"""SQLAlchemy ORM model definitions."""

from decimal import Decimal

from sqlalchemy import (
    Column,
    String,
    Date,
    DateTime,
    Boolean,
    Integer,
    Text,
    ForeignKey,
    Numeric,
    Index,
    Enum as SqlEnum,
)
from sqlalchemy.orm import relationship

from portfolio_ledger.core.timezone import now_eastern
from portfolio_ledger.domain.models.enums import TransactionType
from portfolio_ledger.repositories.sqlalchemy.database import Base

# Shares, prices and money share one fixed scale
LEDGER_NUMERIC = Numeric(precision=20, scale=8)


class PortfolioORM(Base):
    """SQLAlchemy model for Portfolio."""

    __tablename__ = "portfolios"

    portfolio_id = Column(String(36), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    cash_balance = Column(LEDGER_NUMERIC, nullable=False, default=Decimal("0"))
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=now_eastern)
    updated_at = Column(DateTime, nullable=True)

    transactions = relationship("TransactionORM", back_populates="portfolio")
    holdings = relationship("HoldingORM", back_populates="portfolio")


class TransactionORM(Base):
    """SQLAlchemy model for Transaction (journal entry)."""

    __tablename__ = "transactions"

    txn_id = Column(String(36), primary_key=True)
    portfolio_id = Column(
        String(36), ForeignKey("portfolios.portfolio_id"), nullable=False
    )
    symbol = Column(String(20), nullable=False)
    txn_type = Column(SqlEnum(TransactionType), nullable=False)
    shares = Column(LEDGER_NUMERIC, nullable=False)
    price = Column(LEDGER_NUMERIC, nullable=False)
    fees = Column(LEDGER_NUMERIC, nullable=False, default=Decimal("0"))
    note = Column(Text, nullable=True)
    executed_at = Column(DateTime, nullable=False)
    applied_seq = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=now_eastern)
    updated_at = Column(DateTime, nullable=True)

    portfolio = relationship("PortfolioORM", back_populates="transactions")

    __table_args__ = (
        Index("ix_transactions_portfolio_symbol", "portfolio_id", "symbol"),
        Index("ix_transactions_portfolio_executed", "portfolio_id", "executed_at"),
    )


class HoldingORM(Base):
    """SQLAlchemy model for Holding (derived position per symbol)."""

    __tablename__ = "holdings"

    portfolio_id = Column(
        String(36), ForeignKey("portfolios.portfolio_id"), primary_key=True
    )
    symbol = Column(String(20), primary_key=True)
    total_shares = Column(LEDGER_NUMERIC, nullable=False)
    average_cost = Column(LEDGER_NUMERIC, nullable=False)
    first_purchase_date = Column(Date, nullable=True)
    updated_at = Column(DateTime, nullable=True)

    portfolio = relationship("PortfolioORM", back_populates="holdings")


class TaxLotORM(Base):
    """SQLAlchemy model for TaxLot."""

    __tablename__ = "tax_lots"

    lot_id = Column(String(36), primary_key=True)
    portfolio_id = Column(
        String(36), ForeignKey("portfolios.portfolio_id"), nullable=False
    )
    symbol = Column(String(20), nullable=False)
    purchase_date = Column(Date, nullable=False)
    shares_remaining = Column(LEDGER_NUMERIC, nullable=False)
    cost_per_share = Column(LEDGER_NUMERIC, nullable=False)
    txn_id = Column(String(36), ForeignKey("transactions.txn_id"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=now_eastern)

    sales = relationship("LotSaleORM", back_populates="lot")

    __table_args__ = (
        Index("ix_tax_lots_portfolio_symbol", "portfolio_id", "symbol"),
    )


class LotSaleORM(Base):
    """SQLAlchemy model for LotSale (realized gain record)."""

    __tablename__ = "lot_sales"

    sale_id = Column(String(36), primary_key=True)
    lot_id = Column(String(36), ForeignKey("tax_lots.lot_id"), nullable=False)
    sell_txn_id = Column(
        String(36), ForeignKey("transactions.txn_id"), nullable=False, index=True
    )
    shares_sold = Column(LEDGER_NUMERIC, nullable=False)
    sale_price = Column(LEDGER_NUMERIC, nullable=False)
    realized_gain = Column(LEDGER_NUMERIC, nullable=False)
    is_short_term = Column(Boolean, nullable=False)
    sale_date = Column(Date, nullable=False)
    created_at = Column(DateTime, nullable=False, default=now_eastern)

    lot = relationship("TaxLotORM", back_populates="sales")
