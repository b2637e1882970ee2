"""SQLAlchemy implementation of PortfolioRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from portfolio_ledger.core.exceptions import NotFoundError
from portfolio_ledger.core.timezone import now_eastern, to_eastern
from portfolio_ledger.domain.models import Portfolio
from portfolio_ledger.repositories.sqlalchemy.orm_models import (
    HoldingORM,
    LotSaleORM,
    PortfolioORM,
    TaxLotORM,
    TransactionORM,
)


class SqlAlchemyPortfolioRepository:
    """SQLAlchemy-backed portfolio repository. Flushes; the unit of work commits."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, portfolio: Portfolio) -> Portfolio:
        """Persist a new portfolio."""
        orm_portfolio = self._to_orm(portfolio)
        self._db.add(orm_portfolio)
        self._db.flush()
        return self._to_domain(orm_portfolio)

    def get_by_id(self, portfolio_id: str) -> Optional[Portfolio]:
        """Retrieve portfolio by ID."""
        orm_portfolio = self._db.get(PortfolioORM, portfolio_id)
        return self._to_domain(orm_portfolio) if orm_portfolio else None

    def list_by_user(self, user_id: str) -> list[Portfolio]:
        """List a user's portfolios, default first, then oldest first."""
        orm_portfolios = (
            self._db.query(PortfolioORM)
            .filter(PortfolioORM.user_id == user_id)
            .order_by(PortfolioORM.is_default.desc(), PortfolioORM.created_at)
            .all()
        )
        return [self._to_domain(p) for p in orm_portfolios]

    def count_by_user(self, user_id: str) -> int:
        return self._db.query(PortfolioORM).filter(PortfolioORM.user_id == user_id).count()

    def update(self, portfolio: Portfolio) -> Portfolio:
        """Update name, description and cash balance."""
        orm_portfolio = self._get_orm(portfolio.portfolio_id)
        orm_portfolio.name = portfolio.name
        orm_portfolio.description = portfolio.description
        orm_portfolio.cash_balance = portfolio.cash_balance
        orm_portfolio.updated_at = now_eastern()
        self._db.flush()
        return self._to_domain(orm_portfolio)

    def update_cash(self, portfolio_id: str, cash_balance: Decimal) -> None:
        orm_portfolio = self._get_orm(portfolio_id)
        orm_portfolio.cash_balance = cash_balance
        orm_portfolio.updated_at = now_eastern()
        self._db.flush()

    def delete(self, portfolio_id: str) -> None:
        """Delete a portfolio and everything it owns, children first."""
        lot_ids = select(TaxLotORM.lot_id).where(TaxLotORM.portfolio_id == portfolio_id)
        self._db.query(LotSaleORM).filter(LotSaleORM.lot_id.in_(lot_ids)).delete(
            synchronize_session=False
        )
        for model in (TaxLotORM, HoldingORM, TransactionORM):
            self._db.query(model).filter(model.portfolio_id == portfolio_id).delete(
                synchronize_session=False
            )
        self._db.query(PortfolioORM).filter(
            PortfolioORM.portfolio_id == portfolio_id
        ).delete(synchronize_session=False)
        self._db.flush()
        self._db.expire_all()

    def _get_orm(self, portfolio_id: str) -> PortfolioORM:
        orm_portfolio = self._db.get(PortfolioORM, portfolio_id)
        if not orm_portfolio:
            raise NotFoundError("Portfolio", portfolio_id)
        return orm_portfolio

    @staticmethod
    def _to_orm(portfolio: Portfolio) -> PortfolioORM:
        """Convert domain model to ORM model."""
        return PortfolioORM(
            portfolio_id=portfolio.portfolio_id,
            user_id=portfolio.user_id,
            name=portfolio.name,
            description=portfolio.description,
            cash_balance=portfolio.cash_balance,
            is_default=portfolio.is_default,
            created_at=portfolio.created_at or now_eastern(),
            updated_at=portfolio.updated_at,
        )

    @staticmethod
    def _to_domain(orm: PortfolioORM) -> Portfolio:
        """Convert ORM model to domain model."""
        return Portfolio(
            portfolio_id=orm.portfolio_id,
            user_id=orm.user_id,
            name=orm.name,
            description=orm.description,
            cash_balance=Decimal(str(orm.cash_balance)) if orm.cash_balance is not None else Decimal("0"),
            is_default=bool(orm.is_default),
            created_at=to_eastern(orm.created_at) if orm.created_at else None,
            updated_at=to_eastern(orm.updated_at) if orm.updated_at else None,
        )
