"""SQLAlchemy implementation of TransactionRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from portfolio_ledger.core.exceptions import NotFoundError
from portfolio_ledger.core.timezone import now_eastern, to_eastern
from portfolio_ledger.domain.models import Transaction
from portfolio_ledger.repositories.sqlalchemy.orm_models import TransactionORM


class SqlAlchemyTransactionRepository:
    """SQLAlchemy-backed transaction repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction."""
        orm_txn = self._to_orm(transaction)
        self._db.add(orm_txn)
        self._db.flush()
        return self._to_domain(orm_txn)

    def get_by_id(self, txn_id: str) -> Optional[Transaction]:
        """Retrieve transaction by ID."""
        orm_txn = self._db.get(TransactionORM, txn_id)
        return self._to_domain(orm_txn) if orm_txn else None

    def update(self, transaction: Transaction) -> Transaction:
        """Update an existing transaction."""
        orm_txn = self._db.get(TransactionORM, transaction.txn_id)
        if not orm_txn:
            raise NotFoundError("Transaction", transaction.txn_id)

        orm_txn.symbol = transaction.symbol
        orm_txn.txn_type = transaction.txn_type
        orm_txn.shares = transaction.shares
        orm_txn.price = transaction.price
        orm_txn.fees = transaction.fees
        orm_txn.note = transaction.note
        orm_txn.executed_at = to_eastern(transaction.executed_at)
        orm_txn.applied_seq = transaction.applied_seq
        orm_txn.updated_at = transaction.updated_at or now_eastern()

        self._db.flush()
        return self._to_domain(orm_txn)

    def delete(self, txn_id: str) -> None:
        self._db.query(TransactionORM).filter(TransactionORM.txn_id == txn_id).delete()
        self._db.flush()

    def list_by_portfolio(
        self,
        portfolio_id: str,
        symbols: Optional[list[str]] = None,
    ) -> list[Transaction]:
        """List transactions in application order, optionally for some symbols."""
        query = self._db.query(TransactionORM).filter(
            TransactionORM.portfolio_id == portfolio_id
        )
        if symbols is not None:
            query = query.filter(TransactionORM.symbol.in_(symbols))
        query = query.order_by(TransactionORM.applied_seq)
        return [self._to_domain(t) for t in query.all()]

    def list_page(self, portfolio_id: str, limit: int, offset: int) -> list[Transaction]:
        """List transactions newest first (by executed_at)."""
        query = (
            self._db.query(TransactionORM)
            .filter(TransactionORM.portfolio_id == portfolio_id)
            .order_by(TransactionORM.executed_at.desc(), TransactionORM.applied_seq.desc())
            .offset(offset)
            .limit(limit)
        )
        return [self._to_domain(t) for t in query.all()]

    def count_by_portfolio(self, portfolio_id: str) -> int:
        return (
            self._db.query(TransactionORM)
            .filter(TransactionORM.portfolio_id == portfolio_id)
            .count()
        )

    def max_applied_seq(self, portfolio_id: str) -> int:
        value = (
            self._db.query(func.max(TransactionORM.applied_seq))
            .filter(TransactionORM.portfolio_id == portfolio_id)
            .scalar()
        )
        return int(value or 0)

    @staticmethod
    def _to_orm(txn: Transaction) -> TransactionORM:
        """Convert domain model to ORM model."""
        return TransactionORM(
            txn_id=txn.txn_id,
            portfolio_id=txn.portfolio_id,
            symbol=txn.symbol,
            txn_type=txn.txn_type,
            shares=txn.shares,
            price=txn.price,
            fees=txn.fees,
            note=txn.note,
            executed_at=to_eastern(txn.executed_at),
            applied_seq=txn.applied_seq,
            created_at=txn.created_at or now_eastern(),
            updated_at=txn.updated_at,
        )

    @staticmethod
    def _to_domain(orm: TransactionORM) -> Transaction:
        """Convert ORM model to domain model."""
        return Transaction(
            txn_id=orm.txn_id,
            portfolio_id=orm.portfolio_id,
            symbol=orm.symbol,
            txn_type=orm.txn_type,
            shares=Decimal(str(orm.shares)),
            price=Decimal(str(orm.price)),
            fees=Decimal(str(orm.fees)) if orm.fees is not None else Decimal("0"),
            note=orm.note,
            executed_at=to_eastern(orm.executed_at),
            applied_seq=orm.applied_seq or 0,
            created_at=to_eastern(orm.created_at) if orm.created_at else None,
            updated_at=to_eastern(orm.updated_at) if orm.updated_at else None,
        )
