"""Ledger service: apply, amend and remove journal transactions atomically."""

import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Generator, Optional

from portfolio_ledger.core.exceptions import (
    ConflictError,
    LedgerConsistencyError,
    NotFoundError,
    ValidationError,
)
from portfolio_ledger.core.timezone import now_eastern, to_eastern
from portfolio_ledger.domain import ledger
from portfolio_ledger.domain.ledger import LedgerState, lot_sales
from portfolio_ledger.domain.models import (
    Holding,
    Portfolio,
    TaxLot,
    Transaction,
    TransactionType,
)
from portfolio_ledger.domain.views import RealizedGainsReport, TransactionPage
from portfolio_ledger.repositories.protocols import (
    LedgerRepository,
    PortfolioRepository,
    TransactionRepository,
    UnitOfWork,
)
from portfolio_ledger.services.locks import PortfolioLockRegistry

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 500


@dataclass
class TransactionCreate:
    """Input data for applying a transaction."""

    symbol: str
    txn_type: TransactionType
    shares: Decimal
    price: Optional[Decimal] = None
    fees: Decimal = Decimal("0")
    executed_at: Optional[datetime] = None
    note: Optional[str] = None


@dataclass
class TransactionUpdate:
    """Partial update data for amending a transaction."""

    symbol: Optional[str] = None
    txn_type: Optional[TransactionType] = None
    shares: Optional[Decimal] = None
    price: Optional[Decimal] = None
    fees: Optional[Decimal] = None
    executed_at: Optional[datetime] = None
    note: Optional[str] = None


class LedgerService:
    """
    Orchestrates ledger writes for a portfolio.

    Every write follows the same sequence: ownership check, portfolio lock,
    load the ledger state of the affected symbols, run the pure engine,
    persist the before/after difference inside one unit of work. Any error
    rolls the whole write back.
    """

    def __init__(
        self,
        portfolio_repo: PortfolioRepository,
        transaction_repo: TransactionRepository,
        ledger_repo: LedgerRepository,
        unit_of_work: UnitOfWork,
        locks: PortfolioLockRegistry,
    ):
        self._portfolio_repo = portfolio_repo
        self._transaction_repo = transaction_repo
        self._ledger_repo = ledger_repo
        self._uow = unit_of_work
        self._locks = locks

    # =========================================================================
    # Writes
    # =========================================================================

    def apply_transaction(
        self,
        user_id: str,
        portfolio_id: str,
        data: TransactionCreate,
    ) -> Transaction:
        """
        Append a transaction to the journal and apply its ledger effects.

        Raises:
            NotFoundError: portfolio missing or not owned by user_id
            ValidationError: malformed input
            InsufficientFundsError: buy costs more than the cash balance
            InsufficientSharesError: sell exceeds the holding
        """
        self.get_owned_portfolio(user_id, portfolio_id)
        txn = self._build_transaction(portfolio_id, data)
        ledger.validate_transaction(txn)

        with self._locks.hold(portfolio_id), self._logged("apply", portfolio_id, txn.txn_id):
            with self._uow.atomic():
                before = self._load_state(portfolio_id, [txn.symbol])
                after = ledger.apply_transaction(before, txn)
                applied = self._transaction_repo.create(after.get_txn(txn.txn_id))
                self._persist(before, after)

        logger.info(
            f"Applied {applied.txn_type.value} {applied.txn_id} "
            f"({applied.shares} {applied.symbol} @ {applied.price}) to portfolio {portfolio_id}"
        )
        return applied

    def amend_transaction(
        self,
        user_id: str,
        portfolio_id: str,
        txn_id: str,
        patch: TransactionUpdate,
    ) -> Transaction:
        """
        Amend a transaction by reversing it and replaying the merged fields.

        A change to the note only is written without touching the ledger.

        Raises:
            NotFoundError: portfolio or transaction missing or not owned
            ConflictError: reversal would need later transactions reversed first
        """
        self.get_owned_portfolio(user_id, portfolio_id)

        with self._locks.hold(portfolio_id), self._logged("amend", portfolio_id, txn_id):
            with self._uow.atomic():
                original = self._get_transaction(portfolio_id, txn_id)
                updated = self._merge(original, patch)
                ledger.validate_transaction(updated)

                if not ledger.changes_ledger_effects(original, updated):
                    result = self._transaction_repo.update(
                        replace(updated, updated_at=now_eastern())
                    )
                else:
                    symbols = sorted({original.symbol, updated.symbol})
                    before = self._load_state(portfolio_id, symbols)
                    after = ledger.amend_transaction(before, txn_id, updated)
                    result = self._transaction_repo.update(
                        replace(after.get_txn(txn_id), updated_at=now_eastern())
                    )
                    self._persist(before, after)

        logger.info(f"Amended {result.txn_type.value} {txn_id} in portfolio {portfolio_id}")
        return result

    def remove_transaction(self, user_id: str, portfolio_id: str, txn_id: str) -> None:
        """
        Reverse a transaction's ledger effects, then delete it.

        Raises:
            NotFoundError: portfolio or transaction missing or not owned
            ConflictError: reversal would need later transactions reversed first
        """
        self.get_owned_portfolio(user_id, portfolio_id)

        with self._locks.hold(portfolio_id), self._logged("remove", portfolio_id, txn_id):
            with self._uow.atomic():
                original = self._get_transaction(portfolio_id, txn_id)
                before = self._load_state(portfolio_id, [original.symbol])
                after = ledger.reverse_transaction(before, txn_id)
                self._persist(before, after)
                self._transaction_repo.delete(txn_id)

        logger.info(f"Removed {original.txn_type.value} {txn_id} from portfolio {portfolio_id}")

    # =========================================================================
    # Reads
    # =========================================================================

    def get_holdings(self, user_id: str, portfolio_id: str) -> list[Holding]:
        self.get_owned_portfolio(user_id, portfolio_id)
        return self._ledger_repo.list_holdings(portfolio_id)

    def get_tax_lots(
        self,
        user_id: str,
        portfolio_id: str,
        symbol: str,
        include_closed: bool = False,
    ) -> list[TaxLot]:
        """Tax lots of a symbol in FIFO order; open lots only unless include_closed."""
        self.get_owned_portfolio(user_id, portfolio_id)
        return self._ledger_repo.list_lots(
            portfolio_id,
            symbols=[_normalize_symbol(symbol)],
            open_only=not include_closed,
        )

    def get_realized_gains(
        self,
        user_id: str,
        portfolio_id: str,
        year: Optional[int] = None,
        symbol: Optional[str] = None,
    ) -> RealizedGainsReport:
        """Lot sales filtered by sale year and symbol, with term and gain/loss totals."""
        self.get_owned_portfolio(user_id, portfolio_id)
        symbol = _normalize_symbol(symbol) if symbol else None
        records = self._ledger_repo.list_lot_sales(
            portfolio_id,
            symbols=[symbol] if symbol else None,
            year=year,
        )
        return lot_sales.query(records, year=year, symbol=symbol)

    def list_transactions(
        self,
        user_id: str,
        portfolio_id: str,
        limit: int = 50,
        offset: int = 0,
    ) -> TransactionPage:
        """One page of the journal, newest first."""
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
        if offset < 0:
            raise ValidationError("offset cannot be negative")

        self.get_owned_portfolio(user_id, portfolio_id)
        return TransactionPage(
            transactions=self._transaction_repo.list_page(portfolio_id, limit, offset),
            total=self._transaction_repo.count_by_portfolio(portfolio_id),
            limit=limit,
            offset=offset,
        )

    def get_transaction(self, user_id: str, portfolio_id: str, txn_id: str) -> Transaction:
        self.get_owned_portfolio(user_id, portfolio_id)
        return self._get_transaction(portfolio_id, txn_id)

    def get_owned_portfolio(self, user_id: str, portfolio_id: str) -> Portfolio:
        """Portfolio by id, or NotFoundError when it is missing or owned by someone else."""
        portfolio = self._portfolio_repo.get_by_id(portfolio_id)
        if not portfolio or portfolio.user_id != user_id:
            raise NotFoundError("Portfolio", portfolio_id)
        return portfolio

    # =========================================================================
    # Helpers
    # =========================================================================

    def _load_state(self, portfolio_id: str, symbols: list[str]) -> LedgerState:
        portfolio = self._portfolio_repo.get_by_id(portfolio_id)
        if not portfolio:
            raise NotFoundError("Portfolio", portfolio_id)
        return LedgerState(
            portfolio_id=portfolio_id,
            cash_balance=portfolio.cash_balance,
            symbols=set(symbols),
            journal=self._transaction_repo.list_by_portfolio(portfolio_id, symbols=symbols),
            holdings={
                h.symbol: h for h in self._ledger_repo.list_holdings(portfolio_id, symbols=symbols)
            },
            lots=self._ledger_repo.list_lots(portfolio_id, symbols=symbols),
            lot_sales=self._ledger_repo.list_lot_sales(portfolio_id, symbols=symbols),
            last_seq=self._transaction_repo.max_applied_seq(portfolio_id),
        )

    def _persist(self, before: LedgerState, after: LedgerState) -> None:
        self._ledger_repo.save_state(before, after)
        if after.cash_balance != before.cash_balance:
            self._portfolio_repo.update_cash(after.portfolio_id, after.cash_balance)

    def _get_transaction(self, portfolio_id: str, txn_id: str) -> Transaction:
        txn = self._transaction_repo.get_by_id(txn_id)
        if not txn or txn.portfolio_id != portfolio_id:
            raise NotFoundError("Transaction", txn_id)
        return txn

    def _build_transaction(self, portfolio_id: str, data: TransactionCreate) -> Transaction:
        txn_type = _parse_type(data.txn_type)
        now = now_eastern()
        return Transaction(
            txn_id=str(uuid.uuid4()),
            portfolio_id=portfolio_id,
            symbol=_normalize_symbol(data.symbol),
            txn_type=txn_type,
            shares=_parse_decimal("shares", data.shares),
            price=_default_price(txn_type, data.price),
            fees=_parse_decimal("fees", data.fees if data.fees is not None else Decimal("0")),
            executed_at=to_eastern(data.executed_at) if data.executed_at else now,
            note=data.note,
            created_at=now,
        )

    @staticmethod
    def _merge(original: Transaction, patch: TransactionUpdate) -> Transaction:
        """Overlay the non-null fields of patch onto original."""
        txn_type = _parse_type(patch.txn_type) if patch.txn_type is not None else original.txn_type
        return replace(
            original,
            symbol=_normalize_symbol(patch.symbol) if patch.symbol is not None else original.symbol,
            txn_type=txn_type,
            shares=_parse_decimal("shares", patch.shares) if patch.shares is not None else original.shares,
            price=_parse_decimal("price", patch.price) if patch.price is not None else original.price,
            fees=_parse_decimal("fees", patch.fees) if patch.fees is not None else original.fees,
            executed_at=to_eastern(patch.executed_at) if patch.executed_at else original.executed_at,
            note=patch.note if patch.note is not None else original.note,
        )

    @contextmanager
    def _logged(self, operation: str, portfolio_id: str, txn_id: str) -> Generator[None, None, None]:
        try:
            yield
        except ConflictError as e:
            logger.warning(f"Rejected {operation} of {txn_id} in portfolio {portfolio_id}: {e.message}")
            raise
        except LedgerConsistencyError as e:
            logger.error(
                f"Ledger inconsistency during {operation} of {txn_id} "
                f"in portfolio {portfolio_id}: {e.message}"
            )
            raise


def _normalize_symbol(symbol: Optional[str]) -> str:
    return (symbol or "").strip().upper()


def _parse_type(value) -> TransactionType:
    try:
        return TransactionType(value)
    except ValueError:
        raise ValidationError(f"Unknown transaction type: {value}")


def _parse_decimal(field_name: str, value) -> Decimal:
    if value is None:
        raise ValidationError(f"{field_name} is required")
    try:
        parsed = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number, got {value!r}")
    if not parsed.is_finite():
        raise ValidationError(f"{field_name} must be finite, got {value!r}")
    return parsed


def _default_price(txn_type: TransactionType, price: Optional[Decimal]) -> Decimal:
    """Splits carry no price; every other type needs one."""
    if price is None:
        if txn_type == TransactionType.SPLIT:
            return Decimal("0")
        raise ValidationError(f"{txn_type.value} requires a price")
    return _parse_decimal("price", price)
