"""Portfolio lifecycle service: create, list, view, update and delete portfolios."""

import logging
import uuid
from decimal import Decimal, InvalidOperation
from typing import Optional

from portfolio_ledger.core.exceptions import NotFoundError, ValidationError
from portfolio_ledger.core.numbers import quantize
from portfolio_ledger.core.timezone import now_eastern
from portfolio_ledger.domain.models import Portfolio
from portfolio_ledger.domain.views import PortfolioDetail, PortfolioSummary
from portfolio_ledger.repositories.protocols import (
    LedgerRepository,
    PortfolioRepository,
    TransactionRepository,
    UnitOfWork,
)
from portfolio_ledger.services.locks import PortfolioLockRegistry

logger = logging.getLogger(__name__)


class PortfolioService:
    """
    Service for managing a user's portfolios.

    The first portfolio a user creates becomes their default and cannot be
    deleted. An explicit cash balance adjustment is the only way cash changes
    outside the ledger.
    """

    def __init__(
        self,
        portfolio_repo: PortfolioRepository,
        transaction_repo: TransactionRepository,
        ledger_repo: LedgerRepository,
        unit_of_work: UnitOfWork,
        locks: PortfolioLockRegistry,
        recent_transactions_limit: int = 10,
    ):
        self._portfolio_repo = portfolio_repo
        self._transaction_repo = transaction_repo
        self._ledger_repo = ledger_repo
        self._uow = unit_of_work
        self._locks = locks
        self._recent_limit = recent_transactions_limit

    def create_portfolio(
        self,
        user_id: str,
        name: str,
        description: Optional[str] = None,
        cash_balance: Decimal = Decimal("0"),
    ) -> Portfolio:
        """
        Create a new portfolio for user_id.

        Args:
            user_id: Owning user
            name: Display name, must not be blank
            description: Optional free text
            cash_balance: Opening cash, must not be negative

        Returns:
            Created Portfolio instance
        """
        name = _require_name(name)
        cash_balance = _require_cash(cash_balance)

        with self._uow.atomic():
            is_default = self._portfolio_repo.count_by_user(user_id) == 0
            portfolio = self._portfolio_repo.create(
                Portfolio(
                    portfolio_id=str(uuid.uuid4()),
                    user_id=user_id,
                    name=name,
                    description=description,
                    cash_balance=cash_balance,
                    is_default=is_default,
                    created_at=now_eastern(),
                )
            )

        logger.info(
            f"Created portfolio {portfolio.portfolio_id} for user {user_id}"
            f"{' (default)' if is_default else ''}"
        )
        return portfolio

    def list_portfolios(self, user_id: str) -> list[PortfolioSummary]:
        """List portfolios, default first, each with holding count and amount invested."""
        summaries = []
        for portfolio in self._portfolio_repo.list_by_user(user_id):
            holdings = self._ledger_repo.list_holdings(portfolio.portfolio_id)
            total_invested = sum((h.cost_basis for h in holdings), Decimal("0"))
            summaries.append(
                PortfolioSummary(
                    portfolio=portfolio,
                    holdings_count=len(holdings),
                    total_invested=quantize(total_invested),
                )
            )
        return summaries

    def get_portfolio(self, user_id: str, portfolio_id: str) -> PortfolioDetail:
        """Portfolio with holdings and its most recent transactions."""
        portfolio = self._get_owned(user_id, portfolio_id)
        return PortfolioDetail(
            portfolio=portfolio,
            holdings=self._ledger_repo.list_holdings(portfolio_id),
            recent_transactions=self._transaction_repo.list_page(
                portfolio_id, self._recent_limit, 0
            ),
        )

    def update_portfolio(
        self,
        user_id: str,
        portfolio_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        cash_balance: Optional[Decimal] = None,
    ) -> Portfolio:
        """Update name, description or cash balance; omitted fields are unchanged."""
        self._get_owned(user_id, portfolio_id)

        with self._locks.hold(portfolio_id):
            with self._uow.atomic():
                portfolio = self._get_owned(user_id, portfolio_id)
                if name is not None:
                    portfolio.name = _require_name(name)
                if description is not None:
                    portfolio.description = description
                if cash_balance is not None:
                    new_balance = _require_cash(cash_balance)
                    if new_balance != portfolio.cash_balance:
                        logger.info(
                            f"Cash balance of portfolio {portfolio_id} adjusted "
                            f"from {portfolio.cash_balance} to {new_balance}"
                        )
                    portfolio.cash_balance = new_balance
                updated = self._portfolio_repo.update(portfolio)

        return updated

    def delete_portfolio(self, user_id: str, portfolio_id: str) -> None:
        """
        Delete a portfolio with its transactions, holdings, tax lots and lot sales.

        Raises:
            NotFoundError: portfolio missing or not owned by user_id
            ValidationError: the portfolio is the user's default
        """
        portfolio = self._get_owned(user_id, portfolio_id)
        if portfolio.is_default:
            raise ValidationError("Cannot delete the default portfolio")

        with self._locks.hold(portfolio_id):
            with self._uow.atomic():
                self._portfolio_repo.delete(portfolio_id)
        self._locks.discard(portfolio_id)

        logger.info(f"Deleted portfolio {portfolio_id} of user {user_id}")

    def _get_owned(self, user_id: str, portfolio_id: str) -> Portfolio:
        portfolio = self._portfolio_repo.get_by_id(portfolio_id)
        if not portfolio or portfolio.user_id != user_id:
            raise NotFoundError("Portfolio", portfolio_id)
        return portfolio


def _require_name(name: Optional[str]) -> str:
    if not name or not name.strip():
        raise ValidationError("Portfolio name is required")
    return name.strip()


def _require_cash(value) -> Decimal:
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Cash balance must be a number, got {value!r}")
    if not amount.is_finite() or amount < 0:
        raise ValidationError("Cash balance cannot be negative")
    return amount
