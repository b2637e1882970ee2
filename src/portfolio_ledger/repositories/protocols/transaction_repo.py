"""Transaction repository protocol."""

from typing import Protocol, Optional

from portfolio_ledger.domain.models import Transaction


class TransactionRepository(Protocol):
    """Interface for journal data access."""

    def create(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction."""
        ...

    def get_by_id(self, txn_id: str) -> Optional[Transaction]:
        """Retrieve transaction by ID."""
        ...

    def update(self, transaction: Transaction) -> Transaction:
        """Update an existing transaction."""
        ...

    def delete(self, txn_id: str) -> None:
        """Delete a transaction row."""
        ...

    def list_by_portfolio(
        self,
        portfolio_id: str,
        symbols: Optional[list[str]] = None,
    ) -> list[Transaction]:
        """List transactions in application order, optionally for some symbols."""
        ...

    def list_page(self, portfolio_id: str, limit: int, offset: int) -> list[Transaction]:
        """List transactions newest first (by executed_at)."""
        ...

    def count_by_portfolio(self, portfolio_id: str) -> int:
        """Count a portfolio's transactions."""
        ...

    def max_applied_seq(self, portfolio_id: str) -> int:
        """Highest applied_seq in the portfolio, 0 when empty."""
        ...
