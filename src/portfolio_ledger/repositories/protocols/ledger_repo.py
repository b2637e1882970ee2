"""Ledger repository protocol for derived state (holdings, tax lots, lot sales)."""

from typing import Protocol, Optional

from portfolio_ledger.domain.ledger import LedgerState
from portfolio_ledger.domain.models import Holding, LotSale, TaxLot


class LedgerRepository(Protocol):
    """Interface for derived ledger state data access."""

    def list_holdings(
        self,
        portfolio_id: str,
        symbols: Optional[list[str]] = None,
    ) -> list[Holding]:
        """Get holdings for a portfolio, ordered by symbol."""
        ...

    def list_lots(
        self,
        portfolio_id: str,
        symbols: Optional[list[str]] = None,
        open_only: bool = False,
    ) -> list[TaxLot]:
        """Get tax lots in FIFO order."""
        ...

    def list_lot_sales(
        self,
        portfolio_id: str,
        symbols: Optional[list[str]] = None,
        year: Optional[int] = None,
    ) -> list[LotSale]:
        """Get lot sales, optionally filtered by symbol and sale year."""
        ...

    def save_state(self, before: LedgerState, after: LedgerState) -> None:
        """Persist the difference between two ledger states."""
        ...
