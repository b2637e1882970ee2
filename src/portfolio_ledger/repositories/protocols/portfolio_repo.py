"""Portfolio repository protocol."""

from decimal import Decimal
from typing import Protocol, Optional

from portfolio_ledger.domain.models import Portfolio


class PortfolioRepository(Protocol):
    """Interface for portfolio data access."""

    def create(self, portfolio: Portfolio) -> Portfolio:
        """Persist a new portfolio."""
        ...

    def get_by_id(self, portfolio_id: str) -> Optional[Portfolio]:
        """Retrieve portfolio by ID."""
        ...

    def list_by_user(self, user_id: str) -> list[Portfolio]:
        """List a user's portfolios, default first, then oldest first."""
        ...

    def count_by_user(self, user_id: str) -> int:
        """Count a user's portfolios."""
        ...

    def update(self, portfolio: Portfolio) -> Portfolio:
        """Update name, description and cash balance."""
        ...

    def update_cash(self, portfolio_id: str, cash_balance: Decimal) -> None:
        """Overwrite the cash balance."""
        ...

    def delete(self, portfolio_id: str) -> None:
        """Delete a portfolio and everything it owns."""
        ...
