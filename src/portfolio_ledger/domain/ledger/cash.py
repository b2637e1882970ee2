"""Cash balance ledger: one signed scalar per portfolio."""

from decimal import Decimal

from portfolio_ledger.core.exceptions import InsufficientFundsError
from portfolio_ledger.domain.ledger.state import LedgerState


def apply_delta(state: LedgerState, delta: Decimal) -> None:
    """Add a signed delta to the cash balance."""
    state.cash_balance += delta


def check_funds(state: LedgerState, amount: Decimal) -> None:
    """Raise InsufficientFundsError unless the balance covers amount."""
    if amount > state.cash_balance:
        raise InsufficientFundsError(
            requested=str(amount),
            available=str(state.cash_balance),
        )
