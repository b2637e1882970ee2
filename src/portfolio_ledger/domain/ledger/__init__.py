"""Ledger engine: pure apply/reverse over a portfolio's derived state."""

from portfolio_ledger.domain.ledger.state import LedgerState
from portfolio_ledger.domain.ledger.engine import (
    apply_transaction,
    reverse_transaction,
    amend_transaction,
    validate_transaction,
    changes_ledger_effects,
    assert_consistent,
)
from portfolio_ledger.domain.ledger.tax_lots import LONG_TERM_HOLDING_DAYS, is_short_term
from portfolio_ledger.domain.ledger import lot_sales

__all__ = [
    "LedgerState",
    "apply_transaction",
    "reverse_transaction",
    "amend_transaction",
    "validate_transaction",
    "changes_ledger_effects",
    "assert_consistent",
    "LONG_TERM_HOLDING_DAYS",
    "is_short_term",
    "lot_sales",
]
