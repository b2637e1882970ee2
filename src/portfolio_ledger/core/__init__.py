"""Core utilities and shared functionality."""

from portfolio_ledger.core.timezone import (
    now_eastern,
    to_eastern,
    parse_datetime_eastern,
    trade_date,
    EASTERN_TZ,
)
from portfolio_ledger.core.numbers import LEDGER_QUANTUM, quantize
from portfolio_ledger.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    InsufficientSharesError,
    InsufficientFundsError,
    ConflictError,
    LedgerConsistencyError,
)

__all__ = [
    "now_eastern",
    "to_eastern",
    "parse_datetime_eastern",
    "trade_date",
    "EASTERN_TZ",
    "LEDGER_QUANTUM",
    "quantize",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "InsufficientSharesError",
    "InsufficientFundsError",
    "ConflictError",
    "LedgerConsistencyError",
]
