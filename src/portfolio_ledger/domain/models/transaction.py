"""Transaction domain model."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from portfolio_ledger.core.numbers import quantize
from portfolio_ledger.core.timezone import trade_date
from portfolio_ledger.domain.models.enums import TransactionType


@dataclass
class Transaction:
    """
    Journal entry (source of truth for all derived ledger state).

    - buy/sell: shares traded at price, fees charged on top
    - dividend: shares paid on at price per share
    - split: shares carries the split ratio (2 for a 2:1 split), price is 0

    applied_seq orders ledger application within a portfolio; it is bumped
    every time the transaction is (re)applied.
    """

    txn_id: str
    portfolio_id: str
    symbol: str
    txn_type: TransactionType
    shares: Decimal
    price: Decimal
    executed_at: datetime
    fees: Decimal = field(default_factory=lambda: Decimal("0"))
    note: Optional[str] = None
    applied_seq: int = 0
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.txn_type, str):
            self.txn_type = TransactionType(self.txn_type)

    @property
    def trade_date(self) -> date:
        """Eastern calendar date of execution."""
        return trade_date(self.executed_at)

    @property
    def gross_amount(self) -> Decimal:
        return quantize(self.shares * self.price)

    @property
    def split_ratio(self) -> Decimal:
        return self.shares

    @property
    def cash_delta(self) -> Decimal:
        """
        Signed cash impact of this transaction.

        Positive = cash added, Negative = cash removed.
        """
        if self.txn_type == TransactionType.BUY:
            return -(self.gross_amount + self.fees)
        elif self.txn_type == TransactionType.SELL:
            return self.gross_amount - self.fees
        elif self.txn_type == TransactionType.DIVIDEND:
            return self.gross_amount
        return Decimal("0")
