"""Portfolio domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Portfolio:
    """
    Investment portfolio owned by a single user.

    Owns its transactions, holdings, tax lots and lot sales. The cash balance
    changes only through ledger operations or an explicit balance adjustment.
    """

    portfolio_id: str
    user_id: str
    name: str
    description: Optional[str] = None
    cash_balance: Decimal = field(default_factory=lambda: Decimal("0"))
    is_default: bool = False
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)
