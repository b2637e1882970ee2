"""Holding domain model."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Holding:
    """
    Aggregated position per portfolio/symbol.

    IMPORTANT: Never edit directly; always derived by the ledger engine.
    total_shares always equals the shares remaining across the symbol's tax lots.
    """

    portfolio_id: str
    symbol: str
    total_shares: Decimal
    average_cost: Decimal
    first_purchase_date: Optional[date] = None
    updated_at: Optional[datetime] = field(default=None)

    @property
    def cost_basis(self) -> Decimal:
        return self.total_shares * self.average_cost
