"""Tax lot and lot sale domain models."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass
class TaxLot:
    """
    Purchase lot used for FIFO cost basis matching.

    Created by a buy, consumed by sells, scaled in place by splits. Deleted
    only when its originating buy is reversed.
    """

    lot_id: str
    portfolio_id: str
    symbol: str
    purchase_date: date
    shares_remaining: Decimal
    cost_per_share: Decimal
    txn_id: str
    created_at: Optional[datetime] = field(default=None)

    @property
    def is_open(self) -> bool:
        return self.shares_remaining > 0

    @property
    def cost_basis(self) -> Decimal:
        return self.shares_remaining * self.cost_per_share


@dataclass
class LotSale:
    """
    Immutable record of shares consumed from one lot by one sell.

    Deleted only when the sell transaction that produced it is reversed.
    """

    sale_id: str
    lot_id: str
    sell_txn_id: str
    symbol: str
    shares_sold: Decimal
    sale_price: Decimal
    realized_gain: Decimal
    is_short_term: bool
    sale_date: date
    created_at: Optional[datetime] = field(default=None)
