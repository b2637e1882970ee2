"""Pydantic schemas for the valuation endpoint."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class PositionValuationResponse(BaseModel):
    """Response schema for a priced holding."""

    model_config = {"from_attributes": True}

    symbol: str
    total_shares: Decimal
    average_cost: Decimal
    cost_basis: Decimal
    last_price: Optional[Decimal] = None
    market_value: Optional[Decimal] = None
    unrealized_pnl: Optional[Decimal] = None
    unrealized_pnl_pct: Optional[Decimal] = None
    weight_pct: Optional[Decimal] = None


class ValuationResponse(BaseModel):
    """Response schema for portfolio valuation."""

    model_config = {"from_attributes": True}

    cash_balance: Decimal
    positions: list[PositionValuationResponse]
    market_value: Decimal
    total_value: Decimal
    as_of: Optional[datetime] = None
