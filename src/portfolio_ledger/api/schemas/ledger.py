"""Pydantic schemas for holdings, tax lots and realized gains."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class HoldingResponse(BaseModel):
    """Response schema for a holding."""

    model_config = {"from_attributes": True}

    symbol: str
    total_shares: Decimal
    average_cost: Decimal
    cost_basis: Decimal
    first_purchase_date: Optional[date] = None
    updated_at: Optional[datetime] = None


class TaxLotResponse(BaseModel):
    """Response schema for a tax lot."""

    model_config = {"from_attributes": True}

    lot_id: str
    symbol: str
    purchase_date: date
    shares_remaining: Decimal
    cost_per_share: Decimal
    cost_basis: Decimal
    txn_id: str


class LotSaleResponse(BaseModel):
    """Response schema for a lot sale."""

    model_config = {"from_attributes": True}

    sale_id: str
    lot_id: str
    sell_txn_id: str
    symbol: str
    shares_sold: Decimal
    sale_price: Decimal
    realized_gain: Decimal
    is_short_term: bool
    sale_date: date


class RealizedGainsSummaryResponse(BaseModel):
    """Realized gain totals by term, each split into gains and losses."""

    model_config = {"from_attributes": True}

    total_realized_gain: Decimal
    short_term_total: Decimal
    short_term_gain: Decimal
    short_term_loss: Decimal
    long_term_total: Decimal
    long_term_gain: Decimal
    long_term_loss: Decimal


class RealizedGainsResponse(BaseModel):
    """Response schema for the realized gains query."""

    model_config = {"from_attributes": True}

    records: list[LotSaleResponse]
    summary: RealizedGainsSummaryResponse
