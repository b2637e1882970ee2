"""Pydantic schemas for portfolio endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from portfolio_ledger.api.schemas.ledger import HoldingResponse
from portfolio_ledger.api.schemas.transaction import TransactionResponse


class PortfolioCreateRequest(BaseModel):
    """Request schema for creating a portfolio."""

    name: str = Field(..., min_length=1, max_length=255, description="Portfolio name")
    description: Optional[str] = Field(default=None, max_length=1000)
    cash_balance: Decimal = Field(default=Decimal("0"), ge=0, description="Opening cash")


class PortfolioUpdateRequest(BaseModel):
    """Request schema for updating a portfolio (partial update)."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    cash_balance: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Explicit balance adjustment",
    )


class PortfolioResponse(BaseModel):
    """Response schema for a portfolio."""

    model_config = {"from_attributes": True}

    portfolio_id: str
    name: str
    description: Optional[str] = None
    cash_balance: Decimal
    is_default: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PortfolioSummaryResponse(BaseModel):
    """Response schema for a portfolio list entry."""

    model_config = {"from_attributes": True}

    portfolio: PortfolioResponse
    holdings_count: int
    total_invested: Decimal


class PortfolioDetailResponse(BaseModel):
    """Response schema for a portfolio with holdings and recent transactions."""

    model_config = {"from_attributes": True}

    portfolio: PortfolioResponse
    holdings: list[HoldingResponse]
    recent_transactions: list[TransactionResponse]
