"""Pydantic schemas for transaction endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from portfolio_ledger.core.timezone import parse_datetime_eastern
from portfolio_ledger.domain.models.enums import TransactionType


def _parse_executed_at(value):
    if isinstance(value, str):
        return parse_datetime_eastern(value)
    return value


class TransactionCreateRequest(BaseModel):
    """Request schema for applying a transaction."""

    symbol: str = Field(..., min_length=1, max_length=20, description="Stock symbol")
    txn_type: TransactionType = Field(..., description="buy, sell, dividend or split")
    shares: Decimal = Field(
        ...,
        gt=0,
        description="Shares traded; for a split, the ratio (2 for 2:1)",
    )
    price: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Price per share; dividend per share amount; omitted for splits",
    )
    fees: Decimal = Field(default=Decimal("0"), ge=0, description="Transaction fees")
    executed_at: Optional[datetime] = Field(
        default=None,
        description="Execution time (US/Eastern if no offset); defaults to now",
    )
    note: Optional[str] = Field(default=None, max_length=500, description="Optional note")

    @field_validator("symbol")
    @classmethod
    def uppercase_symbol(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("executed_at", mode="before")
    @classmethod
    def parse_executed_at(cls, v):
        return _parse_executed_at(v)


class TransactionUpdateRequest(BaseModel):
    """Request schema for amending a transaction (partial update)."""

    symbol: Optional[str] = Field(default=None, min_length=1, max_length=20)
    txn_type: Optional[TransactionType] = None
    shares: Optional[Decimal] = Field(default=None, gt=0)
    price: Optional[Decimal] = Field(default=None, ge=0)
    fees: Optional[Decimal] = Field(default=None, ge=0)
    executed_at: Optional[datetime] = None
    note: Optional[str] = Field(default=None, max_length=500)

    @field_validator("symbol")
    @classmethod
    def uppercase_symbol(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else None

    @field_validator("executed_at", mode="before")
    @classmethod
    def parse_executed_at(cls, v):
        return _parse_executed_at(v)


class TransactionResponse(BaseModel):
    """Response schema for a single transaction."""

    model_config = {"from_attributes": True}

    txn_id: str
    portfolio_id: str
    symbol: str
    txn_type: TransactionType
    shares: Decimal
    price: Decimal
    fees: Decimal
    gross_amount: Decimal
    executed_at: datetime
    note: Optional[str] = None
    applied_seq: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TransactionListResponse(BaseModel):
    """Response schema for one page of transactions."""

    model_config = {"from_attributes": True}

    transactions: list[TransactionResponse]
    total: int
    limit: int
    offset: int
