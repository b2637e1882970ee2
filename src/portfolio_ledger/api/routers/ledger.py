"""Derived ledger state endpoints: holdings, tax lots, realized gains, valuation."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from portfolio_ledger.api.deps import (
    get_current_user_id,
    get_ledger_service,
    get_valuation_service,
)
from portfolio_ledger.api.schemas import (
    HoldingResponse,
    TaxLotResponse,
    RealizedGainsResponse,
    ValuationResponse,
)
from portfolio_ledger.services import LedgerService, ValuationService

router = APIRouter(prefix="/portfolios/{portfolio_id}", tags=["ledger"])


@router.get("/holdings", response_model=list[HoldingResponse])
def get_holdings(
    portfolio_id: str,
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
) -> list[HoldingResponse]:
    """Current holdings ordered by symbol."""
    return [
        HoldingResponse.model_validate(h)
        for h in service.get_holdings(user_id, portfolio_id)
    ]


@router.get("/holdings/{symbol}/tax-lots", response_model=list[TaxLotResponse])
def get_tax_lots(
    portfolio_id: str,
    symbol: str,
    include_closed: bool = Query(False, description="Include fully consumed lots"),
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
) -> list[TaxLotResponse]:
    """Tax lots of a symbol in FIFO order."""
    lots = service.get_tax_lots(user_id, portfolio_id, symbol, include_closed=include_closed)
    return [TaxLotResponse.model_validate(lot) for lot in lots]


@router.get("/lot-sales", response_model=RealizedGainsResponse)
def get_realized_gains(
    portfolio_id: str,
    year: Optional[int] = Query(None, ge=1900, le=9999, description="Sale year"),
    symbol: Optional[str] = Query(None, max_length=20),
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
) -> RealizedGainsResponse:
    """Lot sales with short/long-term gain and loss totals."""
    report = service.get_realized_gains(user_id, portfolio_id, year=year, symbol=symbol)
    return RealizedGainsResponse.model_validate(report)


@router.get("/valuation", response_model=ValuationResponse)
def get_valuation(
    portfolio_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ValuationService = Depends(get_valuation_service),
) -> ValuationResponse:
    """Holdings priced at the latest quotes (display only)."""
    return ValuationResponse.model_validate(service.get_valuation(user_id, portfolio_id))
