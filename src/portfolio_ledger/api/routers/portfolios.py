"""Portfolio lifecycle endpoints."""

from fastapi import APIRouter, Depends, Response

from portfolio_ledger.api.deps import get_current_user_id, get_portfolio_service
from portfolio_ledger.api.schemas import (
    PortfolioCreateRequest,
    PortfolioUpdateRequest,
    PortfolioResponse,
    PortfolioSummaryResponse,
    PortfolioDetailResponse,
)
from portfolio_ledger.services import PortfolioService

router = APIRouter(prefix="/portfolios", tags=["portfolios"])


@router.get("", response_model=list[PortfolioSummaryResponse])
def list_portfolios(
    user_id: str = Depends(get_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
) -> list[PortfolioSummaryResponse]:
    """List the caller's portfolios, default first."""
    return [
        PortfolioSummaryResponse.model_validate(s)
        for s in service.list_portfolios(user_id)
    ]


@router.post("", response_model=PortfolioResponse, status_code=201)
def create_portfolio(
    data: PortfolioCreateRequest,
    user_id: str = Depends(get_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioResponse:
    """Create a portfolio; the caller's first one becomes the default."""
    portfolio = service.create_portfolio(
        user_id,
        name=data.name,
        description=data.description,
        cash_balance=data.cash_balance,
    )
    return PortfolioResponse.model_validate(portfolio)


@router.get("/{portfolio_id}", response_model=PortfolioDetailResponse)
def get_portfolio(
    portfolio_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioDetailResponse:
    """Portfolio with holdings and recent transactions."""
    return PortfolioDetailResponse.model_validate(service.get_portfolio(user_id, portfolio_id))


@router.put("/{portfolio_id}", response_model=PortfolioResponse)
def update_portfolio(
    portfolio_id: str,
    data: PortfolioUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioResponse:
    portfolio = service.update_portfolio(
        user_id,
        portfolio_id,
        name=data.name,
        description=data.description,
        cash_balance=data.cash_balance,
    )
    return PortfolioResponse.model_validate(portfolio)


@router.delete("/{portfolio_id}", status_code=204)
def delete_portfolio(
    portfolio_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
) -> Response:
    """Delete a portfolio and everything it owns. The default portfolio cannot be deleted."""
    service.delete_portfolio(user_id, portfolio_id)
    return Response(status_code=204)
