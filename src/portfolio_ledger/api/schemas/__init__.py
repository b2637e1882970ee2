"""API schemas package."""

from portfolio_ledger.api.schemas.ledger import (
    HoldingResponse,
    TaxLotResponse,
    LotSaleResponse,
    RealizedGainsSummaryResponse,
    RealizedGainsResponse,
)
from portfolio_ledger.api.schemas.transaction import (
    TransactionCreateRequest,
    TransactionUpdateRequest,
    TransactionResponse,
    TransactionListResponse,
)
from portfolio_ledger.api.schemas.portfolio import (
    PortfolioCreateRequest,
    PortfolioUpdateRequest,
    PortfolioResponse,
    PortfolioSummaryResponse,
    PortfolioDetailResponse,
)
from portfolio_ledger.api.schemas.valuation import (
    PositionValuationResponse,
    ValuationResponse,
)

__all__ = [
    "HoldingResponse",
    "TaxLotResponse",
    "LotSaleResponse",
    "RealizedGainsSummaryResponse",
    "RealizedGainsResponse",
    "TransactionCreateRequest",
    "TransactionUpdateRequest",
    "TransactionResponse",
    "TransactionListResponse",
    "PortfolioCreateRequest",
    "PortfolioUpdateRequest",
    "PortfolioResponse",
    "PortfolioSummaryResponse",
    "PortfolioDetailResponse",
    "PositionValuationResponse",
    "ValuationResponse",
]
