"""View models for service outputs."""

from portfolio_ledger.domain.views.portfolio import (
    PortfolioSummary,
    PortfolioDetail,
    TransactionPage,
    Quote,
    PositionValuation,
    ValuationView,
)
from portfolio_ledger.domain.views.realized_gains import (
    RealizedGainsSummary,
    RealizedGainsReport,
)

__all__ = [
    "PortfolioSummary",
    "PortfolioDetail",
    "TransactionPage",
    "Quote",
    "PositionValuation",
    "ValuationView",
    "RealizedGainsSummary",
    "RealizedGainsReport",
]
