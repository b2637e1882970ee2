"""API routers package."""

from portfolio_ledger.api.routers.portfolios import router as portfolios_router
from portfolio_ledger.api.routers.transactions import router as transactions_router
from portfolio_ledger.api.routers.ledger import router as ledger_router

__all__ = [
    "portfolios_router",
    "transactions_router",
    "ledger_router",
]
