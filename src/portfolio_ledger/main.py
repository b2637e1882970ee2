"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from portfolio_ledger.config.settings import get_settings
from portfolio_ledger.config.logging_config import setup_logging
from portfolio_ledger.repositories.sqlalchemy.database import init_db
from portfolio_ledger.api.routers import portfolios_router, transactions_router, ledger_router
from portfolio_ledger.core.exceptions import AppError

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "NOT_FOUND": 404,
    "INSUFFICIENT_FUNDS": 400,
    "INSUFFICIENT_SHARES": 400,
    "CONFLICT": 409,
    "LEDGER_INCONSISTENT": 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    setup_logging()
    init_db()
    yield


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Portfolio ledger with FIFO tax-lot accounting",
    version=settings.app_version,
    lifespan=lifespan,
)

app.include_router(portfolios_router)
app.include_router(transactions_router)
app.include_router(ledger_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    status_code = ERROR_STATUS.get(exc.code, 400)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code} {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
