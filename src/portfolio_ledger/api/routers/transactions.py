"""Transaction journal endpoints: apply, amend, remove and list."""

from fastapi import APIRouter, Depends, Query, Response

from portfolio_ledger.api.deps import get_current_user_id, get_ledger_service
from portfolio_ledger.api.schemas import (
    TransactionCreateRequest,
    TransactionUpdateRequest,
    TransactionResponse,
    TransactionListResponse,
)
from portfolio_ledger.services import LedgerService, TransactionCreate, TransactionUpdate

router = APIRouter(prefix="/portfolios/{portfolio_id}/transactions", tags=["transactions"])


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    portfolio_id: str,
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
) -> TransactionListResponse:
    """List transactions newest first."""
    page = service.list_transactions(user_id, portfolio_id, limit=limit, offset=offset)
    return TransactionListResponse.model_validate(page)


@router.post("", response_model=TransactionResponse, status_code=201)
def apply_transaction(
    portfolio_id: str,
    data: TransactionCreateRequest,
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
) -> TransactionResponse:
    """Apply a buy, sell, dividend or split to the portfolio."""
    txn = service.apply_transaction(
        user_id,
        portfolio_id,
        TransactionCreate(
            symbol=data.symbol,
            txn_type=data.txn_type,
            shares=data.shares,
            price=data.price,
            fees=data.fees,
            executed_at=data.executed_at,
            note=data.note,
        ),
    )
    return TransactionResponse.model_validate(txn)


@router.get("/{txn_id}", response_model=TransactionResponse)
def get_transaction(
    portfolio_id: str,
    txn_id: str,
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
) -> TransactionResponse:
    return TransactionResponse.model_validate(service.get_transaction(user_id, portfolio_id, txn_id))


@router.put("/{txn_id}", response_model=TransactionResponse)
def amend_transaction(
    portfolio_id: str,
    txn_id: str,
    data: TransactionUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
) -> TransactionResponse:
    """Amend a transaction; its ledger effects are reversed and replayed."""
    txn = service.amend_transaction(
        user_id,
        portfolio_id,
        txn_id,
        TransactionUpdate(
            symbol=data.symbol,
            txn_type=data.txn_type,
            shares=data.shares,
            price=data.price,
            fees=data.fees,
            executed_at=data.executed_at,
            note=data.note,
        ),
    )
    return TransactionResponse.model_validate(txn)


@router.delete("/{txn_id}", status_code=204)
def remove_transaction(
    portfolio_id: str,
    txn_id: str,
    user_id: str = Depends(get_current_user_id),
    service: LedgerService = Depends(get_ledger_service),
) -> Response:
    """Reverse a transaction's ledger effects and delete it."""
    service.remove_transaction(user_id, portfolio_id, txn_id)
    return Response(status_code=204)
