"""Transaction endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from taxpack.api.deps import get_portfolio_service
from taxpack.api.schemas import (
    TransactionCreateRequest,
    TransactionResponse,
    TransactionListResponse,
)
from taxpack.services import PortfolioService, ReceiptUpload, TransactionCreate

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post("/", response_model=TransactionResponse, status_code=201)
def create_transaction(
    data: TransactionCreateRequest,
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Record a transaction, optionally with a receipt."""
    receipt = ReceiptUpload(**data.receipt.model_dump()) if data.receipt else None
    txn = service.add_transaction(
        TransactionCreate(
            property_id=data.property_id,
            txn_type=data.txn_type,
            category=data.category,
            amount=data.amount,
            txn_date=data.txn_date,
            description=data.description,
            receipt=receipt,
        )
    )
    return TransactionResponse.from_domain(txn)


@router.get("/", response_model=TransactionListResponse)
def list_transactions(
    property_id: Optional[str] = Query(None),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """List transactions, optionally for one property."""
    transactions = service.list_transactions(property_id=property_id)
    return TransactionListResponse(
        transactions=[TransactionResponse.from_domain(t) for t in transactions],
        count=len(transactions),
    )


@router.get("/{txn_id}", response_model=TransactionResponse)
def get_transaction(
    txn_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Get a single transaction."""
    return TransactionResponse.from_domain(service.get_transaction(txn_id))


@router.delete("/{txn_id}", status_code=204)
def delete_transaction(
    txn_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Delete a transaction."""
    service.delete_transaction(txn_id)
    return Response(status_code=204)
