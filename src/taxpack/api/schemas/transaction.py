"""Pydantic schemas for transaction endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from taxpack.domain.models import Transaction
from taxpack.domain.models.enums import TransactionType


class ReceiptRequest(BaseModel):
    """Receipt attached to a new transaction (data URI or base64)."""

    filename: str = Field(..., min_length=1)
    data: str = Field(..., min_length=1)
    file_type: str = Field(..., min_length=1, description="e.g. image/jpeg, png, pdf")
    upload_date: Optional[str] = None


class TransactionCreateRequest(BaseModel):
    """Request schema for creating a transaction."""

    property_id: str
    txn_type: TransactionType
    category: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    txn_date: datetime
    description: Optional[str] = None
    receipt: Optional[ReceiptRequest] = None


class ReceiptResponse(BaseModel):
    """Receipt metadata (payload omitted)."""

    filename: str
    file_type: str
    upload_date: Optional[str] = None


class TransactionResponse(BaseModel):
    """Response schema for a single transaction."""

    txn_id: str
    property_id: str
    txn_type: TransactionType
    category: str
    amount: Decimal
    txn_date: datetime
    description: Optional[str] = None
    receipt: Optional[ReceiptResponse] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionResponse":
        receipt = None
        if txn.receipt is not None:
            receipt = ReceiptResponse(
                filename=txn.receipt.filename,
                file_type=txn.receipt.file_type,
                upload_date=txn.receipt.upload_date,
            )
        return cls(
            txn_id=txn.txn_id,
            property_id=txn.property_id,
            txn_type=txn.txn_type,
            category=txn.category,
            amount=txn.amount,
            txn_date=txn.txn_date,
            description=txn.description,
            receipt=receipt,
            created_at=txn.created_at,
        )


class TransactionListResponse(BaseModel):
    """Response schema for listing transactions."""

    transactions: list[TransactionResponse]
    count: int
