"""Pydantic schemas for API request/response."""

from taxpack.api.schemas.property import (
    PropertyCreateRequest,
    PropertyUpdateRequest,
    PropertyResponse,
    PropertyListResponse,
)
from taxpack.api.schemas.transaction import (
    ReceiptRequest,
    TransactionCreateRequest,
    TransactionResponse,
    TransactionListResponse,
)
from taxpack.api.schemas.export import (
    DateRangeResponse,
    DateRangeListResponse,
    ExportRequest,
    ExportResultResponse,
)

__all__ = [
    "PropertyCreateRequest",
    "PropertyUpdateRequest",
    "PropertyResponse",
    "PropertyListResponse",
    "ReceiptRequest",
    "TransactionCreateRequest",
    "TransactionResponse",
    "TransactionListResponse",
    "DateRangeResponse",
    "DateRangeListResponse",
    "ExportRequest",
    "ExportResultResponse",
]
