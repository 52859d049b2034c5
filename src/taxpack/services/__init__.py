"""Service layer - business logic orchestration."""

from taxpack.services.portfolio_service import (
    PortfolioService,
    PropertyCreate,
    PropertyUpdate,
    ReceiptUpload,
    TransactionCreate,
)
from taxpack.services.date_range_service import DateRangeService

__all__ = [
    "PortfolioService",
    "PropertyCreate",
    "PropertyUpdate",
    "ReceiptUpload",
    "TransactionCreate",
    "DateRangeService",
]
