"""Domain layer - pure business models with no persistence concerns."""

from taxpack.domain.models import (
    Property,
    Transaction,
    Receipt,
    DateRangeOption,
    PropertyType,
    PropertyStatus,
    TransactionType,
    IncomeCategory,
    ExpenseCategory,
)

__all__ = [
    "Property",
    "Transaction",
    "Receipt",
    "DateRangeOption",
    "PropertyType",
    "PropertyStatus",
    "TransactionType",
    "IncomeCategory",
    "ExpenseCategory",
]
