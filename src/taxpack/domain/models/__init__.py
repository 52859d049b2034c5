"""Domain models package."""

from taxpack.domain.models.enums import (
    PropertyType,
    PropertyStatus,
    TransactionType,
    IncomeCategory,
    ExpenseCategory,
    categories_for,
)
from taxpack.domain.models.property import Property
from taxpack.domain.models.transaction import Transaction, Receipt
from taxpack.domain.models.date_range import DateRangeOption

__all__ = [
    "PropertyType",
    "PropertyStatus",
    "TransactionType",
    "IncomeCategory",
    "ExpenseCategory",
    "categories_for",
    "Property",
    "Transaction",
    "Receipt",
    "DateRangeOption",
]
