"""Enumerations for domain models."""

from enum import Enum


class PropertyType(str, Enum):
    """Kinds of property held in a portfolio."""

    HOUSE = "House"
    FLAT = "Flat"
    COMMERCIAL = "Commercial"


class PropertyStatus(str, Enum):
    """Lifecycle status of a property."""

    STABILIZED = "Stabilized"
    IN_DEVELOPMENT = "In Development"
    UNDER_OFFER = "Under Offer"
    PLANNING = "Planning"


class TransactionType(str, Enum):
    """Direction of a money movement."""

    INCOME = "Income"
    EXPENSE = "Expense"


class IncomeCategory(str, Enum):
    """Categories allowed on Income transactions."""

    RENTAL_INCOME = "Rental Income"
    SALE_PROCEEDS = "Sale Proceeds"
    REFINANCE = "Refinance"
    GRANT_FUNDING = "Grant/Funding"
    OTHER = "Other"


class ExpenseCategory(str, Enum):
    """Categories allowed on Expense transactions."""

    MATERIALS = "Materials"
    LABOUR = "Labour"
    PROFESSIONAL_FEES = "Professional Fees"
    PLANNING_PERMITS = "Planning & Permits"
    FINANCE_COSTS = "Finance Costs"
    UTILITIES = "Utilities"
    ACQUISITION_COSTS = "Acquisition Costs"
    MARKETING_SALES = "Marketing & Sales"
    INSURANCE = "Insurance"
    OTHER = "Other"


def categories_for(txn_type: TransactionType) -> set[str]:
    """Return the category values allowed for a transaction direction."""
    if txn_type == TransactionType.INCOME:
        return {c.value for c in IncomeCategory}
    return {c.value for c in ExpenseCategory}
