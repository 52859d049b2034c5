"""Portfolio service for property and transaction management."""

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from taxpack.core.clock import now_uk, to_local_naive
from taxpack.core.exceptions import ValidationError, NotFoundError
from taxpack.domain.models import (
    Property,
    PropertyStatus,
    PropertyType,
    Receipt,
    Transaction,
    TransactionType,
    categories_for,
)
from taxpack.repositories.protocols import PropertyRepository, TransactionRepository

logger = logging.getLogger(__name__)


@dataclass
class PropertyCreate:
    """Input data for creating a property."""

    name: str
    purchase_price: Decimal
    purchase_date: date
    property_type: PropertyType = PropertyType.HOUSE
    current_value: Optional[Decimal] = None
    status: PropertyStatus = PropertyStatus.STABILIZED


@dataclass
class PropertyUpdate:
    """Partial update data for editing a property."""

    name: Optional[str] = None
    property_type: Optional[PropertyType] = None
    current_value: Optional[Decimal] = None
    status: Optional[PropertyStatus] = None


@dataclass
class ReceiptUpload:
    """Receipt supplied alongside a new transaction."""

    filename: str
    data: str
    file_type: str
    upload_date: Optional[str] = None


@dataclass
class TransactionCreate:
    """Input data for creating a transaction."""

    property_id: str
    txn_type: TransactionType
    category: str
    amount: Decimal
    txn_date: datetime
    description: Optional[str] = None
    receipt: Optional[ReceiptUpload] = None


class PortfolioService:
    """
    Service for managing properties and their transactions.

    Transactions are immutable once recorded; they can only be deleted.
    Deleting a property removes all of its transactions.
    """

    def __init__(
        self,
        property_repo: PropertyRepository,
        transaction_repo: TransactionRepository,
    ):
        self._property_repo = property_repo
        self._transaction_repo = transaction_repo

    # Properties

    def create_property(self, data: PropertyCreate) -> Property:
        """Create a new property; names must be unique."""
        name = (data.name or "").strip()
        if not name:
            raise ValidationError("Property name is required")
        if self._property_repo.get_by_name(name):
            raise ValidationError(f"Property with name '{name}' already exists")
        if data.purchase_price < 0:
            raise ValidationError("Purchase price cannot be negative")
        if data.current_value is not None and data.current_value < 0:
            raise ValidationError("Current value cannot be negative")

        prop = Property(
            property_id=str(uuid.uuid4()),
            name=name,
            purchase_price=data.purchase_price,
            purchase_date=data.purchase_date,
            property_type=PropertyType(data.property_type),
            current_value=data.current_value,
            status=PropertyStatus(data.status),
            created_at=now_uk(),
        )
        return self._property_repo.create(prop)

    def get_property(self, property_id: str) -> Property:
        """Get property by ID."""
        prop = self._property_repo.get_by_id(property_id)
        if not prop:
            raise NotFoundError("Property", property_id)
        return prop

    def list_properties(self) -> list[Property]:
        """List all properties."""
        return self._property_repo.list_all()

    def update_property(self, property_id: str, patch: PropertyUpdate) -> Property:
        """Apply status, valuation, name or type changes to a property."""
        prop = self.get_property(property_id)

        if patch.name is not None:
            name = patch.name.strip()
            if not name:
                raise ValidationError("Property name is required")
            existing = self._property_repo.get_by_name(name)
            if existing and existing.property_id != property_id:
                raise ValidationError(f"Property with name '{name}' already exists")
            prop.name = name
        if patch.property_type is not None:
            prop.property_type = PropertyType(patch.property_type)
        if patch.current_value is not None:
            if patch.current_value < 0:
                raise ValidationError("Current value cannot be negative")
            prop.current_value = patch.current_value
        if patch.status is not None:
            prop.status = PropertyStatus(patch.status)

        return self._property_repo.update(prop)

    def delete_property(self, property_id: str) -> None:
        """Delete a property together with all of its transactions."""
        prop = self.get_property(property_id)
        removed = self._transaction_repo.delete_by_property(property_id)
        self._property_repo.delete(property_id)
        logger.info("Deleted property %s and %d transactions", prop.name, removed)

    # Transactions

    def add_transaction(self, data: TransactionCreate) -> Transaction:
        """Record a transaction against an existing property."""
        self._validate_transaction_create(data)

        receipt = None
        if data.receipt is not None:
            receipt = Receipt(
                filename=data.receipt.filename,
                data=data.receipt.data,
                upload_date=data.receipt.upload_date or now_uk().isoformat(),
                file_type=data.receipt.file_type,
            )

        transaction = Transaction(
            txn_id=str(uuid.uuid4()),
            property_id=data.property_id,
            txn_type=data.txn_type,
            category=data.category,
            amount=data.amount,
            txn_date=to_local_naive(data.txn_date),
            description=data.description.strip() if data.description else None,
            receipt=receipt,
            created_at=now_uk(),
        )
        return self._transaction_repo.create(transaction)

    def get_transaction(self, txn_id: str) -> Transaction:
        """Get transaction by ID."""
        transaction = self._transaction_repo.get_by_id(txn_id)
        if not transaction:
            raise NotFoundError("Transaction", txn_id)
        return transaction

    def list_transactions(self, property_id: Optional[str] = None) -> list[Transaction]:
        """List transactions, optionally for one property."""
        if property_id is not None:
            self.get_property(property_id)
            return self._transaction_repo.list_by_property(property_id)
        return self._transaction_repo.list_all()

    def delete_transaction(self, txn_id: str) -> None:
        """Delete a transaction (and its receipt)."""
        self.get_transaction(txn_id)
        self._transaction_repo.delete(txn_id)

    def load_export_inputs(
        self,
        property_id: Optional[str] = None,
    ) -> tuple[list[Property], list[Transaction]]:
        """Return the properties and transactions an export works from."""
        if property_id is not None:
            prop = self.get_property(property_id)
            return [prop], self._transaction_repo.list_by_property(property_id)
        return self._property_repo.list_all(), self._transaction_repo.list_all()

    def _validate_transaction_create(self, data: TransactionCreate) -> None:
        """Validate transaction input against its direction."""
        self.get_property(data.property_id)

        try:
            txn_type = TransactionType(data.txn_type)
        except ValueError:
            raise ValidationError(f"Invalid transaction type: {data.txn_type}")

        if data.amount is None or data.amount <= 0:
            raise ValidationError("Amount must be positive")

        if data.category not in categories_for(txn_type):
            raise ValidationError(
                f"Category '{data.category}' is not valid for {txn_type.value} transactions"
            )

        if data.txn_date is None:
            raise ValidationError("Transaction date is required")

        if data.receipt is not None:
            if not data.receipt.data:
                raise ValidationError("Receipt data is required")
            if not data.receipt.file_type:
                raise ValidationError("Receipt file type is required")
