"""Transaction and Receipt domain models."""

import base64
import binascii
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from taxpack.core.clock import parse_datetime, to_local_naive
from taxpack.domain.models.enums import TransactionType


@dataclass
class Receipt:
    """
    Receipt image or PDF attached to a single transaction.

    data holds either a data URI ("data:image/jpeg;base64,....") or a bare
    base64 string.
    """

    filename: str
    data: str
    upload_date: Optional[str] = None
    file_type: str = ""

    @property
    def payload(self) -> str:
        """Return the base64 part of the data URI."""
        _, sep, encoded = self.data.partition(",")
        return encoded if sep and encoded else self.data

    def decode(self) -> bytes:
        """
        Decode the receipt payload.

        Raises binascii.Error when the payload is not valid base64.
        """
        payload = "".join(self.payload.split())
        if not payload:
            raise binascii.Error("Empty receipt payload")
        return base64.b64decode(payload, validate=True)


@dataclass
class Transaction:
    """
    Income or expense entry recorded against one property.

    Transactions are immutable once created; they can only be deleted.
    amount is stored as a positive figure, direction comes from txn_type.
    """

    txn_id: str
    property_id: str
    txn_type: TransactionType
    category: str
    amount: Decimal
    txn_date: datetime
    description: Optional[str] = None
    receipt: Optional[Receipt] = None
    created_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.txn_type, str):
            self.txn_type = TransactionType(self.txn_type)
        if not isinstance(self.amount, Decimal):
            self.amount = Decimal(str(self.amount))
        if isinstance(self.txn_date, str):
            self.txn_date = parse_datetime(self.txn_date)
        elif isinstance(self.txn_date, date) and not isinstance(self.txn_date, datetime):
            self.txn_date = to_local_naive(self.txn_date)

    @property
    def is_income(self) -> bool:
        return self.txn_type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.txn_type == TransactionType.EXPENSE

    @property
    def has_receipt(self) -> bool:
        return self.receipt is not None

    @property
    def local_datetime(self) -> datetime:
        """Transaction time as naive UK wall time."""
        return to_local_naive(self.txn_date)
