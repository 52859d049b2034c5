"""Transaction repository protocol."""

from typing import Protocol, Optional

from taxpack.domain.models import Transaction


class TransactionRepository(Protocol):
    """Interface for transaction data access."""

    def create(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction."""
        ...

    def get_by_id(self, txn_id: str) -> Optional[Transaction]:
        """Retrieve transaction by ID."""
        ...

    def list_by_property(self, property_id: str) -> list[Transaction]:
        """List a property's transactions, ordered by txn_date."""
        ...

    def list_all(self) -> list[Transaction]:
        """List every transaction, ordered by txn_date."""
        ...

    def delete(self, txn_id: str) -> None:
        """Delete a single transaction."""
        ...

    def delete_by_property(self, property_id: str) -> int:
        """Delete all transactions of a property; return how many went."""
        ...
