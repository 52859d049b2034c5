"""Repository protocol definitions (interfaces)."""

from taxpack.repositories.protocols.property_repo import PropertyRepository
from taxpack.repositories.protocols.transaction_repo import TransactionRepository
from taxpack.repositories.protocols.preference_repo import PreferenceRepository

__all__ = [
    "PropertyRepository",
    "TransactionRepository",
    "PreferenceRepository",
]
