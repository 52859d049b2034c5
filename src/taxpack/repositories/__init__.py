"""Repository layer - data access abstractions and implementations."""

from taxpack.repositories.protocols import (
    PropertyRepository,
    TransactionRepository,
    PreferenceRepository,
)

__all__ = [
    "PropertyRepository",
    "TransactionRepository",
    "PreferenceRepository",
]
