"""Property repository protocol."""

from typing import Protocol, Optional

from taxpack.domain.models import Property


class PropertyRepository(Protocol):
    """Interface for property data access."""

    def create(self, prop: Property) -> Property:
        """Persist a new property."""
        ...

    def get_by_id(self, property_id: str) -> Optional[Property]:
        """Retrieve property by ID."""
        ...

    def get_by_name(self, name: str) -> Optional[Property]:
        """Retrieve property by name."""
        ...

    def list_all(self) -> list[Property]:
        """List all properties, ordered by name."""
        ...

    def update(self, prop: Property) -> Property:
        """Update an existing property."""
        ...

    def delete(self, property_id: str) -> None:
        """Delete a property (hard delete)."""
        ...
