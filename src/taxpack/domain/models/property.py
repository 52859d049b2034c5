"""Property domain model."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from taxpack.domain.models.enums import PropertyType, PropertyStatus


@dataclass
class Property:
    """
    A property held in the user's portfolio.

    current_value stays None ("TBD") until a valuation is entered.
    Deleting a property deletes all of its transactions.
    """

    property_id: str
    name: str
    purchase_price: Decimal
    purchase_date: date
    property_type: PropertyType = PropertyType.HOUSE
    current_value: Optional[Decimal] = None
    status: PropertyStatus = PropertyStatus.STABILIZED
    created_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.property_type, str):
            self.property_type = PropertyType(self.property_type)
        if isinstance(self.status, str):
            self.status = PropertyStatus(self.status)

    @property
    def display_value(self) -> str:
        """Current valuation for display, or TBD when not set."""
        if self.current_value is None:
            return "TBD"
        return f"£{self.current_value:,.2f}"
