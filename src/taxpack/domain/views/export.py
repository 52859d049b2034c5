"""View models for export outputs."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass
class PropertySummary:
    """Financial roll-up of one property over the exported period."""

    property_name: str
    total_income: Decimal = field(default_factory=lambda: Decimal("0"))
    total_expenses: Decimal = field(default_factory=lambda: Decimal("0"))
    net_position: Decimal = field(default_factory=lambda: Decimal("0"))
    receipt_coverage: int = 0
    transaction_count: int = 0
    period: str = "All Time"
    # Not rendered; kept so portfolio totals can blend coverage exactly
    expense_count: int = 0
    expenses_with_receipts: int = 0


@dataclass
class ExportResult:
    """Outcome of a tax pack export, successful or not."""

    success: bool
    message: str
    total_count: Optional[int] = None
    receipt_count: Optional[int] = None
    filename: Optional[str] = None
    size_bytes: Optional[int] = None
    failed_properties: list[str] = field(default_factory=list)
