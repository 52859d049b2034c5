"""View models for service outputs."""

from taxpack.domain.views.export import PropertySummary, ExportResult

__all__ = [
    "PropertySummary",
    "ExportResult",
]
