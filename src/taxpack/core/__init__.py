"""Core utilities and shared functionality."""

from taxpack.core.clock import (
    now_uk,
    today_uk,
    to_local_naive,
    parse_datetime,
    parse_date,
    UK_TZ,
)
from taxpack.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    ArchiveError,
)

__all__ = [
    "now_uk",
    "today_uk",
    "to_local_naive",
    "parse_datetime",
    "parse_date",
    "UK_TZ",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "ArchiveError",
]
