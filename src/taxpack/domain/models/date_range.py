"""Date range value type used to scope exports."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DateRangeOption:
    """
    A named, inclusive date interval.

    filename is the filesystem-safe label used in archive names.
    """

    option_id: str
    label: str
    start_date: date
    end_date: date
    filename: str
