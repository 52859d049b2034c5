"""Date and time helpers for UK (Europe/London) wall time."""

from datetime import date, datetime, time
from typing import Union

import pytz
from dateutil import parser as date_parser

UK_TZ = pytz.timezone("Europe/London")


def now_uk() -> datetime:
    """Return current time in the Europe/London timezone."""
    return datetime.now(UK_TZ)


def today_uk() -> date:
    """Return today's date in the UK."""
    return now_uk().date()


def to_local_naive(value: Union[datetime, date]) -> datetime:
    """
    Return a naive datetime in UK wall time.

    Aware datetimes are converted to Europe/London first; naive ones are
    assumed to already be UK local time. Bare dates become midnight.
    """
    if not isinstance(value, datetime):
        return datetime.combine(value, time.min)
    if value.tzinfo is None:
        return value
    return value.astimezone(UK_TZ).replace(tzinfo=None)


def parse_datetime(value: str) -> datetime:
    """
    Parse a date or date-time string into a datetime.

    ISO 8601 strings are read as written. Anything else is read day first,
    so "05/04/2024" is 5 April.
    """
    try:
        return date_parser.isoparse(value)
    except ValueError:
        return date_parser.parse(value, dayfirst=True)


def parse_date(value: str) -> date:
    """Parse a date string, discarding any time component."""
    return to_local_naive(parse_datetime(value)).date()
