"""Date range presets, custom ranges and the remembered export filter."""

import logging
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from taxpack.core.clock import parse_date, today_uk
from taxpack.core.exceptions import ValidationError
from taxpack.domain.models import DateRangeOption
from taxpack.export.naming import MONTH_NAMES
from taxpack.repositories.protocols import PreferenceRepository

logger = logging.getLogger(__name__)

ALL_TIME_ID = "all-time"
CUSTOM_ID = "custom"
LAST_FILTER_KEY = "last_export_date_filter"

# UK tax years run 6 April to 5 April
TAX_YEAR_START_MONTH = 4
TAX_YEAR_START_DAY = 6

QUARTERS = (
    ("q1", "Q1 (Jan-Mar)", 1),
    ("q2", "Q2 (Apr-Jun)", 4),
    ("q3", "Q3 (Jul-Sep)", 7),
    ("q4", "Q4 (Oct-Dec)", 10),
)


def tax_year_containing(day: date) -> int:
    """Return the year in which the UK tax year holding day began."""
    if (day.month, day.day) >= (TAX_YEAR_START_MONTH, TAX_YEAR_START_DAY):
        return day.year
    return day.year - 1


def tax_year_option(start_year: int) -> DateRangeOption:
    """The UK tax year starting 6 April start_year."""
    start = date(start_year, TAX_YEAR_START_MONTH, TAX_YEAR_START_DAY)
    end = date(start_year + 1, TAX_YEAR_START_MONTH, TAX_YEAR_START_DAY - 1)
    short = f"{start_year}/{str(start_year + 1)[-2:]}"
    return DateRangeOption(
        option_id=f"tax-{start_year}-{str(start_year + 1)[-2:]}",
        label=f"Tax Year {short} (6 Apr {start_year} - 5 Apr {start_year + 1})",
        start_date=start,
        end_date=end,
        filename=f"{start_year}-{str(start_year + 1)[-2:]}",
    )


def build_date_range_options(today: Optional[date] = None) -> list[DateRangeOption]:
    """
    Return the preset ranges offered for export.

    All time; the two previous, current and next UK tax years; the current
    and two previous calendar years; the quarters of the current year.
    """
    today = today or today_uk()
    year = today.year

    options = [
        DateRangeOption(
            option_id=ALL_TIME_ID,
            label="All Time",
            start_date=date(2000, 1, 1),
            end_date=date(2099, 12, 31),
            filename="AllTime",
        )
    ]

    current_tax_year = tax_year_containing(today)
    for start_year in range(current_tax_year - 2, current_tax_year + 2):
        options.append(tax_year_option(start_year))

    for calendar_year in range(year, year - 3, -1):
        options.append(
            DateRangeOption(
                option_id=f"year-{calendar_year}",
                label=f"Calendar Year {calendar_year}",
                start_date=date(calendar_year, 1, 1),
                end_date=date(calendar_year, 12, 31),
                filename=str(calendar_year),
            )
        )

    for quarter_id, label, first_month in QUARTERS:
        start = date(year, first_month, 1)
        options.append(
            DateRangeOption(
                option_id=f"{quarter_id}-{year}",
                label=f"{label} {year}",
                start_date=start,
                end_date=start + relativedelta(months=3, days=-1),
                filename=f"{quarter_id.upper()}-{year}",
            )
        )

    return options


def _compact_date(value: date) -> str:
    """05Apr2024 style token, locale independent."""
    return f"{value.day:02d}{MONTH_NAMES[value.month - 1][:3]}{value.year}"


def build_custom_range(
    start_raw: Optional[str],
    end_raw: Optional[str],
) -> DateRangeOption:
    """
    Validate and build a user-supplied range.

    Raises ValidationError when either date is missing or unparseable, or
    when start is after end.
    """
    if not start_raw or not end_raw:
        raise ValidationError("Please select both start and end dates for custom range")

    try:
        start = parse_date(start_raw)
        end = parse_date(end_raw)
    except (ValueError, OverflowError):
        raise ValidationError(f"Invalid date in custom range: {start_raw!r} - {end_raw!r}")

    if start > end:
        raise ValidationError("Start date must be before end date")

    return DateRangeOption(
        option_id=CUSTOM_ID,
        label="Custom Range",
        start_date=start,
        end_date=end,
        filename=f"{_compact_date(start)}-{_compact_date(end)}",
    )


class DateRangeService:
    """
    Resolves the user's export period selection.

    The last successful selection is echoed to the preference store so it
    can be offered as the default next time.
    """

    def __init__(self, preference_repo: PreferenceRepository):
        self._preferences = preference_repo

    def list_options(self, today: Optional[date] = None) -> list[DateRangeOption]:
        return build_date_range_options(today)

    def last_selection(self) -> str:
        """Return the last used selection id, defaulting to all-time."""
        return self._preferences.get(LAST_FILTER_KEY) or ALL_TIME_ID

    def resolve(
        self,
        selection: str,
        custom_start: Optional[str] = None,
        custom_end: Optional[str] = None,
        today: Optional[date] = None,
    ) -> DateRangeOption:
        """
        Turn a selection id (or custom dates) into a concrete range.

        Args:
            selection: preset id from list_options() or "custom"
            custom_start: start date string, required for "custom"
            custom_end: end date string, required for "custom"
            today: reference date for presets (defaults to UK today)
        """
        if selection == CUSTOM_ID:
            date_range = build_custom_range(custom_start, custom_end)
        else:
            options = {o.option_id: o for o in self.list_options(today)}
            if selection not in options:
                raise ValidationError(f"Unknown date range: {selection}")
            date_range = options[selection]

        self._preferences.set(LAST_FILTER_KEY, selection)
        logger.debug("Resolved export range %s -> %s", selection, date_range.filename)
        return date_range
