"""Transaction filtering, ordering and ledger CSV rendering."""

import csv
import io
from datetime import date, datetime, time
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence

from taxpack.domain.models import DateRangeOption, Transaction

LEDGER_COLUMNS = [
    "Date",
    "Type",
    "Category",
    "Vendor",
    "Description",
    "Amount",
    "Receipt",
    "Property",
]

RECEIPT_NOT_APPLICABLE = "N/A"
RECEIPT_NOT_ATTACHED = "No receipt"
RECEIPT_FILE_MISSING = "Receipt file missing"

_DAY_END = time(23, 59, 59, 999000)


def filter_transactions_by_date(
    transactions: Iterable[Transaction],
    start_date: date,
    end_date: date,
) -> list[Transaction]:
    """
    Keep transactions dated within [start 00:00:00.000, end 23:59:59.999].

    Both boundaries are inclusive and normalised to whole days.
    """
    start = datetime.combine(_as_date(start_date), time.min)
    end = datetime.combine(_as_date(end_date), _DAY_END)
    return [t for t in transactions if start <= t.local_datetime <= end]


def filter_for_range(
    transactions: Iterable[Transaction],
    date_range: Optional[DateRangeOption],
) -> list[Transaction]:
    """Apply a date range if one is given, otherwise copy the list."""
    if date_range is None:
        return list(transactions)
    return filter_transactions_by_date(
        transactions, date_range.start_date, date_range.end_date
    )


def sort_for_ledger(transactions: Iterable[Transaction]) -> list[Transaction]:
    """
    Order transactions for a tax ledger.

    Ascending by day; Income before Expense on the same day; then by time.
    """
    return sorted(transactions, key=_ledger_key)


def _ledger_key(transaction: Transaction) -> tuple:
    moment = transaction.local_datetime
    return (moment.date(), 0 if transaction.is_income else 1, moment)


def _as_date(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


def format_currency(amount: Decimal) -> str:
    """Render a non-negative amount as £0.00."""
    return f"£{amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)}"


def format_signed_currency(amount: Decimal) -> str:
    """Render an amount as £0.00, or -£0.00 when negative."""
    if amount < 0:
        return "-" + format_currency(abs(amount))
    return format_currency(amount)


def format_ledger_date(value: datetime) -> str:
    return value.strftime("%d/%m/%Y")


def _csv_line(fields: Sequence[str]) -> str:
    # The default \r\n terminator makes the writer quote any field holding \r or \n
    buffer = io.StringIO()
    csv.writer(buffer).writerow(fields)
    return buffer.getvalue().removesuffix("\r\n")


def write_csv(header: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    """
    Render a header and rows as CSV text.

    Fields are quoted with the csv module's minimal quoting. Lines are
    joined with \\n and there is no trailing newline.
    """
    return "\n".join(_csv_line(fields) for fields in [header, *rows])


def ledger_row(
    transaction: Transaction,
    vendor: str,
    receipt_value: str,
    property_name: str,
) -> list[str]:
    """Build the transactions.csv fields for one transaction."""
    return [
        format_ledger_date(transaction.local_datetime),
        transaction.txn_type.value,
        transaction.category,
        vendor,
        transaction.description or "",
        format_currency(abs(transaction.amount)),
        receipt_value,
        property_name,
    ]


def render_ledger_csv(rows: list[list[str]]) -> str:
    """Render ledger rows under the fixed header."""
    return write_csv(LEDGER_COLUMNS, rows)
