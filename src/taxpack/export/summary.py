"""Per-property and portfolio roll-ups for summary CSVs."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from taxpack.domain.models import Transaction
from taxpack.domain.views import PropertySummary
from taxpack.export.ledger import format_currency, format_signed_currency, write_csv

SUMMARY_COLUMNS = [
    "Property",
    "Total Income",
    "Total Expenses",
    "Net Position",
    "Receipt Coverage",
    "Transaction Count",
    "Period",
]

TOTAL_LABEL = "TOTAL"
ALL_TIME_PERIOD = "All Time"


def coverage_percent(with_receipts: int, expense_count: int) -> int:
    """Share of expenses carrying a receipt, rounded half-up; 0 with no expenses."""
    if expense_count == 0:
        return 0
    ratio = Decimal(100 * with_receipts) / Decimal(expense_count)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def summarize_property(
    property_name: str,
    transactions: Iterable[Transaction],
    period: str = ALL_TIME_PERIOD,
) -> PropertySummary:
    """Aggregate income, expenses and receipt coverage for one property."""
    summary = PropertySummary(property_name=property_name, period=period)

    for txn in transactions:
        summary.transaction_count += 1
        if txn.is_income:
            summary.total_income += txn.amount
        else:
            summary.total_expenses += txn.amount
            summary.expense_count += 1
            if txn.has_receipt:
                summary.expenses_with_receipts += 1

    summary.net_position = summary.total_income - summary.total_expenses
    summary.receipt_coverage = coverage_percent(
        summary.expenses_with_receipts, summary.expense_count
    )
    return summary


def _summary_row(summary: PropertySummary) -> list[str]:
    return [
        summary.property_name,
        format_currency(summary.total_income),
        format_currency(summary.total_expenses),
        format_signed_currency(summary.net_position),
        f"{summary.receipt_coverage}%",
        str(summary.transaction_count),
        summary.period,
    ]


def total_summary(summaries: list[PropertySummary]) -> PropertySummary:
    """
    Combine several property summaries into a portfolio TOTAL.

    Coverage is blended from the underlying expense counts, not averaged.
    The period is taken from the first summary.
    """
    total = PropertySummary(
        property_name=TOTAL_LABEL,
        period=summaries[0].period if summaries else ALL_TIME_PERIOD,
    )
    for summary in summaries:
        total.total_income += summary.total_income
        total.total_expenses += summary.total_expenses
        total.transaction_count += summary.transaction_count
        total.expense_count += summary.expense_count
        total.expenses_with_receipts += summary.expenses_with_receipts

    total.net_position = total.total_income - total.total_expenses
    total.receipt_coverage = coverage_percent(
        total.expenses_with_receipts, total.expense_count
    )
    return total


def render_summary_csv(
    summaries: list[PropertySummary],
    include_total: bool = False,
) -> str:
    """
    Render summary rows sorted by property name.

    A TOTAL row is appended for portfolio summaries (include_total) and
    whenever more than one property is summarised.
    """
    ordered = sorted(summaries, key=lambda s: (s.property_name.casefold(), s.property_name))
    rows = [_summary_row(s) for s in ordered]

    if summaries and (include_total or len(summaries) > 1):
        rows.append(_summary_row(total_summary(summaries)))

    return write_csv(SUMMARY_COLUMNS, rows)
