"""Tax pack export: ZIP archives of ledgers, summaries and receipts."""

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Optional

from taxpack.config.settings import Settings, get_settings
from taxpack.core.clock import today_uk
from taxpack.core.exceptions import ArchiveError
from taxpack.domain.models import DateRangeOption, Property, Transaction
from taxpack.domain.views import ExportResult, PropertySummary
from taxpack.export.archive import ArchiveTree, build_zip
from taxpack.export.ledger import (
    RECEIPT_FILE_MISSING,
    RECEIPT_NOT_APPLICABLE,
    RECEIPT_NOT_ATTACHED,
    filter_for_range,
    ledger_row,
    render_ledger_csv,
    sort_for_ledger,
)
from taxpack.export.naming import (
    ReceiptSequence,
    extract_vendor,
    month_folder_name,
    receipt_filename,
    sanitize_filename,
)
from taxpack.export.sinks import DownloadSink
from taxpack.export.summary import ALL_TIME_PERIOD, render_summary_csv, summarize_property

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Error creating tax pack. Please try again."


@dataclass
class LedgerOutcome:
    """What was written for one property's ledger."""

    transaction_count: int
    receipt_count: int


@dataclass
class PropertyOutcome:
    """Result of staging one property inside a portfolio export."""

    property_name: str
    tree: Optional[ArchiveTree] = None
    summary: Optional[PropertySummary] = None
    transaction_count: int = 0
    receipt_count: int = 0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


def _plural(count: int) -> str:
    return "property" if count == 1 else "properties"


class TaxPackExporter:
    """
    Builds tax pack archives for one property or a whole portfolio.

    Each call works on its own archive tree and receipt sequence; nothing
    carries over between exports. Public entry points never raise: every
    path returns an ExportResult.
    """

    def __init__(
        self,
        sink: DownloadSink,
        settings: Optional[Settings] = None,
        tree_factory: Callable[..., ArchiveTree] = ArchiveTree,
        today: Callable[[], date] = today_uk,
    ):
        self._sink = sink
        self._settings = settings or get_settings()
        self._tree_factory = tree_factory
        self._today = today

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def export_property(
        self,
        prop: Property,
        transactions: Iterable[Transaction],
        date_range: Optional[DateRangeOption] = None,
    ) -> ExportResult:
        """
        Export one property's transactions, summary and receipts.

        Archive layout: transactions.csv, summary.csv and
        receipts/{YYYY-MM-Month}/receipt_NNN_Vendor_Amount.ext.
        """
        filtered = filter_for_range(transactions, date_range)
        if not filtered:
            return ExportResult(
                success=False,
                message=(
                    "No transactions found for selected period"
                    if date_range
                    else "No transactions found for this property"
                ),
            )

        try:
            tree = self._tree_factory()
            sequence = ReceiptSequence()
            outcome = self._write_ledger(tree, prop, filtered, sequence)

            summary = summarize_property(prop.name, filtered, self._period_label(date_range))
            tree.file("summary.csv", render_summary_csv([summary]))

            filename = (
                f"{sanitize_filename(prop.name)}_TaxPack_{self._date_label(date_range)}.zip"
            )
            size = self._deliver(tree, filename)
        except Exception:
            logger.exception("Error creating tax pack for property %s", prop.name)
            return ExportResult(success=False, message=GENERIC_FAILURE_MESSAGE)

        logger.info(
            "Exported %d transactions and %d receipts for %s to %s",
            outcome.transaction_count,
            outcome.receipt_count,
            prop.name,
            filename,
        )
        return ExportResult(
            success=True,
            message=(
                f"Exported {outcome.transaction_count} transactions "
                f"({outcome.receipt_count} with receipts) for {prop.name}"
            ),
            total_count=outcome.transaction_count,
            receipt_count=outcome.receipt_count,
            filename=filename,
            size_bytes=size,
        )

    def export_portfolio(
        self,
        properties: Iterable[Property],
        transactions: Iterable[Transaction],
        date_range: Optional[DateRangeOption] = None,
    ) -> ExportResult:
        """
        Export every property with in-range transactions into one archive.

        Each property gets a Property_{name}/ folder; portfolio_summary.csv
        sits at the root. A property that fails is logged and left out
        while the rest of the export continues.
        """
        properties = list(properties)
        if not properties:
            return ExportResult(success=False, message="No properties found")

        by_property: dict[str, list[Transaction]] = defaultdict(list)
        for txn in filter_for_range(transactions, date_range):
            by_property[txn.property_id].append(txn)

        qualifying = [p for p in properties if by_property.get(p.property_id)]
        if not qualifying:
            return ExportResult(
                success=False,
                message=(
                    "No properties with transactions found for selected period"
                    if date_range
                    else "No properties with transactions found"
                ),
            )

        try:
            archive = self._tree_factory()
            sequence = ReceiptSequence()
            period = self._period_label(date_range)
            used_folders: set[str] = set()

            outcomes = [
                self._stage_property(
                    prop,
                    by_property[prop.property_id],
                    sequence,
                    period,
                    self._unique_folder(prop, used_folders),
                )
                for prop in qualifying
            ]

            succeeded = [o for o in outcomes if o.succeeded]
            failed = [o.property_name for o in outcomes if not o.succeeded]
            if not succeeded:
                logger.error("Every property failed to export: %s", ", ".join(failed))
                return ExportResult(
                    success=False,
                    message=GENERIC_FAILURE_MESSAGE,
                    failed_properties=failed,
                )

            for outcome in succeeded:
                archive.merge(outcome.tree)

            archive.file(
                "portfolio_summary.csv",
                render_summary_csv([o.summary for o in succeeded], include_total=True),
            )

            filename = f"Multi-Property-TaxPack_{self._date_label(date_range)}.zip"
            size = self._deliver(archive, filename)
        except Exception:
            logger.exception("Error creating multi-property tax pack")
            return ExportResult(success=False, message=GENERIC_FAILURE_MESSAGE)

        total_transactions = sum(o.transaction_count for o in succeeded)
        total_receipts = sum(o.receipt_count for o in succeeded)

        message = (
            f"Exported {total_transactions} transactions across "
            f"{len(succeeded)} {_plural(len(succeeded))}"
        )
        if failed:
            logger.warning("Properties left out of %s: %s", filename, ", ".join(failed))
            message += f" ({len(failed)} {_plural(len(failed))} had errors)"

        logger.info("Portfolio export %s: %s", filename, message)
        return ExportResult(
            success=True,
            message=message,
            total_count=total_transactions,
            receipt_count=total_receipts,
            filename=filename,
            size_bytes=size,
            failed_properties=failed,
        )

    # ------------------------------------------------------------------
    # Per-property work
    # ------------------------------------------------------------------

    def _stage_property(
        self,
        prop: Property,
        transactions: list[Transaction],
        sequence: ReceiptSequence,
        period: str,
        folder_name: str,
    ) -> PropertyOutcome:
        """Build one property's folder in its own tree, ready to merge."""
        checkpoint = sequence.position
        try:
            stage = self._tree_factory(folder_name)
            ledger = self._write_ledger(stage, prop, transactions, sequence)
        except Exception as exc:
            logger.error("Error processing property %s: %s", prop.name, exc, exc_info=True)
            sequence.reset_to(checkpoint)
            return PropertyOutcome(property_name=prop.name, error=str(exc) or type(exc).__name__)

        return PropertyOutcome(
            property_name=prop.name,
            tree=stage,
            summary=summarize_property(prop.name, transactions, period),
            transaction_count=ledger.transaction_count,
            receipt_count=ledger.receipt_count,
        )

    def _write_ledger(
        self,
        tree: ArchiveTree,
        prop: Property,
        transactions: list[Transaction],
        sequence: ReceiptSequence,
    ) -> LedgerOutcome:
        """Write transactions.csv and receipts/ for one property into tree."""
        receipts_folder = None
        if any(t.has_receipt for t in transactions):
            receipts_folder = tree.folder("receipts")

        month_folders: dict[str, ArchiveTree] = {}
        rows: list[list[str]] = []
        receipts_written = 0

        for txn in sort_for_ledger(transactions):
            vendor = extract_vendor(txn.description)

            if txn.receipt is not None and receipts_folder is not None:
                receipt_value = self._embed_receipt(
                    receipts_folder, month_folders, txn, vendor, sequence
                )
                if receipt_value != RECEIPT_FILE_MISSING:
                    receipts_written += 1
            elif txn.is_income:
                receipt_value = RECEIPT_NOT_APPLICABLE
            else:
                receipt_value = RECEIPT_NOT_ATTACHED

            rows.append(ledger_row(txn, vendor, receipt_value, prop.name))

        tree.file("transactions.csv", render_ledger_csv(rows))
        return LedgerOutcome(transaction_count=len(rows), receipt_count=receipts_written)

    def _embed_receipt(
        self,
        receipts_folder: ArchiveTree,
        month_folders: dict[str, ArchiveTree],
        txn: Transaction,
        vendor: str,
        sequence: ReceiptSequence,
    ) -> str:
        """Add a receipt under its month folder; return the CSV Receipt value."""
        month_key = month_folder_name(txn.local_datetime)
        name = receipt_filename(sequence.peek(), vendor, txn.amount, txn.receipt.file_type)
        try:
            content = txn.receipt.decode()
            if month_key not in month_folders:
                month_folders[month_key] = receipts_folder.folder(month_key)
            month_folders[month_key].file(name, content)
        except (ValueError, ArchiveError) as exc:
            logger.error(
                "Error adding receipt file for transaction %s: %s",
                txn.txn_id,
                exc,
                exc_info=True,
            )
            return RECEIPT_FILE_MISSING

        sequence.advance()
        return name

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _deliver(self, tree: ArchiveTree, filename: str) -> int:
        payload = build_zip(tree, compresslevel=self._settings.zip_compression_level)
        size_mb = len(payload) / (1024 * 1024)
        if size_mb > self._settings.export_size_warning_mb:
            logger.warning("Large export size: %.2fMB (%s)", size_mb, filename)
        self._sink.deliver(filename, payload)
        return len(payload)

    def _date_label(self, date_range: Optional[DateRangeOption]) -> str:
        return date_range.filename if date_range else str(self._today().year)

    @staticmethod
    def _period_label(date_range: Optional[DateRangeOption]) -> str:
        return date_range.label if date_range else ALL_TIME_PERIOD

    @staticmethod
    def _unique_folder(prop: Property, used: set[str]) -> str:
        """Property_{name}, suffixed _2, _3... if two properties sanitize alike."""
        base = f"Property_{sanitize_filename(prop.name)}"
        folder = base
        suffix = 2
        while folder in used:
            folder = f"{base}_{suffix}"
            suffix += 1
        used.add(folder)
        return folder
