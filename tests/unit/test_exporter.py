"""
Unit tests for TaxPackExporter.

Tests cover:
- Single-property archives (ledger, summary, receipts)
- Empty and out-of-range exports
- Corrupt receipts
- Multi-property archives with per-property failure isolation
- Receipt numbering across properties and across runs
- Delivery failures and large-export warnings
"""

import csv
import io
import logging
from datetime import date, datetime

import pytest

from taxpack.config.settings import Settings
from taxpack.core.exceptions import ArchiveError
from taxpack.domain.models import DateRangeOption
from taxpack.export import ArchiveTree, MemoryDownloadSink, TaxPackExporter
from taxpack.export.exporter import GENERIC_FAILURE_MESSAGE
from taxpack.services.date_range_service import build_custom_range, tax_year_option
from tests.conftest import (
    CORRUPT_DATA_URI,
    FIXED_TODAY,
    JPEG_BYTES,
    PDF_BYTES,
    PDF_DATA_URI,
    expense,
    income,
    make_property,
    make_receipt,
    open_zip,
    read_text,
)


TAX_YEAR_2024 = tax_year_option(2024)


class FlakyTree(ArchiveTree):
    """Archive tree whose receipts folder cannot be created under one property."""

    failing_prefix = "Property_Bad_House/"

    def folder(self, name: str) -> ArchiveTree:
        if self.path == self.failing_prefix and name == "receipts":
            raise ArchiveError("Cannot create receipts folder")
        return super().folder(name)


class BrokenSink:
    """Download sink that always fails."""

    def deliver(self, filename: str, payload: bytes) -> None:
        raise OSError("disk full")


# =============================================================================
# SINGLE PROPERTY EXPORT
# =============================================================================


class TestExportProperty:
    """Tests for TaxPackExporter.export_property."""

    @pytest.fixture
    def high_street(self):
        return make_property("123 High Street", property_id="p1")

    def _scenario_transactions(self, prop, receipt=None):
        return [
            expense(
                prop,
                "200",
                datetime(2024, 4, 10, 8, 0),
                category="Materials",
                description="Screwfix - pipes",
                receipt=receipt,
            ),
            income(
                prop,
                "1000",
                datetime(2024, 4, 10, 9, 0),
                category="Rental Income",
                description="Tenant - April rent",
            ),
        ]

    def test_ledger_and_summary_for_tax_year(
        self,
        exporter: TaxPackExporter,
        download_sink: MemoryDownloadSink,
        high_street,
    ):
        """
        GIVEN one income of £1000 and one expense of £200 without a receipt
        WHEN exporting with the 2024/25 tax year
        THEN the ledger lists income first, the expense shows No receipt
        AND the summary nets £800.00 at 0% coverage
        """
        result = exporter.export_property(
            high_street, self._scenario_transactions(high_street), TAX_YEAR_2024
        )

        assert result.success is True
        assert result.total_count == 2
        assert result.receipt_count == 0
        assert result.filename == "123_High_Street_TaxPack_2024-25.zip"
        assert result.message == "Exported 2 transactions (0 with receipts) for 123 High Street"

        filename, payload = download_sink.last
        assert filename == result.filename
        assert result.size_bytes == len(payload)

        archive = open_zip(payload)
        assert archive.namelist() == ["transactions.csv", "summary.csv"]

        ledger = read_text(archive, "transactions.csv").split("\n")
        assert ledger == [
            "Date,Type,Category,Vendor,Description,Amount,Receipt,Property",
            "10/04/2024,Income,Rental Income,Tenant,Tenant - April rent,"
            "£1000.00,N/A,123 High Street",
            "10/04/2024,Expense,Materials,Screwfix,Screwfix - pipes,"
            "£200.00,No receipt,123 High Street",
        ]

        summary = read_text(archive, "summary.csv").split("\n")
        assert summary[1] == (
            "123 High Street,£1000.00,£200.00,£800.00,0%,2,"
            "Tax Year 2024/25 (6 Apr 2024 - 5 Apr 2025)"
        )
        assert len(summary) == 2

    def test_receipt_embedded_under_month_folder(
        self,
        exporter: TaxPackExporter,
        download_sink: MemoryDownloadSink,
        high_street,
    ):
        """
        GIVEN the expense carries a jpeg receipt
        WHEN exporting
        THEN the receipt lands in receipts/2024-04-April with its sequence name
        AND the ledger references that file and coverage is 100%
        """
        txns = self._scenario_transactions(high_street, receipt=make_receipt(file_type="jpeg"))

        result = exporter.export_property(high_street, txns, TAX_YEAR_2024)

        assert result.success is True
        assert result.receipt_count == 1
        archive = open_zip(download_sink.last[1])
        receipt_path = "receipts/2024-04-April/receipt_001_Screwfix_200.jpg"
        assert "receipts/" in archive.namelist()
        assert "receipts/2024-04-April/" in archive.namelist()
        assert archive.read(receipt_path) == JPEG_BYTES

        ledger = read_text(archive, "transactions.csv").split("\n")
        assert ledger[2].split(",")[6] == "receipt_001_Screwfix_200.jpg"
        summary = read_text(archive, "summary.csv").split("\n")
        assert summary[1].split(",")[4] == "100%"

    def test_no_receipts_folder_without_receipts(
        self,
        exporter: TaxPackExporter,
        download_sink: MemoryDownloadSink,
        high_street,
    ):
        exporter.export_property(high_street, self._scenario_transactions(high_street))
        names = open_zip(download_sink.last[1]).namelist()
        assert not any(n.startswith("receipts") for n in names)

    def test_receipts_numbered_in_ledger_order(
        self,
        exporter: TaxPackExporter,
        download_sink: MemoryDownloadSink,
        high_street,
    ):
        """
        GIVEN receipts in two months supplied out of order
        WHEN exporting
        THEN numbering follows ledger order across month folders
        """
        txns = [
            expense(high_street, "45.60", datetime(2024, 5, 2), description="Wickes - timber",
                    receipt=make_receipt(PDF_DATA_URI, "application/pdf")),
            expense(high_street, "12", datetime(2024, 4, 20), description="B&Q - screws",
                    receipt=make_receipt()),
        ]

        exporter.export_property(high_street, txns)

        archive = open_zip(download_sink.last[1])
        assert archive.read("receipts/2024-04-April/receipt_001_BQ_12.jpg") == JPEG_BYTES
        assert archive.read("receipts/2024-05-May/receipt_002_Wickes_46.pdf") == PDF_BYTES

    def test_income_receipt_is_embedded(
        self,
        exporter: TaxPackExporter,
        download_sink: MemoryDownloadSink,
        high_street,
    ):
        txns = [income(high_street, "900", datetime(2024, 6, 1), description="Agent - rent",
                       receipt=make_receipt())]

        result = exporter.export_property(high_street, txns)

        assert result.receipt_count == 1
        ledger = read_text(open_zip(download_sink.last[1]), "transactions.csv")
        assert "receipt_001_Agent_900.jpg" in ledger

    def test_corrupt_receipt_marked_missing(
        self,
        exporter: TaxPackExporter,
        download_sink: MemoryDownloadSink,
        high_street,
    ):
        """
        GIVEN one corrupt receipt followed by a valid one
        WHEN exporting
        THEN the corrupt row reads Receipt file missing and the export succeeds
        AND the valid receipt takes number 001
        """
        txns = [
            expense(high_street, "10", datetime(2024, 4, 1), description="Shop - bad",
                    receipt=make_receipt(CORRUPT_DATA_URI, "png")),
            expense(high_street, "20", datetime(2024, 4, 2), description="Shop - good",
                    receipt=make_receipt()),
        ]

        result = exporter.export_property(high_street, txns)

        assert result.success is True
        assert result.receipt_count == 1
        archive = open_zip(download_sink.last[1])
        ledger = read_text(archive, "transactions.csv").split("\n")
        assert ledger[1].split(",")[6] == "Receipt file missing"
        assert ledger[2].split(",")[6] == "receipt_001_Shop_20.jpg"
        assert "receipts/2024-04-April/receipt_001_Shop_20.jpg" in archive.namelist()
        # Coverage counts attached receipts, even unreadable ones
        assert read_text(archive, "summary.csv").split("\n")[1].split(",")[4] == "100%"

    def test_carriage_return_in_description_keeps_row_intact(
        self,
        exporter: TaxPackExporter,
        download_sink: MemoryDownloadSink,
        high_street,
    ):
        """
        GIVEN an expense whose description contains a bare carriage return
        WHEN exporting and reading transactions.csv back with a CSV reader
        THEN the ledger has one data row with all eight fields
        """
        txns = [expense(high_street, "10", datetime(2024, 5, 1), description="Shop - a\rb")]

        exporter.export_property(high_street, txns)

        text = read_text(open_zip(download_sink.last[1]), "transactions.csv")
        rows = list(csv.reader(io.StringIO(text, newline="")))
        assert len(rows) == 2
        assert rows[1] == [
            "01/05/2024",
            "Expense",
            "Materials",
            "Shop",
            "Shop - a\rb",
            "£10.00",
            "No receipt",
            "123 High Street",
        ]

    def test_receipt_numbers_restart_on_each_export(
        self,
        exporter: TaxPackExporter,
        download_sink: MemoryDownloadSink,
        high_street,
    ):
        """
        GIVEN the same exporter used for two exports in a row
        WHEN the second export runs
        THEN its receipts are numbered from 001 again
        """
        txns = self._scenario_transactions(high_street, receipt=make_receipt())

        exporter.export_property(high_street, txns, TAX_YEAR_2024)
        exporter.export_property(high_street, txns, TAX_YEAR_2024)

        assert len(download_sink.downloads) == 2
        for _, payload in download_sink.downloads:
            names = open_zip(payload).namelist()
            assert "receipts/2024-04-April/receipt_001_Screwfix_200.jpg" in names
            assert not any("receipt_002" in n for n in names)

    def test_no_transactions_at_all(self, exporter, download_sink, high_street):
        result = exporter.export_property(high_street, [])

        assert result.success is False
        assert result.message == "No transactions found for this property"
        assert download_sink.downloads == []

    def test_transactions_outside_custom_range(self, exporter, download_sink, high_street):
        """
        GIVEN transactions only in April 2024
        WHEN exporting a custom range in 2023
        THEN no archive is produced and the period message is returned
        """
        custom = build_custom_range("2023-01-01", "2023-12-31")

        result = exporter.export_property(
            high_street, self._scenario_transactions(high_street), custom
        )

        assert result.success is False
        assert result.message == "No transactions found for selected period"
        assert result.filename is None
        assert download_sink.downloads == []

    def test_all_time_filename_uses_current_year(self, exporter, high_street):
        result = exporter.export_property(high_street, self._scenario_transactions(high_street))
        assert result.filename == f"123_High_Street_TaxPack_{FIXED_TODAY.year}.zip"

    def test_custom_range_filename(self, exporter, high_street):
        custom = build_custom_range("2024-04-05", "2025-04-04")
        result = exporter.export_property(
            high_street, self._scenario_transactions(high_street), custom
        )
        assert result.filename == "123_High_Street_TaxPack_05Apr2024-04Apr2025.zip"

    def test_delivery_failure_returns_generic_error(self, high_street, caplog):
        """
        GIVEN a sink that cannot accept the archive
        WHEN exporting
        THEN the call returns the generic failure instead of raising
        """
        exporter = TaxPackExporter(sink=BrokenSink(), settings=Settings(), today=lambda: FIXED_TODAY)

        with caplog.at_level(logging.ERROR, logger="taxpack.export.exporter"):
            result = exporter.export_property(
                high_street, self._scenario_transactions(high_street)
            )

        assert result.success is False
        assert result.message == GENERIC_FAILURE_MESSAGE
        assert "123 High Street" in caplog.text

    def test_large_export_logs_warning(self, download_sink, high_street, caplog):
        exporter = TaxPackExporter(
            sink=download_sink,
            settings=Settings(export_size_warning_mb=0),
            today=lambda: FIXED_TODAY,
        )

        with caplog.at_level(logging.WARNING, logger="taxpack.export.exporter"):
            result = exporter.export_property(
                high_street, self._scenario_transactions(high_street)
            )

        assert result.success is True
        assert "Large export size" in caplog.text


# =============================================================================
# PORTFOLIO EXPORT
# =============================================================================


class TestExportPortfolio:
    """Tests for TaxPackExporter.export_portfolio."""

    @pytest.fixture
    def properties(self):
        return [
            make_property("Rose Cottage", property_id="p-rose"),
            make_property("Bad House", property_id="p-bad"),
            make_property("Empty Lot", property_id="p-empty"),
        ]

    def _transactions(self, properties):
        rose, bad, _ = properties
        return [
            income(rose, "750", datetime(2024, 5, 1), description="Tenant - May rent"),
            expense(rose, "120", datetime(2024, 5, 3), description="Plumber - leak",
                    receipt=make_receipt()),
            income(bad, "500", datetime(2024, 5, 1), description="Tenant - rent"),
            expense(bad, "80", datetime(2024, 5, 2), description="Screwfix - tap",
                    receipt=make_receipt()),
        ]

    def test_layout_and_summary(self, exporter, download_sink, properties):
        """
        GIVEN two properties with transactions and one without
        WHEN exporting the portfolio
        THEN each property gets its own folder and the summary has a TOTAL row
        """
        result = exporter.export_portfolio(properties, self._transactions(properties))

        assert result.success is True
        assert result.total_count == 4
        assert result.receipt_count == 2
        assert result.message == "Exported 4 transactions across 2 properties"
        assert result.filename == f"Multi-Property-TaxPack_{FIXED_TODAY.year}.zip"

        archive = open_zip(download_sink.last[1])
        names = archive.namelist()
        assert "Property_Rose_Cottage/transactions.csv" in names
        assert "Property_Bad_House/transactions.csv" in names
        assert not any(n.startswith("Property_Empty_Lot") for n in names)
        assert names[-1] == "portfolio_summary.csv"

        summary = read_text(archive, "portfolio_summary.csv").split("\n")
        assert [line.split(",")[0] for line in summary[1:]] == [
            "Bad House",
            "Rose Cottage",
            "TOTAL",
        ]
        assert summary[-1] == "TOTAL,£1250.00,£200.00,£1050.00,100%,4,All Time"

    def test_receipt_numbers_continue_across_properties(self, exporter, download_sink, properties):
        exporter.export_portfolio(properties, self._transactions(properties))

        names = open_zip(download_sink.last[1]).namelist()
        assert "Property_Rose_Cottage/receipts/2024-05-May/receipt_001_Plumber_120.jpg" in names
        assert "Property_Bad_House/receipts/2024-05-May/receipt_002_Screwfix_80.jpg" in names

    def test_receipt_numbers_restart_on_each_portfolio_export(
        self, exporter, download_sink, properties
    ):
        txns = self._transactions(properties)

        exporter.export_portfolio(properties, txns)
        exporter.export_portfolio(properties, txns)

        assert len(download_sink.downloads) == 2
        for _, payload in download_sink.downloads:
            names = open_zip(payload).namelist()
            assert "Property_Rose_Cottage/receipts/2024-05-May/receipt_001_Plumber_120.jpg" in names
            assert "Property_Bad_House/receipts/2024-05-May/receipt_002_Screwfix_80.jpg" in names

    def test_failing_property_isolated(self, download_sink, properties, caplog):
        """
        GIVEN the receipts folder cannot be created for Bad House
        WHEN exporting the portfolio
        THEN the export succeeds with Rose Cottage only
        AND the summary lists Rose Cottage plus a TOTAL equal to its own figures
        """
        exporter = TaxPackExporter(
            sink=download_sink,
            settings=Settings(),
            tree_factory=FlakyTree,
            today=lambda: FIXED_TODAY,
        )
        ordered = [properties[1], properties[0], properties[2]]

        with caplog.at_level(logging.WARNING, logger="taxpack.export.exporter"):
            result = exporter.export_portfolio(ordered, self._transactions(properties))

        assert result.success is True
        assert result.message == "Exported 2 transactions across 1 property (1 property had errors)"
        assert result.failed_properties == ["Bad House"]
        assert "Bad House" in caplog.text

        archive = open_zip(download_sink.last[1])
        names = archive.namelist()
        assert not any(n.startswith("Property_Bad_House") for n in names)
        # The failed property does not consume receipt numbers
        assert "Property_Rose_Cottage/receipts/2024-05-May/receipt_001_Plumber_120.jpg" in names

        summary = read_text(archive, "portfolio_summary.csv").split("\n")
        assert summary[1] == "Rose Cottage,£750.00,£120.00,£630.00,100%,2,All Time"
        assert summary[2] == "TOTAL,£750.00,£120.00,£630.00,100%,2,All Time"
        assert len(summary) == 3

    def test_every_property_failing_is_failure(self, download_sink):
        bad = make_property("Bad House", property_id="p-bad")
        txns = [expense(bad, "80", datetime(2024, 5, 2), receipt=make_receipt())]
        exporter = TaxPackExporter(
            sink=download_sink, settings=Settings(), tree_factory=FlakyTree
        )

        result = exporter.export_portfolio([bad], txns)

        assert result.success is False
        assert result.message == GENERIC_FAILURE_MESSAGE
        assert result.failed_properties == ["Bad House"]
        assert download_sink.downloads == []

    def test_no_properties(self, exporter):
        result = exporter.export_portfolio([], [])
        assert result.success is False
        assert result.message == "No properties found"

    def test_no_transactions(self, exporter, properties):
        result = exporter.export_portfolio(properties, [])
        assert result.success is False
        assert result.message == "No properties with transactions found"

    def test_no_transactions_in_period(self, exporter, download_sink, properties):
        q1_2023 = DateRangeOption(
            option_id="q1-2023",
            label="Q1 (Jan-Mar) 2023",
            start_date=date(2023, 1, 1),
            end_date=date(2023, 3, 31),
            filename="Q1-2023",
        )

        result = exporter.export_portfolio(properties, self._transactions(properties), q1_2023)

        assert result.success is False
        assert result.message == "No properties with transactions found for selected period"
        assert download_sink.downloads == []

    def test_period_label_and_filename_from_range(self, exporter, download_sink, properties):
        result = exporter.export_portfolio(
            properties, self._transactions(properties), TAX_YEAR_2024
        )

        assert result.filename == "Multi-Property-TaxPack_2024-25.zip"
        summary = read_text(open_zip(download_sink.last[1]), "portfolio_summary.csv")
        assert summary.split("\n")[1].endswith(",Tax Year 2024/25 (6 Apr 2024 - 5 Apr 2025)")

    def test_single_property_portfolio_message(self, exporter, properties):
        rose = properties[0]
        txns = [income(rose, "10", datetime(2024, 5, 1))]

        result = exporter.export_portfolio(properties, txns)

        assert result.message == "Exported 1 transactions across 1 property"

    def test_same_sanitized_names_get_distinct_folders(self, exporter, download_sink):
        first = make_property("Flat 1", property_id="a")
        second = make_property("Flat 1!", property_id="b")
        txns = [
            income(first, "10", datetime(2024, 5, 1)),
            income(second, "20", datetime(2024, 5, 1)),
        ]

        exporter.export_portfolio([first, second], txns)

        names = open_zip(download_sink.last[1]).namelist()
        assert "Property_Flat_1/transactions.csv" in names
        assert "Property_Flat_1_2/transactions.csv" in names

    def test_amounts_summed_exactly(self, exporter, download_sink):
        prop = make_property("Mill House", property_id="m")
        txns = [expense(prop, "0.10", datetime(2024, 5, 1)) for _ in range(3)]

        exporter.export_portfolio([prop], txns)

        summary = read_text(open_zip(download_sink.last[1]), "portfolio_summary.csv")
        assert summary.split("\n")[1] == "Mill House,£0.00,£0.30,-£0.30,0%,3,All Time"
