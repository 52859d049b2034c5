#!/usr/bin/env python3
"""
Generate a realistic demo portfolio for the last tax year.
Simulates a landlord with a few properties: monthly rent, repairs,
insurance and utilities, some expenses carrying scanned receipts.

Usage (from project root, after `pip install -e .`):
  python scripts/generate_test_data.py            # seed only
  python scripts/generate_test_data.py --export   # seed, then write a portfolio tax pack
"""

import argparse
import base64
import random
import sys
from datetime import date, datetime, timedelta
from decimal import Decimal

from taxpack.config.logging_config import setup_logging
from taxpack.config.settings import get_settings
from taxpack.core.clock import today_uk
from taxpack.core.exceptions import ValidationError
from taxpack.domain.models import TransactionType
from taxpack.export import DirectoryDownloadSink, TaxPackExporter
from taxpack.repositories.sqlalchemy import (
    SqlAlchemyPreferenceRepository,
    SqlAlchemyPropertyRepository,
    SqlAlchemyTransactionRepository,
    get_session,
    init_db,
)
from taxpack.services import (
    DateRangeService,
    PortfolioService,
    PropertyCreate,
    ReceiptUpload,
    TransactionCreate,
)
from taxpack.services.date_range_service import tax_year_containing

# Smallest valid JPEG-looking payload; real scans are not needed for a demo
FAKE_JPEG = "data:image/jpeg;base64," + base64.b64encode(b"\xff\xd8\xff\xe0demo-receipt").decode()

PROPERTIES = [
    ("123 High Street", Decimal("245000"), Decimal("950")),
    ("Flat 4, Rose Court", Decimal("160000"), Decimal("725")),
    ("Mill House", Decimal("310000"), Decimal("1300")),
]

EXPENSES = [
    ("Materials", "Screwfix - plumbing parts", 40, 250),
    ("Materials", "B&Q - paint and fillers", 30, 180),
    ("Labour", "Joe Bloggs Plumbing - boiler service", 80, 220),
    ("Utilities", "Octopus - void period electricity", 25, 90),
    ("Insurance", "Aviva - landlord buildings cover", 180, 420),
    ("Professional Fees", "Smith & Co - letting agent fee", 60, 150),
]


def _tenant_rent(property_id: str, name: str, rent: Decimal, month_start: date) -> TransactionCreate:
    return TransactionCreate(
        property_id=property_id,
        txn_type=TransactionType.INCOME,
        category="Rental Income",
        amount=rent,
        txn_date=datetime.combine(month_start, datetime.min.time().replace(hour=9)),
        description=f"Tenant - {month_start.strftime('%B')} rent for {name}",
    )


def _random_expense(property_id: str, day: date) -> TransactionCreate:
    category, description, low, high = random.choice(EXPENSES)
    receipt = None
    if random.random() < 0.7:
        receipt = ReceiptUpload(filename="scan.jpg", data=FAKE_JPEG, file_type="image/jpeg")
    return TransactionCreate(
        property_id=property_id,
        txn_type=TransactionType.EXPENSE,
        category=category,
        amount=Decimal(str(round(random.uniform(low, high), 2))),
        txn_date=datetime.combine(day, datetime.min.time().replace(hour=random.randint(8, 17))),
        description=description,
        receipt=receipt,
    )


def generate_demo_portfolio(export: bool = False) -> None:
    """Seed the configured database with a demo portfolio."""
    init_db()
    session = get_session()
    portfolio = PortfolioService(
        property_repo=SqlAlchemyPropertyRepository(session),
        transaction_repo=SqlAlchemyTransactionRepository(session),
    )

    tax_year_start = date(tax_year_containing(today_uk()) - 1, 4, 6)
    print(f"Generating transactions for the tax year starting {tax_year_start}")
    print("=" * 60)

    created = 0
    for name, price, rent in PROPERTIES:
        try:
            prop = portfolio.create_property(PropertyCreate(
                name=name,
                purchase_price=price,
                purchase_date=tax_year_start - timedelta(days=400),
            ))
            print(f"✓ Property '{name}' created")
        except ValidationError:
            print(f"✓ Property '{name}' already exists, skipping")
            continue

        for month in range(12):
            month_start = date(
                tax_year_start.year + (tax_year_start.month + month - 1) // 12,
                (tax_year_start.month + month - 1) % 12 + 1,
                6,
            )
            portfolio.add_transaction(_tenant_rent(prop.property_id, name, rent, month_start))
            created += 1
            for _ in range(random.randint(0, 2)):
                day = month_start + timedelta(days=random.randint(0, 27))
                portfolio.add_transaction(_random_expense(prop.property_id, day))
                created += 1

    print(f"\n✓ Successfully created {created} transactions")

    if export:
        settings = get_settings()
        date_range = DateRangeService(SqlAlchemyPreferenceRepository(session)).resolve(
            f"tax-{tax_year_start.year}-{str(tax_year_start.year + 1)[-2:]}"
        )
        exporter = TaxPackExporter(sink=DirectoryDownloadSink(settings.get_export_dir()))
        properties, transactions = portfolio.load_export_inputs()
        result = exporter.export_portfolio(properties, transactions, date_range)
        marker = "✓" if result.success else "✗"
        print(f"{marker} {result.message}")
        if result.success:
            print(f"  Written to {settings.get_export_dir() / result.filename}")

    session.close()


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed a demo property portfolio")
    parser.add_argument("--export", action="store_true", help="write a portfolio tax pack afterwards")
    parser.add_argument("--seed", type=int, default=None, help="random seed for repeatable data")
    args = parser.parse_args()

    setup_logging()
    if args.seed is not None:
        random.seed(args.seed)
    generate_demo_portfolio(export=args.export)
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except Exception as e:
        print(f"\n✗ Error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)
