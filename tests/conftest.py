"""
Pytest configuration and fixtures for the tax pack tests.

This module provides:
- In-memory SQLite database fixtures
- Repository and service fixtures
- Domain builders for properties, transactions and receipts
- Exporter fixtures wired to an in-memory download sink
- A FastAPI test client bound to the test database
"""

import base64
import io
import uuid
import zipfile
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Optional

import pytest
from sqlalchemy import StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from taxpack.config.settings import Settings, set_settings, reset_settings
from taxpack.domain.models import (
    Property,
    PropertyStatus,
    PropertyType,
    Receipt,
    Transaction,
    TransactionType,
)
from taxpack.export import MemoryDownloadSink, TaxPackExporter
from taxpack.repositories.sqlalchemy.database import (
    Base,
    create_sqlite_engine,
    get_db,
    reset_database,
)
# Import ORM models to register them with Base before creating tables
from taxpack.repositories.sqlalchemy import orm_models  # noqa: F401
from taxpack.repositories.sqlalchemy import (
    SqlAlchemyPropertyRepository,
    SqlAlchemyTransactionRepository,
    SqlAlchemyPreferenceRepository,
)
from taxpack.services import (
    DateRangeService,
    PortfolioService,
    PropertyCreate,
    ReceiptUpload,
    TransactionCreate,
)


# =============================================================================
# RECEIPT PAYLOADS
# =============================================================================

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"fake-jpeg-body"
PDF_BYTES = b"%PDF-1.4\n% fake receipt\n%%EOF"
JPEG_DATA_URI = "data:image/jpeg;base64," + base64.b64encode(JPEG_BYTES).decode("ascii")
PDF_DATA_URI = "data:application/pdf;base64," + base64.b64encode(PDF_BYTES).decode("ascii")
CORRUPT_DATA_URI = "data:image/png;base64,@@not*base64@@"

# Reference "today" for preset date ranges
FIXED_TODAY = date(2025, 5, 1)


# =============================================================================
# DOMAIN BUILDERS
# =============================================================================


def make_property(
    name: str = "123 High Street",
    property_id: Optional[str] = None,
    purchase_price: Decimal = Decimal("250000"),
) -> Property:
    """Build an in-memory Property."""
    return Property(
        property_id=property_id or f"prop-{uuid.uuid4().hex[:8]}",
        name=name,
        purchase_price=purchase_price,
        purchase_date=date(2023, 6, 1),
        property_type=PropertyType.HOUSE,
        status=PropertyStatus.STABILIZED,
    )


def make_receipt(data: str = JPEG_DATA_URI, file_type: str = "jpeg") -> Receipt:
    """Build an in-memory Receipt."""
    return Receipt(
        filename="scan.jpg",
        data=data,
        upload_date="2024-04-10T12:00:00",
        file_type=file_type,
    )


def make_transaction(
    prop: Property,
    txn_type: TransactionType,
    amount: str,
    txn_date: datetime,
    category: Optional[str] = None,
    description: Optional[str] = None,
    receipt: Optional[Receipt] = None,
) -> Transaction:
    """Build an in-memory Transaction for a property."""
    if category is None:
        category = "Rental Income" if txn_type == TransactionType.INCOME else "Materials"
    return Transaction(
        txn_id=f"txn-{uuid.uuid4().hex[:8]}",
        property_id=prop.property_id,
        txn_type=txn_type,
        category=category,
        amount=Decimal(amount),
        txn_date=txn_date,
        description=description,
        receipt=receipt,
    )


def income(prop: Property, amount: str, txn_date: datetime, **kwargs) -> Transaction:
    return make_transaction(prop, TransactionType.INCOME, amount, txn_date, **kwargs)


def expense(prop: Property, amount: str, txn_date: datetime, **kwargs) -> Transaction:
    return make_transaction(prop, TransactionType.EXPENSE, amount, txn_date, **kwargs)


def open_zip(payload: bytes) -> zipfile.ZipFile:
    """Open archive bytes for inspection."""
    return zipfile.ZipFile(io.BytesIO(payload))


def read_text(archive: zipfile.ZipFile, name: str) -> str:
    return archive.read(name).decode("utf-8")


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    # Reset settings for clean state
    reset_settings()

    engine = create_sqlite_engine("sqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def property_repo(test_session) -> SqlAlchemyPropertyRepository:
    """Provide test PropertyRepository."""
    return SqlAlchemyPropertyRepository(test_session)


@pytest.fixture
def transaction_repo(test_session) -> SqlAlchemyTransactionRepository:
    """Provide test TransactionRepository."""
    return SqlAlchemyTransactionRepository(test_session)


@pytest.fixture
def preference_repo(test_session) -> SqlAlchemyPreferenceRepository:
    """Provide test PreferenceRepository."""
    return SqlAlchemyPreferenceRepository(test_session)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def portfolio_service(property_repo, transaction_repo) -> PortfolioService:
    """Provide test PortfolioService."""
    return PortfolioService(
        property_repo=property_repo,
        transaction_repo=transaction_repo,
    )


@pytest.fixture
def date_range_service(preference_repo) -> DateRangeService:
    """Provide test DateRangeService."""
    return DateRangeService(preference_repo=preference_repo)


@pytest.fixture
def export_settings() -> Settings:
    """Settings used by exporter fixtures."""
    return Settings(export_size_warning_mb=50, zip_compression_level=6)


@pytest.fixture
def download_sink() -> MemoryDownloadSink:
    """Provide an in-memory download sink."""
    return MemoryDownloadSink()


@pytest.fixture
def exporter(download_sink, export_settings) -> TaxPackExporter:
    """Provide TaxPackExporter with a fixed 'today'."""
    return TaxPackExporter(
        sink=download_sink,
        settings=export_settings,
        today=lambda: FIXED_TODAY,
    )


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def property_factory(portfolio_service) -> Callable[..., Property]:
    """Factory for creating persisted properties."""

    def _create_property(
        name: Optional[str] = None,
        purchase_price: Decimal = Decimal("250000"),
    ) -> Property:
        if name is None:
            name = f"Test Property {uuid.uuid4().hex[:8]}"
        return portfolio_service.create_property(
            PropertyCreate(
                name=name,
                purchase_price=purchase_price,
                purchase_date=date(2023, 6, 1),
            )
        )

    return _create_property


@pytest.fixture
def transaction_factory(portfolio_service) -> Callable[..., Transaction]:
    """Factory for creating persisted transactions."""

    def _create_transaction(
        property_id: str,
        txn_type: TransactionType,
        amount: Decimal,
        txn_date: datetime,
        category: Optional[str] = None,
        description: Optional[str] = None,
        receipt: Optional[ReceiptUpload] = None,
    ) -> Transaction:
        if category is None:
            category = "Rental Income" if txn_type == TransactionType.INCOME else "Materials"
        return portfolio_service.add_transaction(
            TransactionCreate(
                property_id=property_id,
                txn_type=txn_type,
                category=category,
                amount=amount,
                txn_date=txn_date,
                description=description,
                receipt=receipt,
            )
        )

    return _create_transaction


@pytest.fixture
def sample_property(property_factory) -> Property:
    """Create a sample persisted property."""
    return property_factory(name="123 High Street")


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(test_engine, tmp_path) -> TestClient:
    """Provide FastAPI test client with test database."""
    from taxpack.main import app

    # Keep the lifespan's init_db away from the user's data directory
    set_settings(Settings(data_dir=tmp_path))
    reset_database()

    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    reset_database()
    reset_settings()
