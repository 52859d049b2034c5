"""Dependency injection for FastAPI."""

from fastapi import Depends
from sqlalchemy.orm import Session

from taxpack.repositories.sqlalchemy.database import get_db
from taxpack.repositories.sqlalchemy import (
    SqlAlchemyPropertyRepository,
    SqlAlchemyTransactionRepository,
    SqlAlchemyPreferenceRepository,
)
from taxpack.services import PortfolioService, DateRangeService
from taxpack.export import TaxPackExporter, MemoryDownloadSink
from taxpack.config.settings import get_settings


def get_property_repo(db: Session = Depends(get_db)) -> SqlAlchemyPropertyRepository:
    """Provide PropertyRepository instance."""
    return SqlAlchemyPropertyRepository(db)


def get_transaction_repo(db: Session = Depends(get_db)) -> SqlAlchemyTransactionRepository:
    """Provide TransactionRepository instance."""
    return SqlAlchemyTransactionRepository(db)


def get_preference_repo(db: Session = Depends(get_db)) -> SqlAlchemyPreferenceRepository:
    """Provide PreferenceRepository instance."""
    return SqlAlchemyPreferenceRepository(db)


def get_portfolio_service(
    property_repo: SqlAlchemyPropertyRepository = Depends(get_property_repo),
    transaction_repo: SqlAlchemyTransactionRepository = Depends(get_transaction_repo),
) -> PortfolioService:
    """Provide PortfolioService instance."""
    return PortfolioService(
        property_repo=property_repo,
        transaction_repo=transaction_repo,
    )


def get_date_range_service(
    preference_repo: SqlAlchemyPreferenceRepository = Depends(get_preference_repo),
) -> DateRangeService:
    """Provide DateRangeService instance."""
    return DateRangeService(preference_repo=preference_repo)


def get_download_sink() -> MemoryDownloadSink:
    """Provide a per-request in-memory sink for the finished archive."""
    return MemoryDownloadSink()


def get_exporter(
    sink: MemoryDownloadSink = Depends(get_download_sink),
) -> TaxPackExporter:
    """Provide TaxPackExporter writing into the request's sink."""
    return TaxPackExporter(sink=sink, settings=get_settings())
