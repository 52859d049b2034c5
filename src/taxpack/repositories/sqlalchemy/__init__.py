"""SQLAlchemy repository implementations."""

from taxpack.repositories.sqlalchemy.database import (
    create_sqlite_engine,
    get_engine,
    get_session_factory,
    get_db,
    get_session,
    init_db,
    reset_database,
    Base,
)
from taxpack.repositories.sqlalchemy.property_repo import SqlAlchemyPropertyRepository
from taxpack.repositories.sqlalchemy.transaction_repo import SqlAlchemyTransactionRepository
from taxpack.repositories.sqlalchemy.preference_repo import SqlAlchemyPreferenceRepository

__all__ = [
    "create_sqlite_engine",
    "get_engine",
    "get_session_factory",
    "get_db",
    "get_session",
    "init_db",
    "reset_database",
    "Base",
    "SqlAlchemyPropertyRepository",
    "SqlAlchemyTransactionRepository",
    "SqlAlchemyPreferenceRepository",
]
