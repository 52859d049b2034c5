"""SQLAlchemy implementation of PreferenceRepository."""

from typing import Optional

from sqlalchemy.orm import Session

from taxpack.repositories.sqlalchemy.orm_models import PreferenceORM


class SqlAlchemyPreferenceRepository:
    """SQLAlchemy-backed key/value preference store."""

    def __init__(self, db: Session):
        self._db = db

    def get(self, key: str) -> Optional[str]:
        orm_pref = self._db.get(PreferenceORM, key)
        return orm_pref.value if orm_pref else None

    def set(self, key: str, value: str) -> None:
        orm_pref = self._db.get(PreferenceORM, key)
        if orm_pref is None:
            self._db.add(PreferenceORM(key=key, value=value))
        else:
            orm_pref.value = value
        self._db.commit()
