"""SQLAlchemy implementation of PropertyRepository."""

from typing import Optional

from sqlalchemy.orm import Session

from taxpack.domain.models import Property
from taxpack.repositories.sqlalchemy.orm_models import PropertyORM


class SqlAlchemyPropertyRepository:
    """SQLAlchemy-backed property repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, prop: Property) -> Property:
        """Persist a new property."""
        orm_property = PropertyORM(
            property_id=prop.property_id,
            name=prop.name,
            purchase_price=prop.purchase_price,
            purchase_date=prop.purchase_date,
            property_type=prop.property_type,
            current_value=prop.current_value,
            status=prop.status,
            created_at=prop.created_at,
        )
        self._db.add(orm_property)
        self._db.commit()
        self._db.refresh(orm_property)
        return self._to_domain(orm_property)

    def get_by_id(self, property_id: str) -> Optional[Property]:
        """Retrieve property by ID."""
        orm_property = self._db.query(PropertyORM).filter(
            PropertyORM.property_id == property_id
        ).first()
        return self._to_domain(orm_property) if orm_property else None

    def get_by_name(self, name: str) -> Optional[Property]:
        """Retrieve property by name."""
        orm_property = self._db.query(PropertyORM).filter(
            PropertyORM.name == name
        ).first()
        return self._to_domain(orm_property) if orm_property else None

    def list_all(self) -> list[Property]:
        """List all properties."""
        orm_properties = self._db.query(PropertyORM).order_by(PropertyORM.name).all()
        return [self._to_domain(p) for p in orm_properties]

    def update(self, prop: Property) -> Property:
        """Update an existing property."""
        orm_property = self._db.query(PropertyORM).filter(
            PropertyORM.property_id == prop.property_id
        ).first()
        if not orm_property:
            raise ValueError(f"Property not found: {prop.property_id}")

        orm_property.name = prop.name
        orm_property.purchase_price = prop.purchase_price
        orm_property.purchase_date = prop.purchase_date
        orm_property.property_type = prop.property_type
        orm_property.current_value = prop.current_value
        orm_property.status = prop.status

        self._db.commit()
        self._db.refresh(orm_property)
        return self._to_domain(orm_property)

    def delete(self, property_id: str) -> None:
        """Delete a property."""
        self._db.query(PropertyORM).filter(
            PropertyORM.property_id == property_id
        ).delete()
        self._db.commit()

    @staticmethod
    def _to_domain(orm: PropertyORM) -> Property:
        """Convert ORM model to domain model."""
        return Property(
            property_id=orm.property_id,
            name=orm.name,
            purchase_price=orm.purchase_price,
            purchase_date=orm.purchase_date,
            property_type=orm.property_type,
            current_value=orm.current_value,
            status=orm.status,
            created_at=orm.created_at,
        )
