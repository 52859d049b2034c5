"""SQLAlchemy ORM model definitions."""

from datetime import datetime

from sqlalchemy import (
    Column,
    String,
    Date,
    DateTime,
    Text,
    ForeignKey,
    Numeric,
    Enum as SqlEnum,
)
from sqlalchemy.orm import relationship

from taxpack.repositories.sqlalchemy.database import Base
from taxpack.domain.models.enums import PropertyType, PropertyStatus, TransactionType


def _enum(enum_cls):
    # Store the display values ("In Development"), not the member names
    return SqlEnum(enum_cls, values_callable=lambda e: [m.value for m in e])


class PropertyORM(Base):
    """SQLAlchemy model for Property."""

    __tablename__ = "properties"

    property_id = Column(String(36), primary_key=True)
    name = Column(String(255), unique=True, nullable=False)
    purchase_price = Column(Numeric(precision=18, scale=2), nullable=False)
    purchase_date = Column(Date, nullable=False)
    property_type = Column(_enum(PropertyType), nullable=False)
    current_value = Column(Numeric(precision=18, scale=2), nullable=True)
    status = Column(_enum(PropertyStatus), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    transactions = relationship(
        "TransactionORM",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class TransactionORM(Base):
    """SQLAlchemy model for Transaction, receipt stored inline."""

    __tablename__ = "transactions"

    txn_id = Column(String(36), primary_key=True)
    property_id = Column(
        String(36),
        ForeignKey("properties.property_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    txn_type = Column(_enum(TransactionType), nullable=False)
    category = Column(String(64), nullable=False)
    amount = Column(Numeric(precision=18, scale=2), nullable=False)
    txn_date = Column(DateTime, nullable=False)
    description = Column(Text, nullable=True)
    receipt_filename = Column(String(255), nullable=True)
    receipt_data = Column(Text, nullable=True)
    receipt_upload_date = Column(String(64), nullable=True)
    receipt_file_type = Column(String(64), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    owner = relationship("PropertyORM", back_populates="transactions")


class PreferenceORM(Base):
    """SQLAlchemy model for a single user preference."""

    __tablename__ = "preferences"

    key = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
