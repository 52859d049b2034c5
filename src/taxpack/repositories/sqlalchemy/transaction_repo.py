"""SQLAlchemy implementation of TransactionRepository."""

from typing import Optional

from sqlalchemy.orm import Session

from taxpack.domain.models import Receipt, Transaction
from taxpack.repositories.sqlalchemy.orm_models import TransactionORM


class SqlAlchemyTransactionRepository:
    """SQLAlchemy-backed transaction repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction."""
        orm_txn = self._to_orm(transaction)
        self._db.add(orm_txn)
        self._db.commit()
        self._db.refresh(orm_txn)
        return self._to_domain(orm_txn)

    def get_by_id(self, txn_id: str) -> Optional[Transaction]:
        """Retrieve transaction by ID."""
        orm_txn = self._db.query(TransactionORM).filter(
            TransactionORM.txn_id == txn_id
        ).first()
        return self._to_domain(orm_txn) if orm_txn else None

    def list_by_property(self, property_id: str) -> list[Transaction]:
        """List all transactions for a property, ordered by txn_date."""
        query = self._db.query(TransactionORM).filter(
            TransactionORM.property_id == property_id
        ).order_by(TransactionORM.txn_date)
        return [self._to_domain(t) for t in query.all()]

    def list_all(self) -> list[Transaction]:
        """List every transaction, ordered by txn_date."""
        query = self._db.query(TransactionORM).order_by(TransactionORM.txn_date)
        return [self._to_domain(t) for t in query.all()]

    def delete(self, txn_id: str) -> None:
        """Delete a single transaction."""
        self._db.query(TransactionORM).filter(
            TransactionORM.txn_id == txn_id
        ).delete()
        self._db.commit()

    def delete_by_property(self, property_id: str) -> int:
        """Delete all of a property's transactions."""
        deleted = self._db.query(TransactionORM).filter(
            TransactionORM.property_id == property_id
        ).delete()
        self._db.commit()
        return deleted

    @staticmethod
    def _to_orm(txn: Transaction) -> TransactionORM:
        """Convert domain model to ORM model."""
        receipt = txn.receipt
        return TransactionORM(
            txn_id=txn.txn_id,
            property_id=txn.property_id,
            txn_type=txn.txn_type,
            category=txn.category,
            amount=txn.amount,
            txn_date=txn.txn_date,
            description=txn.description,
            receipt_filename=receipt.filename if receipt else None,
            receipt_data=receipt.data if receipt else None,
            receipt_upload_date=receipt.upload_date if receipt else None,
            receipt_file_type=receipt.file_type if receipt else None,
            created_at=txn.created_at,
        )

    @staticmethod
    def _to_domain(orm: TransactionORM) -> Transaction:
        """Convert ORM model to domain model."""
        receipt = None
        if orm.receipt_data:
            receipt = Receipt(
                filename=orm.receipt_filename or "",
                data=orm.receipt_data,
                upload_date=orm.receipt_upload_date,
                file_type=orm.receipt_file_type or "",
            )
        return Transaction(
            txn_id=orm.txn_id,
            property_id=orm.property_id,
            txn_type=orm.txn_type,
            category=orm.category,
            amount=orm.amount,
            txn_date=orm.txn_date,
            description=orm.description,
            receipt=receipt,
            created_at=orm.created_at,
        )
