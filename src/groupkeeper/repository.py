"""Persistence collaborator shared by the services.

A thin repository over a SQLAlchemy session. Lookups never return
soft-deleted records. Writes are flushed but not committed: the calling
service owns the transaction boundary, which is what lets the membership
engine persist both sides of an edge atomically.
"""

from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from groupkeeper.models import Account, Group

ModelT = TypeVar("ModelT", Account, Group)


class Repository(Generic[ModelT]):
    """CRUD access to one soft-deletable model."""

    def __init__(self, db: Session, model: type[ModelT]):
        self.db = db
        self.model = model

    def _select(self, include_deleted: bool = False):
        stmt = select(self.model)
        if not include_deleted:
            stmt = stmt.where(self.model.deleted_at.is_(None))
        return stmt

    def get(self, record_id: int) -> ModelT | None:
        """Return the live record with this id, or None."""
        stmt = self._select().where(self.model.id == record_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def find_one(self, *criteria: Any, include_deleted: bool = False) -> ModelT | None:
        """Return the first record matching all criteria, or None."""
        stmt = self._select(include_deleted).where(*criteria).order_by(self.model.id)
        return self.db.execute(stmt).scalars().first()

    def find_many(self, *criteria: Any) -> list[ModelT]:
        """Return every live record matching all criteria, ordered by id."""
        stmt = self._select().where(*criteria).order_by(self.model.id)
        return list(self.db.execute(stmt).scalars().all())

    def save(self, record: ModelT) -> ModelT:
        """Stage and flush a new or modified record."""
        self.db.add(record)
        self.db.flush()
        return record

    def delete_by_id(self, record_id: int) -> ModelT | None:
        """Soft-delete a record. Returns it, or None if it was not found."""
        record = self.get(record_id)
        if record is None:
            return None
        record.deleted_at = datetime.now(UTC)
        return self.save(record)
