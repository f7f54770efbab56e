"""
Base repository interface for data access layer.
This follows the Repository pattern to separate business logic from data access.

Repositories never filter by owner themselves: the session they are given is
bound to a caller identity and the row policies decide what it may read or
write.
"""

import logging
from typing import Generic, TypeVar, Optional, Type
from uuid import UUID
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from abc import ABC

from app.exceptions import ConflictError, PermissionDeniedError

ModelType = TypeVar("ModelType")

logger = logging.getLogger("angiday.repositories")


class BaseRepository(Generic[ModelType], ABC):
    """
    Base repository providing common CRUD operations.
    All repositories should inherit from this class.
    """

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: UUID) -> Optional[ModelType]:
        """
        Get entity by primary key.

        Returns None both when the row does not exist and when the caller's
        policies hide it.
        """
        return self.db.get(self.model, entity_id)

    def create(self, entity: ModelType) -> ModelType:
        """Create new entity"""
        self.db.add(entity)
        self.commit()
        self.db.refresh(entity)
        return entity

    def update(self, entity: ModelType, **fields) -> ModelType:
        """Apply a partial update; only the given attributes are written"""
        for key, value in fields.items():
            setattr(entity, key, value)
        self.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity: ModelType) -> None:
        """Delete entity; database cascades run in the same transaction"""
        self.db.delete(entity)
        self.commit()

    def commit(self) -> None:
        """Commit, translating store rejections into service errors.

        Policy denials keep their own type so callers can tell "not allowed"
        from "bad data".
        """
        try:
            self.db.commit()
        except PermissionDeniedError:
            self.db.rollback()
            raise
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"integrity_violation model={self.model.__name__} error={e.orig}")
            raise ConflictError(
                f"{self.model.__name__} violates a database constraint",
                details={"error": str(e.orig)},
                code="INTEGRITY_ERROR",
            )
