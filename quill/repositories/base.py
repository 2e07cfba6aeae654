"""Base repository for database operations."""

from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from quill.errors.database import DatabaseError, DuplicateEntryError

ModelT = TypeVar("ModelT", bound=SQLModel)


class BaseRepository(Generic[ModelT]):
    """
    Base repository implementing the operations shared by every entity.

    Attributes:
        model: The SQLModel database model type.
        id_field: The name of the primary key field (default: "id").
        duplicate_error: Error raised when a unique constraint is violated.
    """

    model: type[ModelT]
    id_field: str = "id"
    duplicate_error: type[DuplicateEntryError] = DuplicateEntryError

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize repository with database session.

        Args:
            session: Async database session
        """
        self.session = session

    async def get_by_id(self, record_id: UUID) -> ModelT | None:
        """
        Get a record by its ID.

        Args:
            record_id: Record UUID

        Returns:
            ModelT | None: Record if found, None otherwise
        """
        id_column = getattr(self.model, self.id_field)
        result = await self.session.execute(select(self.model).where(id_column == record_id))
        return result.scalar_one_or_none()

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(self.model))
        return result.scalar() or 0

    async def delete(self, record: ModelT) -> None:
        """Mark a loaded record for deletion and flush."""
        await self.session.delete(record)
        await self.session.flush()

    async def commit(self) -> None:
        """
        Commit the current unit of work.

        Raises:
            DatabaseError: If the database rejects the commit
        """
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(detail="Failed to save changes") from e

    async def _add_and_refresh(self, record: ModelT) -> ModelT:
        """
        Add a record and refresh it from the database with error handling.

        Args:
            record: Record to add

        Returns:
            ModelT: Refreshed record

        Raises:
            DuplicateEntryError: If a unique constraint is violated
            DatabaseError: For other integrity errors
        """
        try:
            self.session.add(record)
            await self.session.flush()
            await self.session.refresh(record)
        except IntegrityError as e:
            await self.session.rollback()
            self._raise_integrity_error(e)
        return record

    def _raise_integrity_error(self, error: IntegrityError) -> None:
        error_msg = str(error.orig) if error.orig else str(error)
        if "unique" in error_msg.lower() or "duplicate" in error_msg.lower():
            raise self.duplicate_error from error
        raise DatabaseError(detail="Database integrity error") from error
