"""User repository for database operations."""

from datetime import UTC, datetime
from typing import Any, cast
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.sql.expression import ColumnElement

from quill.errors.database import UsernameTakenError
from quill.models.user import Role, UserDB
from quill.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserDB]):
    """
    Repository for account records.

    Passwords arrive here already hashed; this layer never sees plaintext.
    """

    model = UserDB
    id_field = "uuid"
    duplicate_error = UsernameTakenError

    async def create(
        self,
        username: str,
        password_hash: str,
        role: Role = Role.STANDARD,
        profile_picture: str | None = None,
    ) -> UserDB:
        """
        Create a new account.

        Raises:
            UsernameTakenError: If the username is already in use
        """
        db_user = UserDB(
            username=username,
            password_hash=password_hash,
            role=role.value,
            profile_picture=profile_picture,
        )
        return await self._add_and_refresh(db_user)

    async def get_by_username(self, username: str) -> UserDB | None:
        """
        Get user by username.

        Args:
            username: Username to search for

        Returns:
            UserDB | None: User if found, None otherwise
        """
        result = await self.session.execute(
            select(UserDB).where(cast(ColumnElement[bool], UserDB.username == username)),
        )
        return result.scalar_one_or_none()

    async def username_taken(self, username: str, exclude_id: UUID | None = None) -> bool:
        """Check whether another account already uses ``username``."""
        statement = select(UserDB.uuid).where(cast(ColumnElement[bool], UserDB.username == username))
        if exclude_id is not None:
            statement = statement.where(cast(ColumnElement[bool], UserDB.uuid != exclude_id))
        result = await self.session.execute(statement.limit(1))
        return result.scalar_one_or_none() is not None

    async def get_all(self) -> list[UserDB]:
        """Return every account, oldest first."""
        result = await self.session.execute(select(UserDB).order_by(UserDB.created_at))  # type: ignore[arg-type]
        return list(result.scalars().all())

    async def update(self, db_user: UserDB, **fields: Any) -> UserDB:
        """
        Apply field changes to a loaded account and flush them.

        Raises:
            UsernameTakenError: If a new username collides with another account
        """
        for key, value in fields.items():
            setattr(db_user, key, value)
        db_user.updated_at = datetime.now(tz=UTC)

        try:
            await self.session.flush()
            await self.session.refresh(db_user)
        except IntegrityError as e:
            await self.session.rollback()
            self._raise_integrity_error(e)
        return db_user
