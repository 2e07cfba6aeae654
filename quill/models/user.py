"""Account database model using SQLModel."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import cast
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String


class Role(StrEnum):
    STANDARD = "standard"
    ADMINISTRATOR = "administrator"


class UserDB(SQLModel, table=True):
    """
    Account database model.

    Holds the credentials and profile of one account. The password is only
    ever stored as a one-way hash and the profile picture as a filename in
    the blob store.
    """

    __tablename__ = cast("declared_attr[str]", "users")

    uuid: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="User ID",
    )
    username: str = Field(
        sa_column=Column(String(50), unique=True, nullable=False, index=True),
        description="Username (unique)",
    )
    password_hash: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Hashed password",
    )
    profile_picture: str | None = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Profile picture filename in the blob store",
    )
    role: str = Field(
        default=Role.STANDARD.value,
        sa_column=Column(String(20), nullable=False, server_default=Role.STANDARD.value, index=True),
        description="Account role (standard, administrator)",
    )

    # Timestamps (timezone-aware)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Creation timestamp",
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
        description="Last update timestamp",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMINISTRATOR
