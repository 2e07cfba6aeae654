"""Post and like database models using SQLModel."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Integer, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel, String


class PostDB(SQLModel, table=True):
    """
    Post database model.

    ``likes_count`` mirrors the number of ``PostLikeDB`` rows for the post
    and is only changed in the same transaction as those rows.
    """

    __tablename__ = cast("declared_attr[str]", "posts")

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Post ID",
    )
    author_id: UUID = Field(
        sa_column=Column(
            "author_id",
            Uuid,
            ForeignKey("users.uuid", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="Author ID (foreign key to users.uuid)",
    )
    title: str = Field(
        sa_column=Column(String(200), nullable=False),
        description="Post title",
    )
    content: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Post body",
    )
    image: str | None = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Image filename in the blob store",
    )
    likes_count: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, server_default="0"),
        description="Number of likes",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Creation timestamp",
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
        description="Last update timestamp",
    )


class PostLikeDB(SQLModel, table=True):
    """One like of one post by one account."""

    __tablename__ = cast("declared_attr[str]", "post_likes")
    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_post_likes_post_user"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)
    post_id: UUID = Field(
        sa_column=Column(
            "post_id",
            Uuid,
            ForeignKey("posts.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
    user_id: UUID = Field(
        sa_column=Column(
            "user_id",
            Uuid,
            ForeignKey("users.uuid", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
