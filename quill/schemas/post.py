"""Post response schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from quill.schemas.common import BlobReference, CamelModel

TITLE_MAX_LENGTH = 200


class AuthorSummary(CamelModel):
    id: UUID
    username: str | None = None


class PostResponse(CamelModel):
    """A post joined with its author's username."""

    id: UUID
    title: str
    content: str
    image: BlobReference | None = None
    author: AuthorSummary
    likes_count: int = Field(0, ge=0)
    created_at: datetime
    updated_at: datetime | None = None


class PostDetailResponse(PostResponse):
    """A single post, including who liked it."""

    likes: list[AuthorSummary] = Field(default_factory=list)


class PostMessageResponse(CamelModel):
    message: str
    post: PostResponse


class LikeResponse(CamelModel):
    message: str = "Post liked successfully"
    post_id: UUID
    likes_count: int
