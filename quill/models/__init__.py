"""Database models for the application."""

from quill.models.post import PostDB, PostLikeDB
from quill.models.user import Role, UserDB

__all__ = ["PostDB", "PostLikeDB", "Role", "UserDB"]
