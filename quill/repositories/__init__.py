from quill.repositories.base import BaseRepository
from quill.repositories.post import Liker, PostRepository, PostWithAuthor
from quill.repositories.user import UserRepository

__all__ = ["BaseRepository", "Liker", "PostRepository", "PostWithAuthor", "UserRepository"]
