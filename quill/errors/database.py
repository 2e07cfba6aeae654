from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from quill.errors.base import BaseAppError, create_exception_handler
from quill.monitoring import get_logger

logger = get_logger(__name__)


class DatabaseError(BaseAppError):
    """Base exception for database errors."""

    def __init__(
        self,
        detail: str = "Database Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail, status_code)


class DuplicateEntryError(DatabaseError):
    """Exception raised when attempting to create a duplicate entry."""

    def __init__(
        self,
        detail: str = "A record with this value already exists",
    ) -> None:
        super().__init__(detail, HTTP_400_BAD_REQUEST)


class RecordNotFoundError(DatabaseError):
    """Exception raised when a record is not found."""

    def __init__(
        self,
        detail: str = "Record not found",
    ) -> None:
        super().__init__(detail, HTTP_404_NOT_FOUND)


class UserNotFoundError(RecordNotFoundError):
    def __init__(self, detail: str = "User not found") -> None:
        super().__init__(detail)


class PostNotFoundError(RecordNotFoundError):
    def __init__(self, detail: str = "Post not found") -> None:
        super().__init__(detail)


class UsernameTakenError(DuplicateEntryError):
    def __init__(self, detail: str = "Username is already taken") -> None:
        super().__init__(detail)


class AlreadyLikedError(DuplicateEntryError):
    def __init__(self, detail: str = "You have already liked this post") -> None:
        super().__init__(detail)


database_exception_handler = create_exception_handler(logger)
