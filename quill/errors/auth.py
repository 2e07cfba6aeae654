"""Authentication and authorization error classes."""

from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from quill.errors.base import BaseAppError, create_exception_handler
from quill.monitoring import get_logger

logger = get_logger(__name__)


class AuthenticationError(BaseAppError):
    """Base exception for authentication failures."""

    def __init__(
        self,
        detail: str = "Authentication failed",
        status_code: int = HTTP_401_UNAUTHORIZED,
    ) -> None:
        super().__init__(detail=detail, status_code=status_code)


class InvalidCredentialsError(AuthenticationError):
    """
    Raised for an unknown username or a wrong password.

    Both cases share one message so a caller cannot tell which check failed.
    """

    def __init__(self, detail: str = "Invalid username or password") -> None:
        super().__init__(detail=detail)


class InvalidCurrentPasswordError(AuthenticationError):
    def __init__(self, detail: str = "Invalid current password") -> None:
        super().__init__(detail=detail)


class InvalidTokenError(AuthenticationError):
    """Raised when a bearer token is missing, malformed, expired or orphaned."""

    headers = {"WWW-Authenticate": "Bearer"}

    def __init__(self, detail: str = "Could not validate credentials") -> None:
        super().__init__(detail=detail)


class ForbiddenError(BaseAppError):
    """Raised when an authenticated account lacks permission for the action."""

    def __init__(self, detail: str = "You do not have permission to perform this action") -> None:
        super().__init__(detail=detail, status_code=HTTP_403_FORBIDDEN)


auth_exception_handler = create_exception_handler(logger)
