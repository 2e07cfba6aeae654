from quill.errors.auth import (
    AuthenticationError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidCurrentPasswordError,
    InvalidTokenError,
    auth_exception_handler,
)
from quill.errors.base import (
    BASE_EXCEPTION,
    BaseAppError,
    create_exception_handler,
    create_internal_error_handler,
)
from quill.errors.database import (
    AlreadyLikedError,
    DatabaseError,
    DuplicateEntryError,
    PostNotFoundError,
    RecordNotFoundError,
    UsernameTakenError,
    UserNotFoundError,
    database_exception_handler,
)
from quill.errors.password_hasher import PasswordHashingError, password_hashing_exception_handler
from quill.errors.upload import (
    ImageProcessingError,
    ImageTooLargeError,
    InvalidImageError,
    StorageError,
    UnsupportedImageTypeError,
    UploadError,
    upload_exception_handler,
)
from quill.errors.validation import validation_exception_handler

__all__ = [
    "BASE_EXCEPTION",
    "AlreadyLikedError",
    "AuthenticationError",
    "BaseAppError",
    "DatabaseError",
    "DuplicateEntryError",
    "ForbiddenError",
    "ImageProcessingError",
    "ImageTooLargeError",
    "InvalidCredentialsError",
    "InvalidCurrentPasswordError",
    "InvalidImageError",
    "InvalidTokenError",
    "PasswordHashingError",
    "PostNotFoundError",
    "RecordNotFoundError",
    "StorageError",
    "UnsupportedImageTypeError",
    "UploadError",
    "UserNotFoundError",
    "UsernameTakenError",
    "auth_exception_handler",
    "create_exception_handler",
    "create_internal_error_handler",
    "database_exception_handler",
    "password_hashing_exception_handler",
    "upload_exception_handler",
    "validation_exception_handler",
]
