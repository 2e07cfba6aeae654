from quill.schemas.auth import LoginRequest, LoginResponse, TokenData
from quill.schemas.common import BlobReference, HealthCheckResponse, MessageResponse
from quill.schemas.post import (
    AuthorSummary,
    LikeResponse,
    PostDetailResponse,
    PostMessageResponse,
    PostResponse,
)
from quill.schemas.user import (
    PasswordUpdate,
    RegisterResponse,
    UsernameUpdate,
    UserMessageResponse,
    UserResponse,
)

__all__ = [
    "AuthorSummary",
    "BlobReference",
    "HealthCheckResponse",
    "LikeResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "PasswordUpdate",
    "PostDetailResponse",
    "PostMessageResponse",
    "PostResponse",
    "RegisterResponse",
    "TokenData",
    "UserMessageResponse",
    "UserResponse",
    "UsernameUpdate",
]
