"""Account request and response schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field, SecretStr

from quill.schemas.common import BlobReference, CamelModel

USERNAME_PATTERN = r"^[A-Za-z0-9_.-]+$"


class UserResponse(CamelModel):
    """Public view of an account; the password hash never leaves the server."""

    id: UUID
    username: str
    profile_picture: BlobReference | None = None
    role: str
    created_at: datetime
    updated_at: datetime | None = None


class RegisterResponse(CamelModel):
    message: str = "User registered successfully"
    user: UserResponse


class UsernameUpdate(CamelModel):
    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        pattern=USERNAME_PATTERN,
        examples=["alice_writes"],
    )


class PasswordUpdate(CamelModel):
    current_password: SecretStr = Field(..., min_length=1)
    new_password: SecretStr = Field(..., min_length=1, max_length=128)


class UserMessageResponse(CamelModel):
    message: str
    user: UserResponse
