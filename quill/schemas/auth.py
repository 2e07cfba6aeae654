from uuid import UUID

from pydantic import BaseModel, Field, SecretStr

from quill.schemas.common import CamelModel


class LoginRequest(BaseModel):
    """Credentials submitted to the login endpoint."""

    username: str = Field(..., min_length=1, max_length=50, examples=["alice"])
    password: SecretStr = Field(..., min_length=1, examples=["pw1"])


class LoginResponse(CamelModel):
    """Session token plus the identity it was issued for."""

    message: str = "User logged in successfully"
    token: str
    token_type: str = "bearer"
    user_id: UUID
    role: str


class TokenData(BaseModel):
    """Token data schema for extracted token payload."""

    user_id: UUID
    jti: str
    token_type: str = "access"
