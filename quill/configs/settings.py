"""Application settings and configuration constants.

This module contains application settings, constants, and configuration
values for the Quill blogging backend.
"""

from pathlib import Path
from typing import Literal, NamedTuple

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = Path(__file__).parent.parent.parent / ".env"

# Upload folders inside UPLOADS_DIR
POST_IMAGES = "post_images"
PROFILE_PICTURES = "profile_pictures"

# Response constants
DEFAULT_ERROR_MESSAGE = "Internal server error"


class Argon2Config(NamedTuple):
    """Argon2 cost parameters for one security level."""

    memory_cost: int  # KiB
    time_cost: int
    parallelism: int


CONFIG_MAP: dict[str, Argon2Config] = {
    "low": Argon2Config(memory_cost=1024, time_cost=1, parallelism=1),
    "medium": Argon2Config(memory_cost=65536, time_cost=2, parallelism=2),
    "high": Argon2Config(memory_cost=524288, time_cost=3, parallelism=4),
}


class Settings(BaseSettings):
    """Application settings with validation and default values."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Quill Blog Backend"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"
    PRODUCTION_FRONTEND_URL: str | None = None
    # Comma separated proxy addresses whose X-Forwarded-For is trusted
    FORWARDED_ALLOW_IPS: str = "127.0.0.1"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_FILE: str = "logs/quill.log"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./quill.db"
    DATABASE_ECHO: bool = False
    POOL_SIZE: int = 10
    MAX_OVERFLOW: int = 20
    POOL_TIMEOUT: int = 30
    POOL_RECYCLE: int = 1800

    # Session tokens
    SECRET_KEY: SecretStr
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    JWT_ISSUER: str = "quill-backend"
    JWT_AUDIENCE: str = "quill-clients"

    # Accounts
    PASSWORD_SECURITY_LEVEL: Literal["low", "medium", "high"] = "medium"
    ALLOW_ADMIN_REGISTRATION: bool = False

    # Uploads
    UPLOADS_DIR: Path = Path("uploads")
    IMAGE_MAX_SIZE_MB: int = 5
    IMAGE_ALLOWED_TYPES: list[str] = ["image/jpeg", "image/png", "image/webp"]
    PROFILE_PICTURE_MAX_DIMENSION: int = 512
    POST_IMAGE_MAX_DIMENSION: int = 1920
    IMAGE_QUALITY: int = 85

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


class LimiterConfig(BaseSettings):
    """Rate limiter configuration passed straight to slowapi's ``Limiter``."""

    model_config = SettingsConfigDict(env_prefix="RATE_LIMIT_", case_sensitive=False)

    storage_uri: str = "memory://"
    default_limits: list[str] = ["200/minute"]
    headers_enabled: bool = False
    enabled: bool = True


def pool_kwargs() -> dict[str, int | bool]:
    """Connection pool arguments; SQLite engines keep SQLAlchemy's defaults."""
    if settings.is_sqlite:
        return {}
    return {
        "pool_size": settings.POOL_SIZE,
        "max_overflow": settings.MAX_OVERFLOW,
        "pool_timeout": settings.POOL_TIMEOUT,
        "pool_recycle": settings.POOL_RECYCLE,
        "pool_pre_ping": True,
    }


settings = Settings()  # type: ignore[call-arg]
