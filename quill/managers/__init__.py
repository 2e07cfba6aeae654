from quill.managers.metrics import MetricsManager, RequestTimer, metrics_manager
from quill.managers.password_manager import (
    PasswordHasher,
    get_password_hasher,
    hash_password,
    verify_password,
)
from quill.managers.rate_limiter import limiter, rate_limit_exceeded_handler
from quill.managers.token_manager import create_access_token, decode_access_token

__all__ = [
    "MetricsManager",
    "PasswordHasher",
    "RequestTimer",
    "create_access_token",
    "decode_access_token",
    "get_password_hasher",
    "hash_password",
    "limiter",
    "metrics_manager",
    "rate_limit_exceeded_handler",
    "verify_password",
]
