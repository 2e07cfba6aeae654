from quill.configs.settings import (
    CONFIG_MAP,
    DEFAULT_ERROR_MESSAGE,
    POST_IMAGES,
    PROFILE_PICTURES,
    LimiterConfig,
    pool_kwargs,
    settings,
)

__all__ = [
    "CONFIG_MAP",
    "DEFAULT_ERROR_MESSAGE",
    "POST_IMAGES",
    "PROFILE_PICTURES",
    "LimiterConfig",
    "pool_kwargs",
    "settings",
]
