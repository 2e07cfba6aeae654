from quill.db.database import (
    async_session_maker,
    close_db,
    enable_sqlite_foreign_keys,
    engine,
    get_session,
    init_db,
    transaction,
)

__all__ = [
    "async_session_maker",
    "close_db",
    "enable_sqlite_foreign_keys",
    "engine",
    "get_session",
    "init_db",
    "transaction",
]
