# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os
from tempfile import mkdtemp

# Settings are read at import time, so the environment must be ready
# before anything from quill is imported
os.environ["SECRET_KEY"] = "test-signing-key-not-for-production"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["UPLOADS_DIR"] = mkdtemp(prefix="quill-uploads-")
os.environ["PASSWORD_SECURITY_LEVEL"] = "low"
os.environ["LOG_TO_FILE"] = "false"

from collections.abc import AsyncGenerator, Callable  # noqa: E402
from io import BytesIO  # noqa: E402
from pathlib import Path  # noqa: E402

import pytest  # noqa: E402
from fastapi import UploadFile  # noqa: E402
from PIL import Image  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402
from starlette.datastructures import Headers  # noqa: E402

from quill.configs import POST_IMAGES, PROFILE_PICTURES  # noqa: E402
from quill.db import enable_sqlite_foreign_keys  # noqa: E402
from quill.managers.metrics import MetricsManager  # noqa: E402
from quill.models import PostDB, PostLikeDB, UserDB  # noqa: E402, F401
from quill.repositories import PostRepository, UserRepository  # noqa: E402
from quill.services import AccountService, AdminService, PostService  # noqa: E402
from quill.services.storage import LocalStorage  # noqa: E402


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """In-memory SQLite engine with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    async with session_maker() as session:
        yield session


@pytest.fixture
def storage(tmp_path: Path) -> LocalStorage:
    """Blob store rooted in a per-test temporary directory."""
    return LocalStorage(uploads_dir=tmp_path)


@pytest.fixture
def user_repo(session: AsyncSession) -> UserRepository:
    return UserRepository(session)


@pytest.fixture
def post_repo(session: AsyncSession) -> PostRepository:
    return PostRepository(session)


@pytest.fixture
def account_service(
    user_repo: UserRepository,
    post_repo: PostRepository,
    storage: LocalStorage,
) -> AccountService:
    return AccountService(user_repo, post_repo, storage=storage)


@pytest.fixture
def post_service(
    post_repo: PostRepository,
    user_repo: UserRepository,
    storage: LocalStorage,
) -> PostService:
    return PostService(post_repo, user_repo, storage=storage)


@pytest.fixture
def admin_service(account_service: AccountService, post_service: PostService) -> AdminService:
    return AdminService(account_service, post_service)


@pytest.fixture
def fresh_metrics() -> MetricsManager:
    """Metrics manager isolated from the process-wide instance."""
    return MetricsManager()


@pytest.fixture
def valid_jpeg_bytes() -> bytes:
    """Create valid JPEG image bytes."""
    img = Image.new("RGB", (200, 200), color="red")
    buffer = BytesIO()
    img.save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def valid_png_bytes() -> bytes:
    """Create valid PNG image bytes."""
    img = Image.new("RGBA", (200, 200), color="blue")
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def make_upload(valid_jpeg_bytes: bytes) -> Callable[..., UploadFile]:
    """Factory for real ``UploadFile`` objects, JPEG content by default."""

    def _make(
        data: bytes | None = None,
        content_type: str = "image/jpeg",
        filename: str = "upload.jpg",
    ) -> UploadFile:
        return UploadFile(
            file=BytesIO(valid_jpeg_bytes if data is None else data),
            filename=filename,
            headers=Headers({"content-type": content_type}),
        )

    return _make


@pytest.fixture
def post_image_path(storage: LocalStorage) -> Callable[[str], Path]:
    return lambda filename: storage.uploads_dir / POST_IMAGES / filename


@pytest.fixture
def profile_picture_path(storage: LocalStorage) -> Callable[[str], Path]:
    return lambda filename: storage.uploads_dir / PROFILE_PICTURES / filename
