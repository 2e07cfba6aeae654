# tests/routes/conftest.py
"""Pytest fixtures for route tests."""

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any, TypeAlias

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from quill.db import get_session
from quill.main import app
from quill.managers.password_manager import hash_password
from quill.managers.rate_limiter import limiter
from quill.managers.token_manager import create_access_token
from quill.models import Role
from quill.repositories import UserRepository
from quill.services.storage import LocalStorage, get_storage_service

RegisterUser: TypeAlias = Callable[..., Awaitable[dict[str, Any]]]
LoginAs: TypeAlias = Callable[[str, str], Awaitable[dict[str, str]]]


@pytest.fixture
async def client(
    session_maker: async_sessionmaker[AsyncSession],
    storage: LocalStorage,
) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client bound to the test database and blob store."""

    async def override_session() -> AsyncGenerator[AsyncSession]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_storage_service] = lambda: storage
    limiter.enabled = False
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client: AsyncClient, valid_jpeg_bytes: bytes) -> RegisterUser:
    """Register through the API and return the created account."""

    async def _register(
        username: str,
        password: str = "pw1",
        *,
        picture: bool = False,
    ) -> dict[str, Any]:
        files = {"profilePicture": ("me.jpg", valid_jpeg_bytes, "image/jpeg")} if picture else None
        response = await client.post(
            "/users",
            data={"username": username, "password": password},
            files=files,
        )
        assert response.status_code == 201, response.text
        return response.json()["user"]

    return _register


@pytest.fixture
def login_as(client: AsyncClient) -> LoginAs:
    """Log in through the API and return bearer headers."""

    async def _login(username: str, password: str = "pw1") -> dict[str, str]:
        response = await client.post("/users/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login


@pytest.fixture
async def admin_headers(session_maker: async_sessionmaker[AsyncSession]) -> dict[str, str]:
    """Bearer headers for an administrator created directly in the store."""
    async with session_maker() as session:
        repo = UserRepository(session)
        admin = await repo.create(
            username="admin",
            password_hash=await hash_password("admin-pw"),
            role=Role.ADMINISTRATOR,
        )
        await repo.commit()
    return {"Authorization": f"Bearer {create_access_token(admin.uuid)}"}


@pytest.fixture
def image_file(valid_jpeg_bytes: bytes) -> dict[str, tuple[str, bytes, str]]:
    return {"image": ("post.jpg", valid_jpeg_bytes, "image/jpeg")}
