# tests/errors/test_base.py
"""Tests for quill/errors/base.py and the error taxonomy."""

from unittest.mock import MagicMock

import orjson
import pytest

from quill.errors import (
    AlreadyLikedError,
    BaseAppError,
    ForbiddenError,
    ImageTooLargeError,
    InvalidTokenError,
    PostNotFoundError,
    UsernameTakenError,
    UserNotFoundError,
    create_exception_handler,
    create_internal_error_handler,
)


def _request() -> MagicMock:
    request = MagicMock()
    request.client.host = "192.168.1.1"
    request.url.path = "/api/test"
    request.method = "GET"
    return request


class TestBaseAppError:
    """Tests for BaseAppError exception."""

    def test_default_values(self) -> None:
        error = BaseAppError()
        assert error.detail == "Internal Server Error"
        assert error.status_code == 500

    def test_str_representation(self) -> None:
        assert str(BaseAppError(detail="Test error")) == "Test error"


class TestTaxonomy:
    @pytest.mark.parametrize(
        ("error", "status_code", "detail"),
        [
            (UserNotFoundError(), 404, "User not found"),
            (PostNotFoundError(), 404, "Post not found"),
            (UsernameTakenError(), 400, "Username is already taken"),
            (AlreadyLikedError(), 400, "You have already liked this post"),
            (InvalidTokenError(), 401, "Could not validate credentials"),
            (ForbiddenError(), 403, "You do not have permission to perform this action"),
        ],
    )
    def test_status_and_message(self, error: BaseAppError, status_code: int, detail: str) -> None:
        assert error.status_code == status_code
        assert error.detail == detail


class TestCreateExceptionHandler:
    """Tests for create_exception_handler factory function."""

    @pytest.mark.asyncio
    async def test_handler_with_base_app_error(self) -> None:
        logger = MagicMock()
        handler = create_exception_handler(logger)

        response = await handler(_request(), BaseAppError(detail="Test error", status_code=400))

        assert response.status_code == 400
        assert response.body == b'{"detail":"Test error"}'
        logger.warning.assert_called_once_with(
            "Test error for ip: 192.168.1.1 for endpoint /api/test",
        )

    @pytest.mark.asyncio
    async def test_extra_attributes_included(self) -> None:
        handler = create_exception_handler(MagicMock())

        response = await handler(_request(), ImageTooLargeError(max_size_mb=5))

        assert response.status_code == 413
        assert orjson.loads(response.body)["max_size_mb"] == 5

    @pytest.mark.asyncio
    async def test_headers_forwarded(self) -> None:
        handler = create_exception_handler(MagicMock())

        response = await handler(_request(), InvalidTokenError())

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"


class TestInternalErrorHandler:
    @pytest.mark.asyncio
    async def test_generic_message_only(self) -> None:
        logger = MagicMock()
        handler = create_internal_error_handler(logger)

        response = await handler(_request(), RuntimeError("connection string leaked"))

        assert response.status_code == 500
        assert orjson.loads(response.body) == {"detail": "Internal server error"}
        logger.exception.assert_called_once()
