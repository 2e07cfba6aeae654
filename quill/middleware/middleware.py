# quill/middleware/middleware.py
"""
Middleware components for the Quill backend.

This module contains middleware for security headers, request logging and
CORS, plus the lifespan handler that prepares the database and upload
folders on startup and releases them on shutdown.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from quill.configs import POST_IMAGES, PROFILE_PICTURES, settings
from quill.db import close_db, init_db
from quill.monitoring import bind_request_id, clear_context, configure_logging, get_logger
from quill.utils.helpers import get_summary, host

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown."""
    configure_logging()
    logger.info(f"Starting {app.title}...")

    try:
        for folder in (POST_IMAGES, PROFILE_PICTURES):
            (settings.UPLOADS_DIR / folder).mkdir(parents=True, exist_ok=True)
        await init_db()
        logger.info("Services initialized successfully")
        logger.info("  - API Documentation: /docs")
        logger.info("  - Health Check: /health")
    except Exception:
        logger.exception("Failed to initialize services")
        raise

    yield

    logger.info(f"Shutting down {app.title}...")
    await close_db()


def configure_cors(app: FastAPI) -> None:
    """Configure CORS middleware for the application."""
    allowed_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    if frontend_url := settings.PRODUCTION_FRONTEND_URL:
        allowed_origins.append(frontend_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Log request summary and timing, tagged with a request id."""
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        bind_request_id(request_id)

        start_time = perf_counter()
        route_info = get_summary(request) or f"{request.method} {request.url.path}"
        logger.info(f"Request: {route_info}, from ip: {host(request)}")

        try:
            response = await call_next(request)
        finally:
            clear_context()

        logger.info(
            f"Response: {response.status_code} for {request.method} {request.url.path} "
            f"in {perf_counter() - start_time:.3f}s",
            request_id=request_id,
        )
        response.headers["X-Request-ID"] = request_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Add security headers to all responses."""
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response
