# quill/main.py

"""Quill Backend - blog platform API with accounts, posts, likes and image uploads."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from starlette.responses import Response
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from quill.configs import settings
from quill.errors import (
    AuthenticationError,
    BaseAppError,
    DatabaseError,
    ForbiddenError,
    PasswordHashingError,
    UploadError,
    auth_exception_handler,
    create_exception_handler,
    create_internal_error_handler,
    database_exception_handler,
    password_hashing_exception_handler,
    upload_exception_handler,
    validation_exception_handler,
)
from quill.managers import limiter, metrics_manager, rate_limit_exceeded_handler
from quill.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from quill.monitoring import get_logger
from quill.routes import admin_router, post_router, user_router
from quill.schemas import HealthCheckResponse
from quill.schemas.common import UPLOADS_URL_PREFIX
from quill.utils.helpers import today_str

logger = get_logger("quill")

app = FastAPI(
    title=settings.APP_NAME,
    description="Quill blog platform API",
    version=settings.APP_VERSION,
    lifespan=lifespan,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=settings.FORWARDED_ALLOW_IPS)


routes = [user_router, post_router, admin_router]

_ = [app.include_router(router) for router in routes]

app.mount(
    UPLOADS_URL_PREFIX,
    StaticFiles(directory=settings.UPLOADS_DIR, check_dir=False),
    name="uploads",
)

errors = [
    (RateLimitExceeded, rate_limit_exceeded_handler),
    (PasswordHashingError, password_hashing_exception_handler),
    (DatabaseError, database_exception_handler),
    (AuthenticationError, auth_exception_handler),
    (ForbiddenError, auth_exception_handler),
    (UploadError, upload_exception_handler),
    (BaseAppError, create_exception_handler(logger)),
    (RequestValidationError, validation_exception_handler),
    (Exception, create_internal_error_handler(logger)),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

app.state.limiter = limiter
limiter: Limiter = app.state.limiter


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_model=HealthCheckResponse,
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"status": "ok", "version": "1.0.0", "timestamp": "2025-01-01"},
                },
            },
        },
    },
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request) -> HealthCheckResponse:
    """
    Health check endpoint.

    Parameters
    ----------
    request : Request
        Current request context.

    Returns
    -------
    HealthCheckResponse
        Service status, version and today's date.
    """
    return HealthCheckResponse(status="ok", version=app.version, timestamp=today_str())


@app.get(
    "/metrics",
    tags=["📈 Metrics"],
    response_class=ORJSONResponse,
    summary="Get metrics",
    description="Get API performance metrics.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "timestamp": "2025-01-01",
                        "api_metrics": {"request_counts": {"/posts": 12}},
                    },
                },
            },
        },
        429: {
            "description": "Rate limit exceeded",
            "content": {"application/json": {"example": {"detail": "Too Many Requests"}}},
        },
    },
    operation_id="get_metrics",
)
@limiter.limit("5/minute")
async def get_metrics(request: Request, response: Response) -> ORJSONResponse:
    """
    Get API performance metrics.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Current response context.

    Returns
    -------
    ORJSONResponse
        Request counters, error counters, latency aggregates and blob cleanup
        failures.

    Notes
    -----
    Rate limited to 5 requests per minute.
    """
    return ORJSONResponse(
        content={
            "timestamp": today_str(),
            "api_metrics": metrics_manager.get_metrics(),
        },
    )


@app.get(
    "/",
    tags=["🏠 Root"],
    summary="Root access",
    response_model=dict[str, str],
    response_class=ORJSONResponse,
    operation_id="root_access",
)
@limiter.limit("5/minute")
async def root(request: Request, response: Response) -> dict[str, str]:
    """Welcome message."""
    return {"message": f"Welcome to {settings.APP_NAME}"}


if __name__ == "__main__":
    from uvicorn import run

    run(app, host="127.0.0.1", port=8000, log_level="info")
