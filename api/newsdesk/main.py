"""
Newsdesk API - news publishing backend.

FastAPI application: publishers submit articles, admins review them, and
approved publisher articles are rewarded through the external rewards API.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from newsdesk.config import settings, validate_security_settings
from newsdesk.database import dispose_db, init_db
from newsdesk.errors import NewsdeskError
from newsdesk.logging_config import configure_logging
from newsdesk.middleware.rate_limit import limiter
from newsdesk.routers.admin import router as admin_router
from newsdesk.routers.articles import router as articles_router
from newsdesk.routers.auth import router as auth_router
from newsdesk.routers.news import router as news_router
from newsdesk.routers.publisher import router as publisher_router
from newsdesk.routers.taxonomy import admin_router as taxonomy_admin_router
from newsdesk.routers.taxonomy import router as taxonomy_router
from newsdesk.routers.uploads import router as uploads_router
from newsdesk.routers.users import router as users_router
from newsdesk.services.views import get_view_counter

# Import models to register them with Base.metadata
from newsdesk.models import Article, Category, Tag, User  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ARG001
    """Application lifespan handler for startup/shutdown."""
    configure_logging()
    validate_security_settings()
    await init_db()
    logger.info("Newsdesk API started (%s)", settings.environment)
    yield
    await get_view_counter().drain()
    await dispose_db()


app = FastAPI(
    title="Newsdesk API",
    description="News publishing with editorial review and publisher rewards",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# Add rate limiter state
app.state.limiter = limiter

# Rate limit exceeded handler
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(news_router)
app.include_router(taxonomy_router)
app.include_router(articles_router)
app.include_router(admin_router)
app.include_router(taxonomy_admin_router)
app.include_router(publisher_router)
app.include_router(uploads_router)


# --- Middleware ---


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add a unique request ID to each request."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# --- Exception Handlers ---


@app.exception_handler(NewsdeskError)
async def newsdesk_exception_handler(request: Request, exc: NewsdeskError) -> JSONResponse:
    """Render service-layer errors in the API error envelope."""
    request_id = getattr(request.state, "request_id", None)
    if exc.status_code >= 500:
        logger.warning("%s: %s %s", exc.code, exc.message, exc.details)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.code,
                "message": exc.message,
                "request_id": request_id,
                "details": exc.details,
            }
        },
    )


def _sanitize_error_detail(error: dict[str, Any]) -> dict[str, Any]:
    """Sanitize Pydantic error detail to be JSON-serializable."""
    sanitized = {}
    for key, value in error.items():
        if key == "ctx":
            # May hold exception instances
            sanitized[key] = {k: str(v) for k, v in value.items()} if isinstance(value, dict) else str(value)
        elif key == "loc":
            sanitized[key] = [str(loc) for loc in value]
        elif key == "input":
            # Raw input can be bytes or other non-JSON values
            continue
        else:
            sanitized[key] = value
    return sanitized


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors with consistent error format."""
    request_id = getattr(request.state, "request_id", None)

    errors = [_sanitize_error_detail(e) for e in exc.errors()]
    if errors:
        first_error = errors[0]
        field = ".".join(str(loc) for loc in first_error.get("loc", []))
        msg = first_error.get("msg", "Validation error")
        message = f"{field}: {msg}" if field else msg
    else:
        message = "Validation error"

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": message,
                "request_id": request_id,
                "details": errors,
            }
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent error format."""
    request_id = getattr(request.state, "request_id", None)
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "request_id": request_id,
            }
        },
    )


# --- Health Check ---


@app.get("/api/v1/health", tags=["System"])
async def health_check() -> dict[str, str]:
    """
    Health check endpoint.

    Returns 200 OK if the API is running.
    """
    return {"status": "healthy"}
