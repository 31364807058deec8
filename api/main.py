"""
api/main.py -- FastAPI application entry point for the blog API.

Run with:  python main.py
           uvicorn api.main:app --reload

Middleware stack:
  1. CORSMiddleware       -- CORS headers for the configured origins (all by default)
  2. log_requests         -- one log line per request with status and latency

Lifespan builds the shared, read-only collaborators once and hangs them on
app.state: Settings, TokenService (holds the signing key), UserStore and
BlogStore. Route handlers and auth dependencies read them from there; nothing
reads configuration ad hoc.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from api.models import ErrorDetail, ErrorResponse
from api.routes.blogs import router as blogs_router
from api.routes.system import router as system_router
from api.routes.users import router as users_router
from auth.store import UserStore
from auth.tokens import TokenService
from blog.store import BlogStore
from core.config import Settings, get_settings
from core.errors import BlogApiError, Unauthorized

_settings = get_settings()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("blogapi.api")


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


def _build_stores(settings: Settings) -> tuple[UserStore, BlogStore]:
    if settings.database_url:
        return UserStore(settings.database_url), BlogStore(settings.database_url)
    return UserStore(), BlogStore()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create stores and the token service on startup; dispose engines on shutdown."""
    settings = get_settings()
    logger.info("Blog API starting up")
    app.state.settings = settings
    app.state.tokens = TokenService(settings.secret_key, settings.token_expire_seconds)
    app.state.user_store, app.state.blog_store = _build_stores(settings)
    logger.info(
        "Stores initialized (login_checks_password=%s, enforce_ownership=%s)",
        settings.login_checks_password,
        settings.enforce_ownership,
    )

    yield

    app.state.user_store.close()
    app.state.blog_store.close()
    logger.info("Blog API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Blog API",
    description="Multi-user blogging backend: accounts, session tokens and author-owned posts.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(system_router, prefix="/api", tags=["System"])
app.include_router(users_router, prefix="/api", tags=["Users"])
app.include_router(blogs_router, prefix="/api", tags=["Blogs"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so API clients can parse
# errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


def _error(status_code: int, code: str, message: str, detail: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(code=code, message=message, detail=detail)).model_dump(),
    )


@app.exception_handler(BlogApiError)
async def blog_api_error_handler(request: Request, exc: BlogApiError) -> JSONResponse:
    """Translate a domain error into the error envelope.

    Unauthorized uses Settings.unauthorized_status_code, which is 200 by
    default: identity failures have always been reported as a normal response
    carrying an error body. Set UNAUTHORIZED_STATUS_CODE=401 for the corrected
    contract.
    """
    status_code = exc.status_code
    if isinstance(exc, Unauthorized):
        settings: Settings = getattr(request.app.state, "settings", None) or get_settings()
        status_code = settings.unauthorized_status_code
    return _error(status_code, exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 422 with structured error when request body or path params fail validation."""
    return _error(422, "validation_error", "Request validation failed.", str(exc.errors()))


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return _error(exc.status_code, f"http_{exc.status_code}", str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception goes to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(500, "internal_error", "An unexpected error occurred.")
