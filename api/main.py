"""
api/main.py -- FastAPI application entry point for the portfolio API.

Run with:      uvicorn asgi:app --reload
               python main.py serve

Middleware stack (outermost to innermost):
  1. TrustedHostMiddleware -- rejects requests with unexpected Host headers
  2. CORSMiddleware        -- adds CORS headers for allowed browser origins
  3. SlowAPIMiddleware     -- enforces per-route rate limits from api.limiter

Lifespan builds the shared resources on startup -- one Database (the
connection pool), one repository per entity on top of it, the UserStore, and
the MediaStore -- and drains the pool on shutdown. Routes reach them through
request.app.state, never through module globals.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.limiter import limiter
from api.models import ErrorDetail, ErrorResponse, HealthResponse
from api.routes.auth import router as auth_router
from api.routes.blog import router as blog_router
from api.routes.contact import router as contact_router
from api.routes.profile import router as profile_router
from api.routes.projects import router as projects_router
from api.routes.skills import router as skills_router
from auth.store import UserStore
from core.config import get_settings
from core.database import Database
from core.errors import PortfolioError
from portfolio.media import MediaStore
from portfolio.store import BlogStore, ContactStore, ProfileStore, ProjectStore, SkillStore

API_VERSION = "1.0.0"

_settings = get_settings()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("portfolio.api")


# ---------------------------------------------------------------------------
# Lifespan -- startup / shutdown
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application-level resources across the full server lifetime.

    Everything before yield runs on startup; everything after yield runs on
    shutdown. The Database is created first because every store is built on
    top of it, and closed last.
    """
    logger.info("Portfolio API starting up")
    db = Database(_settings.database_url)
    app.state.db = db
    app.state.user_store = UserStore(db)
    app.state.profiles = ProfileStore(db)
    app.state.projects = ProjectStore(db)
    app.state.skills = SkillStore(db)
    app.state.blog = BlogStore(db)
    app.state.contacts = ContactStore(db)
    logger.info("Database initialized (%s)", db.engine.url.render_as_string(hide_password=True))
    app.state.media = MediaStore(
        _settings.upload_dir,
        url_prefix=_settings.upload_url_prefix,
        max_bytes=_settings.max_upload_bytes,
    )
    logger.info("Uploads stored in %s", app.state.media.upload_dir.resolve())

    yield

    db.close()
    logger.info("Portfolio API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Portfolio API",
    description="Profile, projects, skills, blog, and contact messages for a personal portfolio site.",
    version=API_VERSION,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware stack
#
# Register in the order you want the request to encounter them:
# TrustedHost -> CORS -> SlowAPI.
# ---------------------------------------------------------------------------

app.add_middleware(
    TrustedHostMiddleware,
    allowed_hosts=_settings.allowed_hosts,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)

app.add_middleware(SlowAPIMiddleware)

# SlowAPI looks for app.state.limiter by convention.
app.state.limiter = limiter


# ---------------------------------------------------------------------------
# Request logging middleware
# ---------------------------------------------------------------------------


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

app.include_router(auth_router, prefix="/api", tags=["Auth"])
app.include_router(profile_router, prefix="/api", tags=["Profile"])
app.include_router(projects_router, prefix="/api", tags=["Projects"])
app.include_router(skills_router, prefix="/api", tags=["Skills"])
app.include_router(blog_router, prefix="/api", tags=["Blog"])
app.include_router(contact_router, prefix="/api", tags=["Contact"])
# Uploaded images are mounted by asgi.py, not here.


# ---------------------------------------------------------------------------
# Exception handlers
#
# Every failure leaves the API as {"error": {code, message, detail}}, whether it
# was raised as a PortfolioError, by FastAPI validation, or by Starlette routing.
# ---------------------------------------------------------------------------


def _error_response(status_code: int, code: str, message: str, detail: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(code=code, message=message, detail=detail)).model_dump(),
    )


@app.exception_handler(PortfolioError)
async def portfolio_error_handler(request: Request, exc: PortfolioError) -> JSONResponse:
    """Render a typed failure raised by a store, auth helper, or route."""
    if exc.status_code >= 500:
        logger.error("Server error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        response = _error_response(exc.status_code, "internal_error", "An unexpected error occurred.")
    else:
        response = _error_response(exc.status_code, exc.code, exc.message, exc.detail)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 with a structured error when a rate limit is exceeded."""
    retry_after = int(getattr(exc, "retry_after", 60))
    response = _error_response(429, "rate_limited", "Too many requests.", str(exc.detail))
    response.headers["Retry-After"] = str(retry_after)
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 with structured error when request body, form, or path params fail validation."""
    return _error_response(400, "validation_error", "Request validation failed.", str(exc.errors()))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Structured error for framework-raised HTTP errors: unmatched routes (404), wrong method (405)."""
    if exc.status_code == 404:
        response = _error_response(404, "not_found", "Route not found.")
    else:
        response = _error_response(exc.status_code, f"http_{exc.status_code}", str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception is written to the log only, never to the response body.
    Stack traces, query text, and connection strings must not reach clients.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error_response(500, "internal_error", "An unexpected error occurred.")


# ---------------------------------------------------------------------------
# Health endpoint
#
# Lives on the app itself rather than a router. Public and not rate-limited.
# ---------------------------------------------------------------------------


@app.get("/api/health", tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Return API liveness, the current time, and database reachability."""
    db_ok = request.app.state.db.ping()
    return HealthResponse(
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=API_VERSION,
        components={"app": "ok", "database": "ok" if db_ok else "error"},
    )
