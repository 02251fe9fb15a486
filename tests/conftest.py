"""
tests/conftest.py -- Shared test fixtures for the portfolio API tests.

This module provides:
  - _make_test_database(): an isolated named shared-memory SQLite Database
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient + bearer token for API integration tests
  - db: a throwaway in-memory Database for store unit tests

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process.

Environment must be set before any application import: DEBUG so
get_settings() accepts the missing SECRET_KEY, ALLOWED_HOSTS so
TrustedHostMiddleware accepts the TestClient host, RATE_LIMIT_ENABLED so
repeated logins do not trip slowapi, UPLOAD_DIR so images land in a temp dir.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set before any api/auth/core import -- get_settings() is cached
# on first call and several modules read it at import time.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("ALLOWED_HOSTS", '["testserver", "localhost"]')
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="portfolio-test-uploads-"))

import pytest
from fastapi.testclient import TestClient

from asgi import app
from auth.store import UserStore
from auth.tokens import create_access_token, register_user
from core.config import get_settings
from core.database import Database
from portfolio.media import MediaStore
from portfolio.store import BlogStore, ContactStore, ProfileStore, ProjectStore, SkillStore

ADMIN_USERNAME = "testadmin"
ADMIN_PASSWORD = "testpass123"

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_database(db_suffix: str) -> Database:
    """Create an isolated named shared-memory SQLite Database.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    return Database(f"sqlite:///file:test_portfolio_{db_suffix}?mode=memory&cache=shared&uri=true")


def _patch_lifespan(db: Database):
    """Return an async context manager that replaces the real lifespan.

    Builds every store on the test Database and a MediaStore on the
    configured (temporary) upload directory, so TestClient routes see
    isolated state rather than the production database.
    """
    settings = get_settings()

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.db = db
        app.state.user_store = UserStore(db)
        app.state.profiles = ProfileStore(db)
        app.state.projects = ProjectStore(db)
        app.state.skills = SkillStore(db)
        app.state.blog = BlogStore(db)
        app.state.contacts = ContactStore(db)
        app.state.media = MediaStore(
            settings.upload_dir,
            url_prefix=settings.upload_url_prefix,
            max_bytes=settings.max_upload_bytes,
        )
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Module-scoped fixtures -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, str, int], None, None]:
    """Yield (client, token, user_id) for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so
    tests hit real route handlers but use an isolated in-memory database.
    The admin user (ADMIN_USERNAME / ADMIN_PASSWORD) is registered before the
    client starts and a token is minted for Authorization headers.
    """
    db = _make_test_database(request.module.__name__.rsplit(".", 1)[-1])
    admin = register_user(UserStore(db), ADMIN_USERNAME, "admin@example.com", ADMIN_PASSWORD)
    token = create_access_token(user_id=admin.id, username=ADMIN_USERNAME)

    app.router.lifespan_context = _patch_lifespan(db)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, token, admin.id

    db.close()


@pytest.fixture
def auth_headers(api_client) -> dict[str, str]:
    _client, token, _uid = api_client
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def db() -> Generator[Database, None, None]:
    """Plain in-memory Database for single-threaded store unit tests."""
    database = Database("sqlite:///:memory:")
    yield database
    database.close()
