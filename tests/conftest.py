"""
tests/conftest.py -- Shared test fixtures for blog API tests.

This module provides:
  - make_settings(): Settings with a fixed signing key and cheap bcrypt rounds
  - _make_test_stores(): isolated in-memory DBs for users + blog posts
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient with the historical (default) behavior flags
  - strict_client: TestClient with every corrected-behavior flag switched on
  - register: helper fixture that registers a user through the API

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.

The DEBUG env var must be set before any api/core import so get_settings()
auto-generates SECRET_KEY in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Callable, Generator, Iterator
from contextlib import asynccontextmanager, contextmanager

# CRITICAL: Set DEBUG before any api/core import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.store import UserStore
from auth.tokens import TokenService
from blog.store import BlogStore
from core.config import Settings

TEST_SECRET = "test-signing-key-0123456789abcdef0123456789abcdef"


def make_settings(**overrides) -> Settings:
    """Settings for tests: known secret, bcrypt cost 4, historical flags unless overridden."""
    values: dict = {"debug": True, "secret_key": TEST_SECRET, "bcrypt_rounds": 4}
    values.update(overrides)
    return Settings(**values)


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores(db_suffix: str) -> tuple[UserStore, BlogStore]:
    """Create isolated named shared-memory SQLite stores for test isolation."""
    users_url = f"sqlite:///file:test_users_{db_suffix}?mode=memory&cache=shared&uri=true"
    blogs_url = f"sqlite:///file:test_blogs_{db_suffix}?mode=memory&cache=shared&uri=true"
    return UserStore(db_url=users_url), BlogStore(db_url=blogs_url)


def _patch_lifespan(settings: Settings, user_store: UserStore, blog_store: BlogStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.settings = settings
        app.state.tokens = TokenService(settings.secret_key, settings.token_expire_seconds)
        app.state.user_store = user_store
        app.state.blog_store = blog_store
        yield

    return test_lifespan


@contextmanager
def _running_client(**overrides) -> Iterator[TestClient]:
    user_store, blog_store = _make_test_stores(uuid.uuid4().hex)
    app.router.lifespan_context = _patch_lifespan(make_settings(**overrides), user_store, blog_store)
    try:
        with TestClient(app, raise_server_exceptions=True) as client:
            yield client
    finally:
        user_store.close()
        blog_store.close()


# ---------------------------------------------------------------------------
# Client fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client() -> Generator[TestClient, None, None]:
    """TestClient with default flags: no login password check, no ownership
    check, identity failures answered with status 200."""
    with _running_client() as client:
        yield client


@pytest.fixture(scope="module")
def strict_client() -> Generator[TestClient, None, None]:
    """TestClient with the corrected contract switched on."""
    with _running_client(
        login_checks_password=True,
        enforce_ownership=True,
        unauthorized_status_code=401,
    ) as client:
        yield client


@pytest.fixture
def register() -> Callable[..., tuple[dict, str]]:
    """Return a helper that registers a fresh user on a client.

    Emails are made unique per call so module-scoped clients can be shared
    between tests. Returns (user_json, token).
    """

    def _register(client: TestClient, password: str = "pw", **fields) -> tuple[dict, str]:
        body = {
            "firstName": fields.get("firstName", "Ada"),
            "lastName": fields.get("lastName", "Lovelace"),
            "email": fields.get("email", f"user-{uuid.uuid4().hex[:12]}@example.com"),
            "password": password,
        }
        resp = client.post("/api/register", json=body)
        assert resp.status_code == 200, f"register failed: {resp.status_code} {resp.text}"
        data = resp.json()
        return data["user"], data["token"]

    return _register
