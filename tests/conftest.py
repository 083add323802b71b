"""
tests/conftest.py -- Shared test fixtures for Vendorify integration tests.

This module provides:
  - memory_engine(): a named shared-memory SQLite engine per test
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - stores: (UserStore, VendorStore) on a fresh in-memory database
  - api_client: TestClient for the JSON API
  - web_client: TestClient with follow_redirects=False for web route tests
  - make_user: creates a user in the test store and returns (User, token)

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process.

Every client fixture gets its own database and its own cookie jar, so a
cookie set by one test's signup never leaks into the next test.

Environment variables must be set before any core/auth/api import:
get_settings() is cached and auth.tokens and api.limiter read it at import.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: set before any project import.
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-vendorify-suite-0123456789")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ALLOWED_HOSTS", '["*"]')
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("APP_ENV", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from asgi import app
from auth.models import User
from auth.store import UserStore
from auth.tokens import hash_password, issue_session_token
from core.database import build_engine
from vendors.store import VendorStore

TEST_PASSWORD = "testpass123"


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def memory_engine(prefix: str = "vendorify") -> Engine:
    """Build an engine on a uniquely named shared-memory SQLite database."""
    name = f"{prefix}_{uuid.uuid4().hex}"
    return build_engine(f"sqlite:///file:{name}?mode=memory&cache=shared&uri=true")


def _patch_lifespan(user_store: UserStore, vendor_store: VendorStore):
    """Return an async context manager that replaces the real lifespan.

    The real lifespan opens DATABASE_URL through core.database; tests must
    never touch that file.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.vendor_store = vendor_store
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def stores() -> Generator[tuple[UserStore, VendorStore], None, None]:
    engine = memory_engine()
    yield UserStore(engine), VendorStore(engine)
    engine.dispose()


@pytest.fixture
def make_user(stores):
    """Factory: create a user in the test store and return (user, session_token)."""
    user_store, _ = stores

    def _make(email: str = "alice@example.com", name: str = "Alice", password: str = TEST_PASSWORD):
        user = User(name=name, email=email, hashed_password=hash_password(password))
        user.id = user_store.create_user(user)
        return user, issue_session_token(user)

    return _make


@pytest.fixture
def api_client(stores) -> Generator[TestClient, None, None]:
    """TestClient for the JSON API, backed by the per-test stores."""
    app.router.lifespan_context = _patch_lifespan(*stores)
    with TestClient(app, raise_server_exceptions=True) as client:
        yield client


@pytest.fixture
def web_client(stores) -> Generator[TestClient, None, None]:
    """TestClient for web routes.

    follow_redirects=False is essential: tests assert on redirect locations
    (e.g. 302 to /login), which are invisible once the client follows them.
    """
    app.router.lifespan_context = _patch_lifespan(*stores)
    with TestClient(app, follow_redirects=False, raise_server_exceptions=True) as client:
        yield client
