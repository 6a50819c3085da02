"""
tests/conftest.py -- Shared test fixtures for Harve Share integration tests.

This module provides:
  - make_context(): builds an AppContext on an isolated in-memory database
  - _patch_lifespan(): wires a test context into app.state, bypassing real startup
  - api_client: TestClient plus its AppContext, one per test module

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.

The DEBUG env var must be set before any auth/core import so get_settings()
auto-generates SECRET_KEY in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import itertools
import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set DEBUG before any auth/core import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.context import AppContext
from api.main import app
from core.config import get_settings

_db_counter = itertools.count()


def make_context(name: str) -> AppContext:
    """Create an AppContext backed by a fresh named shared-memory SQLite DB."""
    db_url = f"sqlite:///file:test_{name}_{next(_db_counter)}?mode=memory&cache=shared&uri=true"
    settings = get_settings().model_copy(update={"database_url": db_url})
    return AppContext.open(settings)


def _patch_lifespan(ctx: AppContext):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.ctx = ctx
        yield

    return test_lifespan


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, AppContext], None, None]:
    """Yield (client, ctx) for API integration tests.

    Tests hit the real route handlers but use an isolated in-memory database
    per test module. Tests inside one module share state, so each test should
    use its own emails and documents.
    """
    ctx = make_context(request.module.__name__.rsplit(".", 1)[-1])
    app.router.lifespan_context = _patch_lifespan(ctx)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, ctx

    ctx.close()


@pytest.fixture
def context() -> Generator[AppContext, None, None]:
    """A standalone AppContext for store-level tests."""
    ctx = make_context("unit")
    yield ctx
    ctx.close()
