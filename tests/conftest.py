"""
tests/conftest.py -- Shared test fixtures for CarManager integration tests.

This module provides:
  - _make_test_stores(): creates isolated in-memory DBs for administrators + vehicles
  - _patch_lifespan(): wires test stores and services into app.state, bypassing real startup
  - api_client: TestClient with a seeded Adm administrator and its bearer token

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.
The named URI format (file:name?mode=memory&cache=shared&uri=true) shares
one in-memory instance across all connections in the same process.

The DEBUG env var must be set before any auth module import so get_settings()
auto-generates SECRET_KEY in dev mode.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set DEBUG before any auth/core import so get_settings() can
# auto-generate SECRET_KEY in dev mode.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import Administrator, Role
from auth.service import AdministratorService
from auth.store import AdministratorStore
from auth.tokens import create_access_token
from fleet.service import VehicleService
from fleet.store import VehicleStore

ADMIN_EMAIL = "adm@teste.com"
ADMIN_PASSWORD = "123456"

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores(db_suffix: str) -> tuple[AdministratorStore, VehicleStore]:
    """Create isolated named shared-memory SQLite stores for test isolation.

    A random component is added to the name so two fixtures with the same
    suffix in one session never see each other's rows.
    """
    name = f"test_carmanager_{db_suffix}_{uuid.uuid4().hex}"
    url = f"sqlite:///file:{name}?mode=memory&cache=shared&uri=true"
    return AdministratorStore(db_url=url), VehicleStore(db_url=url)


def _patch_lifespan(administrator_store: AdministratorStore, vehicle_store: VehicleStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.administrator_store = administrator_store
        app.state.vehicle_store = vehicle_store
        app.state.administrator_service = AdministratorService(administrator_store)
        app.state.vehicle_service = VehicleService(vehicle_store)
        yield

    return test_lifespan


@pytest.fixture
def bearer():
    """Build an Authorization header from a token."""

    def _headers(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    return _headers


# ---------------------------------------------------------------------------
# Module-scoped fixtures -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client() -> Generator[tuple[TestClient, str, int], None, None]:
    """Yield (client, token, administrator_id) for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so
    tests hit real route handlers but use isolated in-memory stores.
    An Adm administrator (ADMIN_EMAIL / ADMIN_PASSWORD) is created before the
    client starts and a token is issued for it.
    """
    administrator_store, vehicle_store = _make_test_stores("api")

    admin = Administrator(email=ADMIN_EMAIL, password=ADMIN_PASSWORD, role=Role.ADM)
    admin.id = administrator_store.create_administrator(admin)
    token = create_access_token(admin)

    app.router.lifespan_context = _patch_lifespan(administrator_store, vehicle_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, token, admin.id

    administrator_store.close()
    vehicle_store.close()
