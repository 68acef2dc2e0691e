"""
conftest.py — Shared pytest fixtures for the panel estimator test suite.

Engine tests are pure unit tests against the in-process price book. Async
code is driven from sync tests with ``asyncio.run``; database-backed tests use
a throwaway in-memory SQLite database (``sqlite+aiosqlite``) created inside
the test's own event loop.

Import-path bootstrapping:
    The ``backend/`` directory is inserted into sys.path so that all
    ``panel_estimator.*`` imports resolve regardless of where pytest is invoked.
"""

import os
import sys
from contextlib import asynccontextmanager

import pytest

# ---------------------------------------------------------------------------
# Ensure ``backend/`` is on the import path before any package imports occur.
# ---------------------------------------------------------------------------
_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

MEMORY_DB_URL = "sqlite+aiosqlite:///:memory:"


# ---------------------------------------------------------------------------
# Engine fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def static_provider():
    """StaticCatalogProvider over the full price book and default rules."""
    from panel_estimator.services.catalog_provider import StaticCatalogProvider
    return StaticCatalogProvider()


@pytest.fixture(scope="session")
def bom_engine(static_provider):
    """BOMEngine bound to the static price book (stateless, shareable)."""
    from panel_estimator.services.bom_engine import BOMEngine
    return BOMEngine(static_provider)


@pytest.fixture(scope="session")
def costing_engine():
    """CostingEngine with defaults: margin 20 %, tax 18 %."""
    from panel_estimator.services.costing_engine import CostingEngine
    return CostingEngine()


@pytest.fixture
def make_config():
    """Factory: PanelConfiguration from keyword arguments (snake_case or camelCase)."""
    from panel_estimator.models.estimation_schema import PanelConfiguration

    def _make(**kwargs):
        return PanelConfiguration.model_validate(kwargs)
    return _make


@pytest.fixture
def make_line():
    """Factory: a priced BOMLineItem with sensible defaults."""
    from panel_estimator.models.estimation_schema import BOMLineItem

    def _make(quantity=1, unit_price=100.0, name="Test Item", **kwargs):
        return BOMLineItem(
            name=name,
            category=kwargs.pop("category", "Accessory"),
            quantity=quantity,
            unit_price=unit_price,
            **kwargs,
        )
    return _make


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------

@asynccontextmanager
async def _memory_session(seed: bool = True):
    from sqlalchemy.ext.asyncio import async_sessionmaker
    from panel_estimator.db import build_engine, create_tables
    from panel_estimator.db.seed import seed_catalog

    engine = build_engine(MEMORY_DB_URL)
    await create_tables(engine)
    factory = async_sessionmaker(engine, expire_on_commit=False)
    try:
        async with factory() as session:
            if seed:
                await seed_catalog(session)
                await session.commit()
            yield session
    finally:
        await engine.dispose()


@pytest.fixture
def memory_session():
    """
    Async context-manager factory yielding a session on a fresh in-memory
    database, seeded from the price book unless ``seed=False``.

    Usage (inside a coroutine run by asyncio.run)::

        async with memory_session() as session:
            ...
    """
    return _memory_session


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------

@pytest.fixture
def api_client():
    """
    TestClient over the FastAPI app with the static price book as catalog and
    an in-memory SQLite database for quotations. The database is created
    lazily inside the client's event loop on first use.
    """
    from fastapi.testclient import TestClient
    from sqlalchemy.ext.asyncio import async_sessionmaker

    from panel_estimator.api.deps import get_catalog_provider
    from panel_estimator.db import build_engine, create_tables, get_db
    from panel_estimator.main import app
    from panel_estimator.services.catalog_provider import StaticCatalogProvider

    state = {}

    async def _test_db():
        if "factory" not in state:
            engine = build_engine(MEMORY_DB_URL)
            await create_tables(engine)
            state["engine"] = engine
            state["factory"] = async_sessionmaker(engine, expire_on_commit=False)
        async with state["factory"]() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _test_db
    app.dependency_overrides[get_catalog_provider] = lambda: StaticCatalogProvider()
    try:
        with TestClient(app) as client:
            yield client
            if "engine" in state:
                client.portal.call(state["engine"].dispose)
    finally:
        app.dependency_overrides.clear()
