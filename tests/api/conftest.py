"""API-specific test fixtures."""

import os
from contextlib import asynccontextmanager

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

# Shared test database URL
_TEST_DB_URL = os.getenv("TEST_DATABASE_URL")


def _build_app(lifespan=None) -> FastAPI:
    from stageplan.api.routes import api_router
    from stageplan.core.config import get_settings
    from stageplan.main import generic_exception_handler, http_exception_handler
    from stageplan.middleware.correlation import setup_correlation_middleware

    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Stage Forecast Service - Test Client",
        version="0.1.0",
        lifespan=lifespan,
    )

    setup_correlation_middleware(app)

    # Exception handlers (needed for debug_id testing)
    app.exception_handler(HTTPException)(http_exception_handler)
    app.exception_handler(Exception)(generic_exception_handler)

    app.include_router(api_router, prefix="/api")
    return app


@pytest.fixture
def app() -> FastAPI:
    """FastAPI app without a database; services are swapped via dependency_overrides."""
    app = _build_app()
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Test client that returns 500 responses instead of re-raising server errors."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def db_client():
    """Test client backed by a real PostgreSQL database.

    Initializes the global database via init_db inside the TestClient's own
    event loop so route handlers can use get_session_factory().
    """
    if not _TEST_DB_URL:
        pytest.skip("TEST_DATABASE_URL not set")

    from stageplan.db import close_db, init_db
    from stageplan.db.base import Base

    @asynccontextmanager
    async def test_lifespan(app: FastAPI):
        """Test lifespan - initialize DB in TestClient's event loop."""
        import stageplan.db.base as db_mod

        db_mod._engine = None
        db_mod._session_factory = None
        await init_db(_TEST_DB_URL)
        yield
        async with db_mod._engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await close_db()

    with TestClient(_build_app(lifespan=test_lifespan)) as client:
        yield client
