"""
Test configuration and fixtures.

The app runs against an in-memory SQLite database (aiosqlite + StaticPool) that
replaces the request session dependency; migrations and seeding are disabled.
"""

import os

# Settings are read at import time of src.api.main
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"
os.environ["AUTO_SEED"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["POSTGRES_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Iterable, Optional  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from src.api.main import app  # noqa: E402
from src.core.security import create_access_token  # noqa: E402
from src.db.base import Base  # noqa: E402
from src.db.session import get_async_session  # noqa: E402


@pytest.fixture
async def engine():
    """Fresh in-memory database with all tables for each test."""
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker):
    """HTTP client for the app with the session dependency bound to the test database."""

    async def override_get_async_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_headers():
    """Build Authorization (and optional X-Tenant-ID) headers for a token with the given grants."""

    def _make(
        roles: Iterable[str] = (),
        entitlements: Iterable[str] = (),
        tenant_id: Optional[str] = None,
        header_tenant: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> dict:
        token = create_access_token(
            subject or str(uuid4()),
            tenant_id=tenant_id,
            roles=list(roles),
            entitlements=list(entitlements),
        )
        headers = {"Authorization": f"Bearer {token}"}
        if header_tenant is not None:
            headers["X-Tenant-ID"] = header_tenant
        return headers

    return _make


@pytest.fixture
def admin_headers(make_headers):
    return make_headers(roles=["admin"])
