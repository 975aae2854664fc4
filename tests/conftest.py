"""Root conftest — test infrastructure for all backend tests.

Provides:
- In-memory SQLite db_session fixture with every table created (integration and API)
- Test shop fixture
- API client with dependency overrides
"""

from __future__ import annotations

import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import storefront_banners.models  # noqa: F401  (registers table models)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "integration: DB integration tests (in-memory SQLite)")


# ─────────────────────────────────────────────────────────────────────────────
# Database Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
async def db_engine():
    """A fresh in-memory database per test.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Database session on the per-test database."""
    session = AsyncSession(bind=db_engine, expire_on_commit=False, autoflush=False)
    try:
        yield session
    finally:
        await session.close()


@pytest.fixture
def test_shop() -> str:
    """A unique shop domain for the test."""
    return f"__test-{uuid.uuid4().hex[:8]}.myshopify.com"


# ─────────────────────────────────────────────────────────────────────────────
# API Client
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
async def api_client(db_session: AsyncSession, test_shop: str):
    """HTTP client authenticated as test_shop and bound to the test session.

    Overrides: get_current_shop, get_db
    """
    from storefront_banners.api.deps import get_current_shop
    from storefront_banners.core.database import get_db
    from storefront_banners.main import app

    app.dependency_overrides[get_current_shop] = lambda: test_shop

    async def override_db():
        yield db_session
        await db_session.commit()

    app.dependency_overrides[get_db] = override_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def anon_client(db_session: AsyncSession):
    """HTTP client without a shop override (real session seam)."""
    from storefront_banners.core.database import get_db
    from storefront_banners.main import app

    async def override_db():
        yield db_session

    app.dependency_overrides[get_db] = override_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
