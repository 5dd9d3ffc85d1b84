"""Pytest configuration and fixtures for taskscope.

Tests run against an in-memory SQLite database (aiosqlite) and the
in-process tagged cache. Environment is set before any app.* import so
Settings validation succeeds without a .env file.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["CACHE_BACKEND"] = "memory"

from collections.abc import AsyncIterator, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.core.limiter import limiter
from app.domain.principal import Principal
from app.infrastructure.cache import InMemoryTaggedCache
from app.infrastructure.persistence import models  # noqa: F401  registers record types
from app.infrastructure.persistence.database import Base, get_db
from app.infrastructure.security.jwt import create_access_token
from app.main import app


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Fresh in-memory database with the schema created. One connection (StaticPool)."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Session for repository/service tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def cache() -> InMemoryTaggedCache:
    return InMemoryTaggedCache()


@pytest.fixture
def alice() -> Principal:
    return Principal(id="user-alice")


@pytest.fixture
def bob() -> Principal:
    return Principal(id="user-bob")


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    cache: InMemoryTaggedCache,
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI), wired to the test DB and cache."""

    async def _get_test_db() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db
    app.state.cache = cache
    limiter.reset()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
    app.state.cache = None


@pytest.fixture
def auth_headers() -> Callable[[str], dict[str, str]]:
    """Return a builder of Authorization headers for a principal id."""

    def _headers(principal_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(principal_id)}"}

    return _headers
