"""
Integration Test Fixtures

Provides fixtures that run the services and routers against a real database
through SQLAlchemy's async engine.

The store is a throwaway SQLite file per test unless INTEGRATION_DATABASE_URL
points somewhere else (e.g. a postgresql+asyncpg URL for a test database).
Tables are created before each test and dropped after it, so never point the
variable at a database holding real data.

Note: examprep.main is imported inside the client fixture so the app is only
built once the environment from the parent conftest.py is in place.
"""

import os
from pathlib import Path
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from examprep.db.base import Base

pytestmark = pytest.mark.integration


def get_test_db_url(tmp_path: Path) -> str:
    """Database URL for one test; a fresh SQLite file by default."""
    return os.environ.get(
        "INTEGRATION_DATABASE_URL",
        f"sqlite+aiosqlite:///{tmp_path / 'examprep.db'}",
    )


# =============================================================================
# Database
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """
    Create a fresh engine with the schema in place.

    Creates a new engine per test to avoid event loop issues.
    """
    engine = create_async_engine(get_test_db_url(tmp_path), echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_maker(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory configured like the application's."""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """A session for the code under test; read results back with another one."""
    async with session_maker() as session:
        yield session


# =============================================================================
# HTTP Client
# =============================================================================


@pytest_asyncio.fixture
async def async_test_client(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    Create an async HTTP client whose requests use the test database.

    Each request gets its own session, as with the application's get_db.
    The app lifespan is not run, so the configured database is never touched.
    """
    from examprep.db.base import get_db
    from examprep.main import app

    async def get_test_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = get_test_db

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.pop(get_db, None)
