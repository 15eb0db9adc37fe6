"""
Engine and sessions for the exam-prep store.

One async engine per process, built from settings.POSTGRES_URL with the pool
sizes in the `database` section of config/default.yaml. Sessions keep loaded
attributes after commit, so services can build responses from the rows they
just wrote.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from examprep.config import settings, yaml_config


_pool: dict[str, Any] = yaml_config.get("database", {})

engine = create_async_engine(
    settings.POSTGRES_URL,
    pool_size=_pool.get("pool_size", 5),
    max_overflow=_pool.get("max_overflow", 10),
    pool_timeout=_pool.get("pool_timeout", 30),
    pool_pre_ping=True,
    echo=settings.DEBUG,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base for the exam-prep tables."""


# Registers the tables on Base.metadata; needs Base defined first.
from examprep.db import models  # noqa: F401, E402


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.

    Services own their commits through store_transaction(); anything left
    open when the request fails is rolled back here.
    """
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create missing tables (application startup)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of the connection pool on shutdown."""
    await engine.dispose()
