"""SQLAlchemy async engine and session management.

Engines target PostgreSQL (asyncpg) in deployment and SQLite (aiosqlite)
for local catalogs and tests.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .models import Base

logger = logging.getLogger(__name__)


def create_engine(url: str, *, pool_size: int = 5, echo: bool = False) -> AsyncEngine:
    """Build the catalog engine for *url*.

    ``postgresql+asyncpg://...`` gets a sized connection pool;
    ``sqlite+aiosqlite:///path`` keeps SQLAlchemy's default SQLite pool, which
    rejects the sizing arguments.
    """
    if url.startswith("sqlite"):
        engine = create_async_engine(url, echo=echo)
    else:
        engine = create_async_engine(
            url, echo=echo, pool_size=pool_size, pool_pre_ping=True
        )
    logger.info("Catalog engine ready for %s", url.split("@")[-1])
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_all(engine: AsyncEngine) -> None:
    """Create all tables defined in the ORM metadata."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Catalog tables created / verified.")


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Yield a session that commits on success and rolls back on error.

    Usage::

        async with session_scope(factory) as session:
            result = await session.execute(select(FileRecord))
    """
    session = factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()
