"""Async engine and session plumbing.

The engine and its session factory are built once by the composition root
(web.app.create_app) or a CLI entry point and passed to the engines and
services that need them.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from config.database import DatabaseSettings, get_database_settings

logger = logging.getLogger(__name__)

SQLITE_PRAGMAS = (
    "PRAGMA foreign_keys=ON",
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
)


def create_engine(settings: Optional[DatabaseSettings] = None) -> AsyncEngine:
    """
    Create the async engine for the configured database.

    SQLite gets no pool and enforces foreign keys on every connection;
    PostgreSQL uses the async queue pool sized from settings.
    """
    settings = settings or get_database_settings()
    logger.info(f"Creating database engine for {settings.describe()}")

    if settings.is_sqlite:
        pool_kwargs = {"poolclass": NullPool}
    else:
        pool_kwargs = {
            "pool_size": settings.pool_size,
            "max_overflow": settings.max_overflow,
            "pool_recycle": settings.pool_recycle,
            "pool_pre_ping": True,
        }

    engine = create_async_engine(
        settings.async_url,
        echo=settings.echo_sql,
        connect_args=settings.get_connect_args(),
        **pool_kwargs,
    )

    if settings.is_sqlite:
        event.listen(engine.sync_engine, "connect", _apply_sqlite_pragmas)

    return engine


def _apply_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        for pragma in SQLITE_PRAGMAS:
            cursor.execute(pragma)
    finally:
        cursor.close()


def get_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory whose objects stay readable after commit."""
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """
    Open a session that rolls back on error and always closes.

    Commits are left to the caller, so events can be published only after
    the write is durable.

    Usage:
        async with session_scope(factory) as session:
            task = await TaskRepository(session).create(...)
            await session.commit()
    """
    session = session_factory()
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def check_database_connection(engine: AsyncEngine) -> bool:
    """Run `SELECT 1`; False (and an error log) when the database is unreachable."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database connection check failed: {e}")
        return False
    return True


async def init_database(engine: AsyncEngine) -> None:
    """Create any missing tables."""
    from database.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Database schema ready ({len(Base.metadata.tables)} tables)")


async def close_database(engine: AsyncEngine) -> None:
    """Dispose the engine's connections; call on shutdown."""
    await engine.dispose()
    logger.info("Database engine closed")
