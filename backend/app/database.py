"""
NoteShelf Backend — Database Handle
=====================================

What:  Async SQLAlchemy engine + session factory wrapped in an explicit `Database` handle.
Why:   The connection pool is a shared, bounded resource owned by the process entry
       point. Wrapping it in a handle that is constructed in the lifespan and injected
       into each operation keeps the note-access layer free of module-level state.
How:   `Database.from_settings()` builds the engine with pool options; operations
       borrow one session at a time through `async with database.session()`.
Who:   Constructed by `app.main.lifespan`; used by `NoteStore` and the health check.
When:  Created once at startup, disposed once at shutdown.

Connection Pooling Strategy:
    pool_size / max_overflow: bounded by settings (default 10 + 5)
    pool_pre_ping:            validates connections before use
    pool_recycle=3600:        recycles connections every hour
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic reads for migrations
    and the test suite uses to create the schema.
    """
    pass


class Database:
    """
    Owns the engine (connection pool) and the session factory.

    Attributes:
        engine:          AsyncEngine holding the pool
        session_factory: async_sessionmaker producing AsyncSession objects
    """

    def __init__(self, url: str, **engine_kwargs: Any) -> None:
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        # expire_on_commit=False: rows returned from an operation stay readable
        # after the session that loaded them is closed
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a handle with pool sizing taken from configuration."""
        engine_kwargs: dict = {
            "pool_pre_ping": settings.db_pool_pre_ping,
            # Echo SQL only when debugging; it is very noisy otherwise
            "echo": settings.log_level == "DEBUG",
        }
        if not settings.is_sqlite:
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_recycle=3600,
            )
        return cls(settings.database_url, **engine_kwargs)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Scoped acquisition of one session (one pooled connection).

        The caller decides when to commit. On any exception the transaction is
        rolled back; the session is always closed, returning the connection
        to the pool.
        """
        session = self.session_factory()
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def ping(self) -> None:
        """Run `SELECT 1`; raises the driver error if the database is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def create_all(self) -> None:
        """Create every table registered on `Base.metadata` (tests and local dev)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()
        logger.info("Database connection pool disposed")


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the handle installed on `app.state` by the lifespan."""
    return request.app.state.database
