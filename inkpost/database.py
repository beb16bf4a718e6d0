"""
Inkpost Backend — Database Handle & Session Management
========================================================

What:  Async SQLAlchemy engine, session factory and the per-request session
       dependency.
How:   `Database` owns one engine (connection pool) and one session factory.
       It is opened by the application lifespan, stored on `app.state.database`
       and disposed on shutdown. Route handlers receive a scoped session via
       `Depends(get_db_session)`, which commits on success and rolls back on error.

Nothing here is created at import time; every engine belongs to exactly one
`Database` instance.
"""

import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from inkpost.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all ORM models; shares one metadata object."""
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores REFERENCES clauses unless this pragma is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Explicitly constructed datastore handle.

    Lifecycle:
        db = Database(settings)     # engine + pool created
        await db.create_all()       # tables created if missing
        async with db.session() as session: ...
        await db.dispose()          # pool closed
    """

    def __init__(self, settings: Settings):
        engine_kwargs = {"echo": settings.log_level == "DEBUG"}
        if not settings.is_sqlite:
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )

        self.engine: AsyncEngine = create_async_engine(settings.database_url, **engine_kwargs)

        if settings.is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        # expire_on_commit=False: response schemas read attributes after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_all(self) -> None:
        """Create every table registered on `Base.metadata` that does not exist yet."""
        # Models must be imported so their tables are registered
        import inkpost.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready (%d tables)", len(Base.metadata.tables))

    async def ping(self) -> bool:
        """Run `SELECT 1`; returns False instead of raising when unreachable."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the handle opened by the lifespan."""
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database handle is not initialised; is the lifespan running?")
    return database


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the application's `Database`
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global error handlers
        5. Always: closes the session (returns connection to pool)
    """
    database = get_database(request)
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
