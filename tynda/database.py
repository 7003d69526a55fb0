"""
Tynda Backend — Database Handle & Session Management
=====================================================

What:  The shared store client (async engine + session factory), the ORM
       base class, and the per-request session dependency.
How:   The application factory constructs exactly one `Database` and stores
       it on `app.state.database`. Each request borrows an `AsyncSession`
       from it through `get_db_session`, which commits on success and rolls
       back on error.
Who:   Used by route handlers (via Depends), the lifespan hook, Alembic and
       the test suite.

Connection Pooling (PostgreSQL):
    pool_size=10, max_overflow=10, pool_pre_ping, pool_recycle=3600.
    SQLite URLs skip pool sizing (aiosqlite uses its own pool classes) and
    open each transaction with BEGIN IMMEDIATE, which serializes writers.
"""

import logging
from contextlib import asynccontextmanager
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

from tynda.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers with this metadata; Alembic autogenerate and
    `Database.create_all()` both read it.
    """
    pass


def _serialize_sqlite_writers(engine: AsyncEngine) -> None:
    """
    Open every SQLite transaction with BEGIN IMMEDIATE.

    SQLite ignores SELECT ... FOR UPDATE, so two sessions could both read a
    playlist's track list and the later commit would drop the other's
    change. Taking the write lock up front makes concurrent transactions
    queue on the driver's busy timeout instead.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def disable_driver_transactions(dbapi_connection, connection_record):
        # Let SQLAlchemy emit BEGIN itself
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


class Database:
    """
    Explicitly constructed store client shared by all requests.

    Wraps the connection lifecycle: the engine owns the pool, the session
    factory hands out one `AsyncSession` per unit of work, and `dispose()`
    closes every pooled connection on shutdown.
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        # expire_on_commit=False: attributes stay readable after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        if url.startswith("sqlite"):
            _serialize_sqlite_writers(self.engine)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build the handle from application settings."""
        engine_kwargs = {}
        if not settings.database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return cls(
            settings.database_url,
            echo=settings.log_level == "DEBUG",
            **engine_kwargs,
        )

    async def create_all(self) -> None:
        """Create every table known to `Base.metadata` (idempotent)."""
        # Models must be imported so they register with the metadata
        from tynda.models import playlist, track, user  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured")

    async def ping(self) -> bool:
        """Run SELECT 1; returns False instead of raising when unreachable."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a session that commits on success and rolls back on error.

        How it works:
            1. Creates a new session from the factory
            2. Yields it to the caller (the handler performs queries)
            3. On success: commits the transaction
            4. On error: rolls back, then re-raises for the global handlers
            5. Always: closes the session (returns connection to pool)
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def dispose(self) -> None:
        """Close all connections in the pool (application shutdown)."""
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the handle built by the app factory."""
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database handle is not configured on app.state")
    return database


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Example usage in a route:
        @router.get("/tracks")
        async def list_tracks(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database = get_database(request)
    async with database.session() as session:
        yield session
