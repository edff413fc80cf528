# backend/app/db/session.py
"""
Async database session management for SQLAlchemy.

- asyncpg for PostgreSQL, aiosqlite for local SQLite
- pooled connections on PostgreSQL, NullPool on SQLite
- DATABASE_ECHO off by default: statements carry encrypted secrets
"""
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, AsyncAdaptedQueuePool

from backend.app.core.config import Settings, settings


def _set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> AsyncEngine:
    """SQLite leaves foreign keys unenforced unless each connection turns them on."""
    event.listen(engine.sync_engine, "connect", _set_sqlite_pragma)
    return engine


def create_engine_for(config: Settings) -> AsyncEngine:
    """
    Build the async engine for the configured database.

    SQLite gets NullPool, check_same_thread=False and foreign key
    enforcement; PostgreSQL gets a small pre-pinged pool recycled every
    five minutes.
    """
    if config.is_sqlite:
        return enable_sqlite_foreign_keys(create_async_engine(
            config.DATABASE_URL,
            echo=config.DATABASE_ECHO,
            poolclass=NullPool,
            connect_args={"check_same_thread": False},
        ))

    return create_async_engine(
        config.DATABASE_URL,
        echo=config.DATABASE_ECHO,
        poolclass=AsyncAdaptedQueuePool,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        pool_recycle=300,
    )


# Created once at import; no connection is opened until first use
engine: AsyncEngine = create_engine_for(settings)

# expire_on_commit=False: attributes stay readable after commit
AsyncSessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency: one session per request, closed afterwards.

    Does NOT auto-commit; repositories commit explicitly.
    """
    async with AsyncSessionLocal() as session:
        yield session
