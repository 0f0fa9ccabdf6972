"""
Database Module

Async SQLAlchemy setup for document metadata:
- Base: declarative base every model inherits from
- create_engine / create_session_factory: built from settings at startup
- init_models: create tables without Alembic (tests, DB_CREATE_TABLES=true)

Postgres in production (postgresql+asyncpg://...), SQLite through
aiosqlite in tests (sqlite+aiosqlite:///...).
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""
    pass


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine.

    pool_pre_ping only makes sense for server databases; SQLite files
    don't drop connections.
    """
    kwargs = {"echo": echo}
    if not database_url.startswith("sqlite"):
        kwargs["pool_pre_ping"] = True

    engine = create_async_engine(database_url, **kwargs)

    # Never log credentials
    logger.info(f"Database engine created: {engine.url.render_as_string(hide_password=True)}")
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """
    Session factory used by the SQL repository.

    expire_on_commit=False: records are converted to domain models
    after the commit, so attributes must stay loaded.
    """
    return async_sessionmaker(
        engine,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_models(engine: AsyncEngine) -> None:
    """Create all tables that don't exist yet."""
    # Registers DocumentRecord on Base.metadata
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


async def check_db_connection(engine: AsyncEngine) -> bool:
    """Health check: run SELECT 1."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
