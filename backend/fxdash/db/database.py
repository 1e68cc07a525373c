"""
Database engine construction.

Postgres (asyncpg) in production, SQLite (aiosqlite) for local runs and
tests. The engine is built explicitly and handed to the repositories
that need it; nothing here holds a module-level connection.
"""

import logging
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from fxdash.core.config import Settings
from fxdash.db.models import metadata, price_table

logger = logging.getLogger(__name__)


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for the given URL."""
    if database_url.startswith("sqlite"):
        # Note: SQLite requires check_same_thread=False for async
        return create_async_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_async_engine(database_url, echo=echo, pool_pre_ping=True)


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    return create_engine(settings.database_url, echo=settings.database_echo)


async def init_db(engine: AsyncEngine, tables: Iterable[str]) -> None:
    """
    Create the price tables if they are missing.
    Used for SQLite development databases and tests.
    """
    declared = [price_table(name) for name in tables]
    try:
        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all, tables=declared)
        logger.info(f"Database initialized: {', '.join(t.name for t in declared)}")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


async def close_db(engine: AsyncEngine) -> None:
    """
    Close database connections.
    Called on application shutdown.
    """
    await engine.dispose()
    logger.info("Database connections closed")
