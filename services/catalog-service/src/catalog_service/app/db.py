"""
Database connection pool module.

Manages a single shared asyncpg connection pool and the item store built
on top of it. Other modules call `get_store()` to obtain the store, which
creates the pool lazily on its first query, `ensure_schema()` once at
startup, and `close_pool()` to shut everything down gracefully when the
application exits.
"""

import logging
from typing import Optional

import asyncpg

from catalog_service.app.config import settings
from catalog_service.app.store import ItemStore

logger = logging.getLogger(__name__)

# Module-level variables holding the shared pool and store.
# Both start as None and are created on first use.
_pool: Optional[asyncpg.Pool] = None
_store: Optional[ItemStore] = None

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS items (
    id       TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
    name     TEXT NOT NULL,
    price    DOUBLE PRECISION NOT NULL,
    category TEXT NOT NULL
);
"""


async def get_pool() -> asyncpg.Pool:
    """
    Return the asyncpg pool for DATABASE_URL, opening it on the first call.

    Pool bounds come from DB_POOL_MIN_SIZE and DB_POOL_MAX_SIZE.

    Returns:
        asyncpg.Pool: The pool shared by the item store and schema setup.
    """
    global _pool

    if _pool is None:
        _pool = await asyncpg.create_pool(
            dsn=settings.DATABASE_URL,
            min_size=settings.DB_POOL_MIN_SIZE,
            max_size=settings.DB_POOL_MAX_SIZE,
        )
        logger.info("Connected to item store")

    return _pool


def get_store() -> ItemStore:
    """
    Return the shared item store. Also used as a FastAPI dependency.
    """
    global _store
    if _store is None:
        _store = ItemStore(get_pool)
    return _store


async def ensure_schema() -> None:
    """Create the items table if it does not exist yet."""
    pool = await get_pool()
    async with pool.acquire() as conn:
        await conn.execute(SCHEMA_SQL)


async def close_pool() -> None:
    """
    Close the item store pool on shutdown. A no-op when no query ever ran.
    """
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
