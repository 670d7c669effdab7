"""
Async PostgreSQL connection pool module.

This module owns the asyncpg connection pool shared by every request. It is the
single point through which report queries reach the relational store written by
the dialer webhook ingestion service.

Key Components:
- Global connection pool singleton (_pool)
- init_db(): Initialize the connection pool at application startup
- get_db_pool(): Get the pool instance (initializes if needed)
- close_db(): Gracefully close the pool at application shutdown

Connection Pool Configuration (from Settings):
- min_size: DB_POOL_MIN_SIZE (default 2)
- max_size: DB_POOL_MAX_SIZE (default 10)
- command_timeout: DB_COMMAND_TIMEOUT seconds (default 60)

Usage:
    # At application startup (in FastAPI lifespan)
    await init_db()

    pool = await get_db_pool()
    async with pool.acquire() as conn:
        rows = await conn.fetch('SELECT id FROM "Call" LIMIT 10')

    # At application shutdown
    await close_db()
"""

import logging
from typing import Optional

import asyncpg
from asyncpg import Pool

from callboard.core.config import get_settings


logger = logging.getLogger(__name__)


# =============================================================================
# Global Pool Singleton
# =============================================================================

# None until init_db() is called
_pool: Optional[Pool] = None


# =============================================================================
# Pool Lifecycle Functions
# =============================================================================

async def init_db() -> Pool:
    """
    Initialize the database connection pool.

    Idempotent: if the pool already exists it is returned unchanged.

    Returns:
        Pool: The asyncpg connection pool instance.

    Raises:
        asyncpg.PostgresError: If connection to the database fails.
        OSError: If the database host is unreachable.
    """
    global _pool

    if _pool is None:
        settings = get_settings()
        _pool = await asyncpg.create_pool(
            dsn=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout,
        )
        logger.debug(
            f"Created asyncpg pool (min={settings.db_pool_min_size}, "
            f"max={settings.db_pool_max_size})"
        )

    return _pool


async def get_db_pool() -> Pool:
    """
    Get the database connection pool, initializing if needed.

    Prefer calling init_db() explicitly at startup; lazy initialization adds
    latency to the first request that reaches this function.

    Returns:
        Pool: The asyncpg connection pool instance.
    """
    global _pool

    if _pool is None:
        await init_db()

    assert _pool is not None, "Pool should be initialized after init_db()"

    return _pool


async def close_db() -> None:
    """
    Close the database connection pool gracefully.

    Waits for acquired connections to be released. Calling it when no pool
    exists has no effect.
    """
    global _pool

    if _pool is not None:
        await _pool.close()
        _pool = None

