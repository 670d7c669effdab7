"""
FastAPI dependency injection module for the Callboard backend.

Provides reusable dependencies so that report endpoints never talk to the pool
or build a store themselves. Tests swap any of these through
``app.dependency_overrides``.

Key Dependencies Provided:
- get_db_session: Async generator yielding database connections from the pool
- get_settings_dependency: Returns the cached Settings singleton
- get_analytics_store: Wraps the request's connection in a PostgresAnalyticsStore
- SettingsDep / DBSessionDep / AnalyticsStoreDep: Annotated aliases

Usage Examples:
    @router.get("/daily-activity")
    async def daily_activity_endpoint(
        store: AnalyticsStoreDep,
        settings: SettingsDep,
    ) -> List[DailyActivityPoint]:
        ...
"""

from typing import Annotated, AsyncGenerator

from asyncpg import Connection
from fastapi import Depends

from callboard.core.config import Settings, get_settings
from callboard.core.database import get_db_pool
from callboard.services.postgres_store import PostgresAnalyticsStore
from callboard.services.store import AnalyticsStore


# =============================================================================
# Database Session Dependency
# =============================================================================

async def get_db_session() -> AsyncGenerator[Connection, None]:
    """
    Yield an async database connection from the pool.

    The connection is released back to the pool when the endpoint completes,
    whether it succeeded or raised.

    Yields:
        asyncpg.Connection: An active database connection from the pool.

    Raises:
        asyncpg.PostgresError: If connection acquisition fails.
    """
    pool = await get_db_pool()
    async with pool.acquire() as connection:
        yield connection


# =============================================================================
# Settings Dependency
# =============================================================================

def get_settings_dependency() -> Settings:
    """
    Return the Settings singleton instance.

    Thin wrapper around get_settings() so tests can do:

        app.dependency_overrides[get_settings_dependency] = lambda: test_settings
    """
    return get_settings()


# =============================================================================
# Store Dependency
# =============================================================================

def get_analytics_store(
    db: Annotated[Connection, Depends(get_db_session)],
) -> AnalyticsStore:
    """
    Build the storage collaborator for the current request.

    Args:
        db: Connection acquired for this request.

    Returns:
        AnalyticsStore: A PostgresAnalyticsStore bound to the connection.
    """
    return PostgresAnalyticsStore(db)


# =============================================================================
# Type Aliases for Dependency Injection
# =============================================================================

SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]

DBSessionDep = Annotated[Connection, Depends(get_db_session)]

AnalyticsStoreDep = Annotated[AnalyticsStore, Depends(get_analytics_store)]
