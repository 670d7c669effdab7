"""
Core infrastructure package for the FastAPI backend.

Provides:
- Configuration management via pydantic-settings
- Async PostgreSQL connectivity via asyncpg
- FastAPI dependency injection utilities

Re-exports the commonly used pieces so callers can write:

    from callboard.core import get_settings, init_db, AnalyticsStoreDep
"""

from callboard.core.config import Settings, get_settings
from callboard.core.database import init_db, close_db, get_db_pool
from callboard.core.dependencies import (
    get_db_session,
    get_settings_dependency,
    get_analytics_store,
    SettingsDep,
    DBSessionDep,
    AnalyticsStoreDep,
)

__all__ = [
    'Settings',
    'get_settings',
    'init_db',
    'close_db',
    'get_db_pool',
    'get_db_session',
    'get_settings_dependency',
    'get_analytics_store',
    'SettingsDep',
    'DBSessionDep',
    'AnalyticsStoreDep',
]
