"""
SQL Query Module for the Callboard backend.

Provides parameterized PostgreSQL queries for:
- Call and funnel event aggregation (call_queries)
- Shift schema and temporal goal lookups (schema_queries)

Follows the Repository Pattern: only PostgresAnalyticsStore executes these,
the report builders read through the AnalyticsStore port.

Example usage:
    from callboard.sql import get_daily_call_sums_query

    rows = await conn.fetch(get_daily_call_sums_query(), company_id, start, end)
"""

from callboard.sql.call_queries import (
    get_calls_with_events_query,
    get_daily_call_sums_query,
    get_daily_event_counts_query,
    get_call_event_counts_query,
    get_call_durations_query,
    CALL_RANGE_PREDICATE,
)

from callboard.sql.schema_queries import (
    get_schema_query,
    get_schema_blocks_query,
    get_goal_query,
)

__all__ = [
    'get_calls_with_events_query',
    'get_daily_call_sums_query',
    'get_daily_event_counts_query',
    'get_call_event_counts_query',
    'get_call_durations_query',
    'CALL_RANGE_PREDICATE',
    'get_schema_query',
    'get_schema_blocks_query',
    'get_goal_query',
]
