"""
Backend Services Module

Analytics aggregation engine for the Callboard dashboard. Each report builder
is a stateless async function taking an AnalyticsStore, a tenant id and a
DateRange, and returning a list of Pydantic points.

Services:
- temporal: Day keys, wall-clock minutes, relative day indices, DateRange
- activity: Daily activity, call-duration histogram, conversion funnel
- block_performance: Shift schema block attribution
- heatmap: Min-max intensity levels for the seed timeline
- consistency: Goal attainment scoring
- store / postgres_store / memory_store: Storage port and its adapters

All services are consumed by the API layer (callboard/api/).
"""

# =============================================================================
# Storage Port and Adapters
# =============================================================================

from callboard.services.store import (
    AnalyticsStore,
    CallRecord,
    FunnelEventRecord,
    SchemaBlockRecord,
    SchemaDayRecord,
    ShiftSchemaRecord,
    GoalTargets,
    DailyCallSums,
    DailyEventCount,
)
from callboard.services.postgres_store import PostgresAnalyticsStore
from callboard.services.memory_store import InMemoryAnalyticsStore

# =============================================================================
# Errors and Temporal Bucketing
# =============================================================================

from callboard.services.errors import AnalyticsError, NotFoundError, InvalidRangeError
from callboard.services.temporal import (
    DateRange,
    day_key,
    minutes_from_midnight,
    relative_day_index,
    days_in_range,
)

# =============================================================================
# Report Builders
# =============================================================================

from callboard.services.activity import (
    daily_activity,
    bin_durations,
    long_call_distribution,
    conversion_funnel,
)
from callboard.services.block_performance import (
    block_performance,
    block_performance_for_days,
)
from callboard.services.heatmap import (
    intensity_level,
    seed_timeline_heatmap,
)
from callboard.services.consistency import (
    score_day,
    consistency_history,
)

__all__ = [
    # Storage
    'AnalyticsStore',
    'CallRecord',
    'FunnelEventRecord',
    'SchemaBlockRecord',
    'SchemaDayRecord',
    'ShiftSchemaRecord',
    'GoalTargets',
    'DailyCallSums',
    'DailyEventCount',
    'PostgresAnalyticsStore',
    'InMemoryAnalyticsStore',
    # Errors
    'AnalyticsError',
    'NotFoundError',
    'InvalidRangeError',
    # Temporal
    'DateRange',
    'day_key',
    'minutes_from_midnight',
    'relative_day_index',
    'days_in_range',
    # Reports
    'daily_activity',
    'bin_durations',
    'long_call_distribution',
    'conversion_funnel',
    'block_performance',
    'block_performance_for_days',
    'intensity_level',
    'seed_timeline_heatmap',
    'score_day',
    'consistency_history',
]
