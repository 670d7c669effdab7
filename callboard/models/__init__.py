"""
Package initialization file for backend models.

Exports all Pydantic schemas and enumerations so that other modules can write:

    from callboard.models import EventType, DailyActivityPoint
"""

from callboard.models.enums import (
    EventType,
    DurationRange,
    FunnelStage,
)

from callboard.models.schemas import (
    DailyActivityPoint,
    BlockPerformance,
    DurationBin,
    HeatmapPoint,
    FunnelPoint,
    ConsistencyPoint,
)

__all__ = [
    # Enums
    'EventType',
    'DurationRange',
    'FunnelStage',
    # Report schemas
    'DailyActivityPoint',
    'BlockPerformance',
    'DurationBin',
    'HeatmapPoint',
    'FunnelPoint',
    'ConsistencyPoint',
]
