"""
Pydantic response models for the Callboard analytics API.

Every report endpoint returns a list of one of these point models. Field names
are camelCase because they are consumed unchanged by the dashboard charts.

All models use Pydantic v2 syntax with field validation and examples.
"""

from datetime import date as DateType
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from callboard.models.enums import DurationRange, FunnelStage


# =============================================================================
# Daily Activity
# =============================================================================


class DailyActivityPoint(BaseModel):
    """
    Talk time, call volume and seeds for one UTC calendar day.

    Days are driven by calls: a day with seeds but no calls is not reported.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "date": "2024-05-01",
                "talkTime": 42.5,
                "calls": 12,
                "seeds": 3
            }
        }
    )

    date: DateType = Field(
        ...,
        description="UTC calendar day"
    )
    talkTime: float = Field(
        ...,
        ge=0,
        description="Sum of call durations in minutes (not rounded)"
    )
    calls: int = Field(
        ...,
        ge=0,
        description="Number of calls started on this day"
    )
    seeds: int = Field(
        default=0,
        ge=0,
        description="SEED events recorded on this day by the company's agents"
    )


# =============================================================================
# Block Performance
# =============================================================================


class BlockPerformance(BaseModel):
    """
    Activity attributed to one block of a shift schema day.

    Source: one entry per (schema day, block) pair, in schema order.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "dayIndex": 0,
                "startMinutes": 480,
                "endMinutes": 720,
                "blockName": "Morning",
                "talkTime": 15,
                "seeds": 2,
                "sales": 0
            }
        }
    )

    dayIndex: int = Field(
        ...,
        ge=0,
        description="Zero-based day-of-cycle index of the schema day"
    )
    startMinutes: int = Field(
        ...,
        ge=0,
        le=1440,
        description="Block start, minutes from midnight (inclusive)"
    )
    endMinutes: int = Field(
        ...,
        ge=0,
        le=1440,
        description="Block end, minutes from midnight (exclusive)"
    )
    blockName: Optional[str] = Field(
        default=None,
        description="Optional display name of the block"
    )
    talkTime: float = Field(
        default=0,
        ge=0,
        description="Talk time in minutes of calls started inside the block"
    )
    seeds: int = Field(
        default=0,
        ge=0,
        description="SEED events on calls started inside the block"
    )
    sales: int = Field(
        default=0,
        ge=0,
        description="SALE events on calls started inside the block"
    )


# =============================================================================
# Call Duration Distribution
# =============================================================================


class DurationBin(BaseModel):
    """Number of calls whose duration falls into one histogram range."""
    range: DurationRange = Field(
        ...,
        description="Display label of the duration range"
    )
    count: int = Field(
        ...,
        ge=0,
        description="Number of calls in the range"
    )


# =============================================================================
# Seed Timeline Heatmap
# =============================================================================


class HeatmapPoint(BaseModel):
    """
    Heat value for one day of the seed timeline.

    intensity is the rounded average of the talk-time level and the seed level,
    each a 0-4 min-max bucket over the requested range.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "date": "2024-05-03",
                "intensity": 3,
                "seeds": 5,
                "talkTime": 87
            }
        }
    )

    date: DateType = Field(
        ...,
        description="UTC calendar day"
    )
    intensity: int = Field(
        ...,
        ge=0,
        le=4,
        description="Discrete heat level from 0 (coldest) to 4 (hottest)"
    )
    seeds: int = Field(
        ...,
        ge=0,
        description="SEED events on the day's calls"
    )
    talkTime: int = Field(
        ...,
        ge=0,
        description="Talk time in whole minutes"
    )


# =============================================================================
# Conversion Funnel
# =============================================================================


class FunnelPoint(BaseModel):
    """One stage of the Seeds -> Callbacks -> Leads -> Sales funnel."""
    name: FunnelStage = Field(
        ...,
        description="Funnel stage"
    )
    value: int = Field(
        ...,
        ge=0,
        description="Number of events of this stage in the range"
    )


# =============================================================================
# Goal Consistency
# =============================================================================


class ConsistencyPoint(BaseModel):
    """
    Goal attainment score for one day.

    `day` keeps the two-digit day-of-month label the streak chart uses; `date`
    carries the full day so that ranges spanning months stay unambiguous.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "day": "07",
                "date": "2024-05-07",
                "score": 83
            }
        }
    )

    day: str = Field(
        ...,
        min_length=2,
        max_length=2,
        description="Two-digit day of month"
    )
    date: DateType = Field(
        ...,
        description="UTC calendar day"
    )
    score: int = Field(
        ...,
        ge=0,
        le=100,
        description="Mean of the capped per-metric attainment percentages"
    )
