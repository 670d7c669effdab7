"""
FastAPI router module for the data visualization endpoints.

One GET endpoint per dashboard report. Every endpoint takes the tenant
(``companyId``) and an inclusive day range (``from``, ``to`` as YYYY-MM-DD);
the range is turned into an immutable DateRange covering whole days in the
configured report timezone before it reaches the services.

Key Endpoints:
- GET /daily-activity: Talk time, calls and seeds per day
- GET /block-performance: Activity per shift schema block
- GET /block-performance-filtered: Same, for a sub-range of schema days
- GET /long-call-distribution: Call duration histogram
- GET /seed-timeline-heatmap: Daily heat levels
- GET /conversion-funnel: Seeds -> Callbacks -> Leads -> Sales
- GET /consistency-streak: Daily goal attainment scores

Error Mapping:
- NotFoundError -> 404
- InvalidRangeError and request-level range checks -> 400
- Anything else (including database errors) -> logged, 500
"""

import logging
from datetime import date
from typing import List, NoReturn

from fastapi import APIRouter, HTTPException, Query

from callboard.core.config import Settings
from callboard.core.dependencies import AnalyticsStoreDep, SettingsDep
from callboard.models.schemas import (
    BlockPerformance,
    ConsistencyPoint,
    DailyActivityPoint,
    DurationBin,
    FunnelPoint,
    HeatmapPoint,
)
from callboard.services.activity import (
    conversion_funnel,
    daily_activity,
    long_call_distribution,
)
from callboard.services.block_performance import (
    block_performance,
    block_performance_for_days,
)
from callboard.services.consistency import consistency_history
from callboard.services.errors import AnalyticsError, InvalidRangeError, NotFoundError
from callboard.services.heatmap import seed_timeline_heatmap
from callboard.services.temporal import DateRange, days_in_range


# =============================================================================
# Module Configuration
# =============================================================================

logger = logging.getLogger(__name__)

router = APIRouter()


# Shared query parameter declarations
CompanyIdQuery = Query(..., alias="companyId", ge=1, description="Tenant (company) identifier")
FromQuery = Query(..., alias="from", description="First day of the range (YYYY-MM-DD)")
ToQuery = Query(..., alias="to", description="Last day of the range, inclusive (YYYY-MM-DD)")


# =============================================================================
# Helper Functions
# =============================================================================

def _date_range(from_date: date, to_date: date, settings: Settings) -> DateRange:
    """
    Build the whole-day DateRange for a request.

    Raises:
        HTTPException 400: If from is after to.
    """
    try:
        return DateRange.for_days(from_date, to_date, settings.report_tzinfo)
    except InvalidRangeError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _raise_http_error(error: Exception, report: str) -> NoReturn:
    """
    Convert a service error into the matching HTTPException.

    Args:
        error: Exception raised while building the report.
        report: Report name used in logs and the 500 detail.
    """
    if isinstance(error, HTTPException):
        raise error
    if isinstance(error, NotFoundError):
        raise HTTPException(status_code=404, detail=str(error))
    if isinstance(error, AnalyticsError):
        raise HTTPException(status_code=400, detail=str(error))

    logger.error(f"Error building {report}: {str(error)}", exc_info=error)
    raise HTTPException(
        status_code=500,
        detail=f"Failed to build {report}"
    )


# =============================================================================
# Daily Activity
# =============================================================================

@router.get(
    '/daily-activity',
    response_model=List[DailyActivityPoint],
    summary="Get Daily Activity",
    description="Talk time (minutes), call count and seed count per day with calls."
)
async def get_daily_activity(
    store: AnalyticsStoreDep,
    settings: SettingsDep,
    company_id: int = CompanyIdQuery,
    from_date: date = FromQuery,
    to_date: date = ToQuery,
) -> List[DailyActivityPoint]:
    """
    Get the daily activity series for a company.

    Raises:
        HTTPException 400: If from is after to.
        HTTPException 500: If the database query fails.
    """
    logger.info(f"Fetching daily activity for company_id={company_id}, {from_date}..{to_date}")

    try:
        date_range = _date_range(from_date, to_date, settings)
        return await daily_activity(store, company_id, date_range)
    except Exception as e:
        _raise_http_error(e, "daily activity report")


# =============================================================================
# Block Performance
# =============================================================================

@router.get(
    '/block-performance',
    response_model=List[BlockPerformance],
    summary="Get Block Performance",
    description="""
    Attribute the range's calls to every block of a shift schema.

    The first day of the range is schema day 0. Talk time is rounded to whole
    minutes. The range may not exceed MAX_BLOCK_REPORT_DAYS days.
    """
)
async def get_block_performance(
    store: AnalyticsStoreDep,
    settings: SettingsDep,
    company_id: int = CompanyIdQuery,
    schema_id: int = Query(..., alias="schemaId", ge=1, description="Shift schema identifier"),
    from_date: date = FromQuery,
    to_date: date = ToQuery,
) -> List[BlockPerformance]:
    """
    Get per-block performance for a shift schema.

    Raises:
        HTTPException 400: If the range is inverted or longer than the schema limit.
        HTTPException 404: If the schema does not exist for the company.
        HTTPException 500: If the database query fails.
    """
    logger.info(
        f"Fetching block performance for company_id={company_id}, "
        f"schema_id={schema_id}, {from_date}..{to_date}"
    )

    try:
        date_range = _date_range(from_date, to_date, settings)

        if days_in_range(from_date, to_date) > settings.max_block_report_days:
            raise HTTPException(
                status_code=400,
                detail=(
                    f"Date range exceeds maximum schema limit of "
                    f"{settings.max_block_report_days} days"
                )
            )

        return await block_performance(
            store,
            company_id,
            date_range,
            schema_id,
            tz=settings.report_tzinfo,
        )
    except Exception as e:
        _raise_http_error(e, "block performance report")


@router.get(
    '/block-performance-filtered',
    response_model=List[BlockPerformance],
    summary="Get Block Performance For Schema Days",
    description="""
    Attribute calls to the blocks of schema days fromDayIndex..toDayIndex.

    Day indices count whole days from the start of the range. Talk time is
    rounded to two decimals.
    """
)
async def get_block_performance_filtered(
    store: AnalyticsStoreDep,
    settings: SettingsDep,
    company_id: int = CompanyIdQuery,
    schema_id: int = Query(..., alias="schemaId", ge=1, description="Shift schema identifier"),
    from_date: date = FromQuery,
    to_date: date = ToQuery,
    from_day_index: int = Query(..., alias="fromDayIndex", ge=0, description="First schema day index"),
    to_day_index: int = Query(..., alias="toDayIndex", ge=0, description="Last schema day index, inclusive"),
) -> List[BlockPerformance]:
    """
    Get per-block performance for a sub-range of schema days.

    Raises:
        HTTPException 400: If toDayIndex does not fit in the date range, or
            fromDayIndex is greater than toDayIndex.
        HTTPException 404: If the schema does not exist or has no days in the sub-range.
        HTTPException 500: If the database query fails.
    """
    logger.info(
        f"Fetching filtered block performance for company_id={company_id}, "
        f"schema_id={schema_id}, days {from_day_index}..{to_day_index}"
    )

    try:
        date_range = _date_range(from_date, to_date, settings)

        range_days = days_in_range(from_date, to_date)
        if to_day_index >= range_days:
            raise HTTPException(
                status_code=400,
                detail=(
                    f"The requested toDayIndex ({to_day_index}) exceeds the provided "
                    f"date range of {range_days} days."
                )
            )

        return await block_performance_for_days(
            store,
            company_id,
            date_range,
            schema_id,
            from_day_index,
            to_day_index,
            tz=settings.report_tzinfo,
        )
    except Exception as e:
        _raise_http_error(e, "filtered block performance report")


# =============================================================================
# Call Duration Distribution
# =============================================================================

@router.get(
    '/long-call-distribution',
    response_model=List[DurationBin],
    summary="Get Call Duration Distribution",
    description="""
    Count calls into the duration ranges 0-1, 1-3, 3-5, 5-10 and 10+ minutes.

    Ranges without calls are omitted unless includeEmpty=true.
    """
)
async def get_long_call_distribution(
    store: AnalyticsStoreDep,
    settings: SettingsDep,
    company_id: int = CompanyIdQuery,
    from_date: date = FromQuery,
    to_date: date = ToQuery,
    include_empty: bool = Query(False, alias="includeEmpty", description="Zero-fill empty ranges"),
) -> List[DurationBin]:
    """
    Get the call duration histogram for a company.

    Raises:
        HTTPException 400: If from is after to.
        HTTPException 500: If the database query fails.
    """
    logger.info(f"Fetching duration distribution for company_id={company_id}, {from_date}..{to_date}")

    try:
        date_range = _date_range(from_date, to_date, settings)
        return await long_call_distribution(
            store,
            company_id,
            date_range,
            include_empty=include_empty,
        )
    except Exception as e:
        _raise_http_error(e, "call duration distribution")


# =============================================================================
# Seed Timeline Heatmap
# =============================================================================

@router.get(
    '/seed-timeline-heatmap',
    response_model=List[HeatmapPoint],
    summary="Get Seed Timeline Heatmap",
    description="Daily heat level 0-4 combining talk time and seed count."
)
async def get_seed_timeline_heatmap(
    store: AnalyticsStoreDep,
    settings: SettingsDep,
    company_id: int = CompanyIdQuery,
    from_date: date = FromQuery,
    to_date: date = ToQuery,
) -> List[HeatmapPoint]:
    """
    Get the seed timeline heatmap for a company.

    Raises:
        HTTPException 400: If from is after to.
        HTTPException 500: If the database query fails.
    """
    logger.info(f"Fetching seed heatmap for company_id={company_id}, {from_date}..{to_date}")

    try:
        date_range = _date_range(from_date, to_date, settings)
        return await seed_timeline_heatmap(store, company_id, date_range)
    except Exception as e:
        _raise_http_error(e, "seed timeline heatmap")


# =============================================================================
# Conversion Funnel
# =============================================================================

@router.get(
    '/conversion-funnel',
    response_model=List[FunnelPoint],
    summary="Get Conversion Funnel",
    description="Event counts for Seeds, Callbacks, Leads and Sales, always in that order."
)
async def get_conversion_funnel(
    store: AnalyticsStoreDep,
    settings: SettingsDep,
    company_id: int = CompanyIdQuery,
    from_date: date = FromQuery,
    to_date: date = ToQuery,
) -> List[FunnelPoint]:
    """
    Get the conversion funnel for a company.

    Raises:
        HTTPException 400: If from is after to.
        HTTPException 500: If the database query fails.
    """
    logger.info(f"Fetching conversion funnel for company_id={company_id}, {from_date}..{to_date}")

    try:
        date_range = _date_range(from_date, to_date, settings)
        return await conversion_funnel(store, company_id, date_range)
    except Exception as e:
        _raise_http_error(e, "conversion funnel")


# =============================================================================
# Goal Consistency
# =============================================================================

@router.get(
    '/consistency-streak',
    response_model=List[ConsistencyPoint],
    summary="Get Consistency Streak",
    description="""
    Score each day with calls against a temporal goal.

    Each metric with a positive target scores min(100, realized / target * 100);
    the day's score is the rounded mean of those scores.
    """
)
async def get_consistency_streak(
    store: AnalyticsStoreDep,
    settings: SettingsDep,
    goal_id: int = Query(..., alias="goalId", ge=1, description="Temporal goal identifier"),
    company_id: int = CompanyIdQuery,
    from_date: date = FromQuery,
    to_date: date = ToQuery,
) -> List[ConsistencyPoint]:
    """
    Get daily goal consistency scores.

    Raises:
        HTTPException 400: If from is after to.
        HTTPException 404: If the goal does not exist for the company.
        HTTPException 500: If the database query fails.
    """
    logger.info(
        f"Fetching consistency streak for goal_id={goal_id}, "
        f"company_id={company_id}, {from_date}..{to_date}"
    )

    try:
        date_range = _date_range(from_date, to_date, settings)
        return await consistency_history(store, goal_id, company_id, date_range)
    except Exception as e:
        _raise_http_error(e, "consistency streak")
