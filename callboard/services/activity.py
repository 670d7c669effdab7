"""
Daily activity, call-duration distribution and conversion funnel reports.

Key Functions:
- daily_activity: Per-day talk time, call count and seeds
- bin_durations: Count call durations into the five fixed histogram bins
- long_call_distribution: Duration histogram for a tenant and range
- conversion_funnel: Seeds -> Callbacks -> Leads -> Sales counts

Join semantics:
    daily_activity is anchored on calls. Seeds come from events of the
    tenant's agents grouped by the event's own day, and are attached to a call
    day only when that day has calls. A day with seeds but no calls is absent.

Histogram bins (seconds, lower bound inclusive):
    [0, 60) "0-1 min", [60, 180) "1-3 min", [180, 300) "3-5 min",
    [300, 600) "5-10 min", [600, inf) "10+ min"
"""

import logging
from datetime import date
from typing import Dict, List, Sequence

import numpy as np

from callboard.models.enums import DurationRange, EventType, FunnelStage
from callboard.models.schemas import DailyActivityPoint, DurationBin, FunnelPoint
from callboard.services.store import AnalyticsStore
from callboard.services.temporal import DateRange


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

# Upper bounds (exclusive) of the first four bins; the last bin is open ended
DURATION_BIN_EDGES: List[int] = [60, 180, 300, 600]

# Display order of the histogram; index i is the bin np.digitize returns
DURATION_BIN_LABELS: List[DurationRange] = [
    DurationRange.UNDER_1_MIN,
    DurationRange.FROM_1_TO_3_MIN,
    DurationRange.FROM_3_TO_5_MIN,
    DurationRange.FROM_5_TO_10_MIN,
    DurationRange.OVER_10_MIN,
]

FUNNEL_STAGES: List[tuple] = [
    (FunnelStage.SEEDS, EventType.SEED),
    (FunnelStage.CALLBACKS, EventType.CALLBACK),
    (FunnelStage.LEADS, EventType.LEAD),
    (FunnelStage.SALES, EventType.SALE),
]


# =============================================================================
# Daily Activity
# =============================================================================


async def daily_activity(
    store: AnalyticsStore,
    company_id: int,
    date_range: DateRange
) -> List[DailyActivityPoint]:
    """
    Build the daily activity series for a tenant.

    Args:
        store: Storage collaborator.
        company_id: Tenant identifier.
        date_range: Inclusive report window.

    Returns:
        One DailyActivityPoint per UTC day with at least one call, ascending.
        talkTime is the raw (unrounded) sum of durations in minutes.

    Example:
        >>> points = await daily_activity(store, 1, DateRange.for_days(d1, d2))
        >>> points[0].talkTime
        42.5
    """
    call_sums = await store.grouped_call_sums(company_id, date_range)
    seed_counts = await store.grouped_event_counts(
        company_id, date_range, event_type=EventType.SEED
    )

    seeds_by_day: Dict[date, int] = {}
    for row in seed_counts:
        seeds_by_day[row.date] = seeds_by_day.get(row.date, 0) + row.count

    points = [
        DailyActivityPoint(
            date=row.date,
            talkTime=row.duration_seconds / 60,
            calls=row.calls,
            seeds=seeds_by_day.get(row.date, 0),
        )
        for row in sorted(call_sums, key=lambda r: r.date)
    ]

    logger.info(f"Daily activity for company_id={company_id}: {len(points)} days")
    return points


# =============================================================================
# Call Duration Distribution
# =============================================================================


def bin_durations(durations: Sequence[int]) -> List[int]:
    """
    Count durations into the five fixed histogram bins.

    Args:
        durations: Call durations in seconds.

    Returns:
        Five counts, in DURATION_BIN_LABELS order.

    Example:
        >>> bin_durations([30, 599, 600])
        [1, 0, 0, 1, 1]
    """
    if len(durations) == 0:
        return [0] * len(DURATION_BIN_LABELS)

    indices = np.digitize(np.asarray(durations, dtype=np.int64), DURATION_BIN_EDGES)
    counts = np.bincount(indices, minlength=len(DURATION_BIN_LABELS))
    return [int(c) for c in counts]


async def long_call_distribution(
    store: AnalyticsStore,
    company_id: int,
    date_range: DateRange,
    include_empty: bool = False
) -> List[DurationBin]:
    """
    Build the call-duration histogram for a tenant.

    Args:
        store: Storage collaborator.
        company_id: Tenant identifier.
        date_range: Inclusive report window.
        include_empty: Return all five bins, zero-filled. By default bins
            without calls are omitted, which is what the dashboard expects.

    Returns:
        DurationBin list in fixed bin order.
    """
    durations = await store.list_call_durations(company_id, date_range)
    counts = bin_durations(durations)

    bins = [
        DurationBin(range=label, count=count)
        for label, count in zip(DURATION_BIN_LABELS, counts)
        if include_empty or count > 0
    ]

    logger.info(
        f"Duration distribution for company_id={company_id}: "
        f"{len(durations)} calls in {len(bins)} bins"
    )
    return bins


# =============================================================================
# Conversion Funnel
# =============================================================================


async def conversion_funnel(
    store: AnalyticsStore,
    company_id: int,
    date_range: DateRange
) -> List[FunnelPoint]:
    """
    Count funnel events by stage over the whole range.

    Events are attributed to the tenant through their agent and filtered on
    the event timestamp.

    Returns:
        Exactly four FunnelPoints: Seeds, Callbacks, Leads, Sales. Stages
        without events report 0.
    """
    rows = await store.grouped_event_counts(company_id, date_range)

    totals: Dict[EventType, int] = {}
    for row in rows:
        totals[row.event_type] = totals.get(row.event_type, 0) + row.count

    return [
        FunnelPoint(name=stage, value=totals.get(event_type, 0))
        for stage, event_type in FUNNEL_STAGES
    ]
