"""
Intensity normalizer for the seed timeline heatmap.

Each day with calls gets two discrete levels, one for talk time and one for
seed count. A level is the day's position in five equal-width buckets spanning
the metric's min..max over the range. The day's heat is the rounded average of
the two levels.

Intensity Levels:
    0 - coldest bucket (or every day when the metric is flat)
    4 - hottest bucket, including the maximum itself
"""

import logging
from datetime import date
from typing import Dict, List, Sequence

import numpy as np

from callboard.models.enums import EventType
from callboard.models.schemas import HeatmapPoint
from callboard.services.numbers import round_half_up
from callboard.services.store import AnalyticsStore
from callboard.services.temporal import DateRange


logger = logging.getLogger(__name__)


# Number of equal-width buckets between a metric's min and max
INTENSITY_BUCKETS: int = 5

MAX_INTENSITY: int = INTENSITY_BUCKETS - 1


def intensity_level(value: float, minimum: float, maximum: float) -> int:
    """
    Place a value into one of five equal-width buckets between min and max.

    Args:
        value: Metric value of one day.
        minimum: Smallest value of the metric across the range.
        maximum: Largest value of the metric across the range.

    Returns:
        Level 0-4; 0 for every value when minimum == maximum.

    Example:
        >>> intensity_level(10, 0, 10)
        4
        >>> intensity_level(3.9, 0, 10)
        1
    """
    if maximum == minimum:
        return 0

    step = (maximum - minimum) / INTENSITY_BUCKETS
    level = int(np.floor((value - minimum) / step))
    return min(level, MAX_INTENSITY)


def intensity_levels(values: Sequence[float]) -> List[int]:
    """Min-max bucket a whole series; see intensity_level."""
    if len(values) == 0:
        return []

    array = np.asarray(values, dtype=np.float64)
    minimum = float(array.min())
    maximum = float(array.max())
    return [intensity_level(float(v), minimum, maximum) for v in array]


async def seed_timeline_heatmap(
    store: AnalyticsStore,
    company_id: int,
    date_range: DateRange
) -> List[HeatmapPoint]:
    """
    Build the seed timeline heatmap for a tenant.

    Every UTC day with at least one call appears, including days without
    seeds. Seeds are the SEED events attached to that day's calls.

    Args:
        store: Storage collaborator.
        company_id: Tenant identifier.
        date_range: Inclusive report window.

    Returns:
        HeatmapPoint list ascending by day; empty when there are no calls.
    """
    call_sums = sorted(
        await store.grouped_call_sums(company_id, date_range),
        key=lambda r: r.date,
    )
    if not call_sums:
        return []

    event_counts = await store.grouped_call_event_counts(company_id, date_range)
    seeds_by_day: Dict[date, int] = {}
    for row in event_counts:
        if row.event_type == EventType.SEED:
            seeds_by_day[row.date] = seeds_by_day.get(row.date, 0) + row.count

    talk_minutes = [row.duration_seconds / 60 for row in call_sums]
    seeds = [seeds_by_day.get(row.date, 0) for row in call_sums]

    talk_levels = intensity_levels(talk_minutes)
    seed_levels = intensity_levels(seeds)

    points = [
        HeatmapPoint(
            date=row.date,
            intensity=int(round_half_up((talk_level + seed_level) / 2)),
            seeds=seed_count,
            talkTime=int(round_half_up(minutes)),
        )
        for row, minutes, seed_count, talk_level, seed_level in zip(
            call_sums, talk_minutes, seeds, talk_levels, seed_levels
        )
    ]

    logger.info(f"Seed heatmap for company_id={company_id}: {len(points)} days")
    return points
