"""
Goal consistency scorer.

Compares each day's realized activity with the targets of a temporal goal.
Every metric whose target is positive yields a sub-score of
``min(100, 100 * realized / target)``; the day's score is the rounded mean of
those sub-scores. Metrics with a zero target are left out rather than scored
as 0, and a goal with no positive target scores every day 0.

Scored metrics (realized value <- goal target):
    talk time minutes  <- talk_time_minutes
    SEED events        <- seeds
    CALLBACK events    <- callbacks
    LEAD events        <- leads
    SALE events        <- sales
    calls              <- number_of_calls

number_of_long_calls is part of the goal but has no realized counterpart and
is not scored.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

import numpy as np

from callboard.models.enums import EventType
from callboard.models.schemas import ConsistencyPoint
from callboard.services.errors import NotFoundError
from callboard.services.numbers import round_half_up
from callboard.services.store import AnalyticsStore, GoalTargets
from callboard.services.temporal import DateRange


logger = logging.getLogger(__name__)


MAX_METRIC_SCORE: float = 100.0


@dataclass
class DailyMetrics:
    """Realized activity of one day, anchored on the day's calls."""
    date: date
    talk_time_minutes: float = 0.0
    calls: int = 0
    events: Dict[EventType, int] = field(default_factory=dict)

    def count(self, event_type: EventType) -> int:
        return self.events.get(event_type, 0)


def metric_score(realized: float, target: float) -> Optional[float]:
    """
    Capped attainment percentage of one metric.

    Returns:
        min(100, 100 * realized / target), or None when the target is not
        positive (the metric is not part of the goal).
    """
    if target is None or target <= 0:
        return None
    return min(MAX_METRIC_SCORE, 100.0 * realized / target)


def score_day(metrics: DailyMetrics, goal: GoalTargets) -> int:
    """
    Score one day against a goal.

    Example:
        >>> goal = GoalTargets(id=1, company_id=1, sales=10, seeds=4)
        >>> score_day(DailyMetrics(date=d, events={EventType.SALE: 15, EventType.SEED: 2}), goal)
        75
    """
    pairs = [
        (metrics.talk_time_minutes, goal.talk_time_minutes),
        (metrics.count(EventType.SEED), goal.seeds),
        (metrics.count(EventType.CALLBACK), goal.callbacks),
        (metrics.count(EventType.LEAD), goal.leads),
        (metrics.count(EventType.SALE), goal.sales),
        (metrics.calls, goal.number_of_calls),
    ]
    scores = [
        score for score in (metric_score(realized, target) for realized, target in pairs)
        if score is not None
    ]
    if not scores:
        return 0

    return int(round_half_up(float(np.mean(scores))))


async def collect_daily_metrics(
    store: AnalyticsStore,
    company_id: int,
    date_range: DateRange
) -> List[DailyMetrics]:
    """Per call-day talk time, call count and event counts, ascending by day."""
    call_sums = await store.grouped_call_sums(company_id, date_range)
    event_counts = await store.grouped_call_event_counts(company_id, date_range)

    days: Dict[date, DailyMetrics] = {
        row.date: DailyMetrics(
            date=row.date,
            talk_time_minutes=row.duration_seconds / 60,
            calls=row.calls,
        )
        for row in call_sums
    }
    for row in event_counts:
        day = days.get(row.date)
        # Events are counted on their call's day, so the day always exists
        if day is not None:
            day.events[row.event_type] = day.events.get(row.event_type, 0) + row.count

    return [days[d] for d in sorted(days)]


async def consistency_history(
    store: AnalyticsStore,
    goal_id: int,
    company_id: int,
    date_range: DateRange
) -> List[ConsistencyPoint]:
    """
    Score every day with calls in the range against a goal.

    Args:
        store: Storage collaborator.
        goal_id: Temporal goal providing the targets.
        company_id: Tenant identifier.
        date_range: Inclusive report window.

    Returns:
        One ConsistencyPoint per UTC day with calls, ascending by day.

    Raises:
        NotFoundError: If the goal does not exist for the tenant.
    """
    goal = await store.get_goal(goal_id)
    if goal is None or goal.company_id != company_id:
        logger.warning(f"Goal {goal_id} not found for company_id={company_id}")
        raise NotFoundError(f"Goal {goal_id} not found")

    daily = await collect_daily_metrics(store, company_id, date_range)

    points = [
        ConsistencyPoint(
            day=f"{metrics.date.day:02d}",
            date=metrics.date,
            score=score_day(metrics, goal),
        )
        for metrics in daily
    ]

    logger.info(
        f"Consistency history for goal_id={goal_id}, company_id={company_id}: "
        f"{len(points)} days"
    )
    return points
