"""
In-memory implementation of the AnalyticsStore port.

Holds calls, schemas and goals in plain Python collections and answers the
same queries as PostgresAnalyticsStore with the same grouping rules:

    - calls belong to a tenant through Call.company_id
    - funnel events belong to a tenant through their agent
    - days are UTC calendar days

Used by the test suite and for running the API against fixture data.
"""

from collections import defaultdict
from dataclasses import replace
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from callboard.models.enums import EventType
from callboard.services.store import (
    CallRecord,
    DailyCallSums,
    DailyEventCount,
    GoalTargets,
    ShiftSchemaRecord,
)
from callboard.services.temporal import DateRange, as_utc, day_key


def _to_event_counts(counts: Dict[Tuple[date, EventType], int]) -> List[DailyEventCount]:
    return [
        DailyEventCount(date=day, event_type=event_type, count=count)
        for (day, event_type), count in sorted(
            counts.items(), key=lambda item: (item[0][0], item[0][1].value)
        )
    ]


class InMemoryAnalyticsStore:
    """
    AnalyticsStore over in-memory records.

    Args:
        calls: Every call known to the store, any tenant, with nested events.
        agents: Mapping of agent id to the company id the agent works for.
        schemas: Shift schemas, any tenant.
        goals: Temporal goals, any tenant.

    Example:
        store = InMemoryAnalyticsStore(calls=[...], agents={7: 1})
        points = await daily_activity(store, 1, date_range)
    """

    def __init__(
        self,
        calls: Optional[Iterable[CallRecord]] = None,
        agents: Optional[Dict[int, int]] = None,
        schemas: Optional[Iterable[ShiftSchemaRecord]] = None,
        goals: Optional[Iterable[GoalTargets]] = None,
    ):
        self.calls: List[CallRecord] = list(calls or [])
        self.agents: Dict[int, int] = dict(agents or {})
        self.schemas: Dict[int, ShiftSchemaRecord] = {s.id: s for s in schemas or []}
        self.goals: Dict[int, GoalTargets] = {g.id: g for g in goals or []}

    async def list_calls_in_range(
        self,
        company_id: int,
        date_range: DateRange
    ) -> List[CallRecord]:
        return self._calls_in_range(company_id, date_range)

    async def grouped_call_sums(
        self,
        company_id: int,
        date_range: DateRange
    ) -> List[DailyCallSums]:
        durations: Dict[date, int] = defaultdict(int)
        counts: Dict[date, int] = defaultdict(int)
        for call in self._calls_in_range(company_id, date_range):
            day = day_key(call.start_at)
            durations[day] += call.duration_seconds
            counts[day] += 1

        return [
            DailyCallSums(date=day, duration_seconds=durations[day], calls=counts[day])
            for day in sorted(counts)
        ]

    async def grouped_event_counts(
        self,
        company_id: int,
        date_range: DateRange,
        event_type: Optional[EventType] = None
    ) -> List[DailyEventCount]:
        counts: Dict[Tuple[date, EventType], int] = defaultdict(int)
        for call in self.calls:
            for event in call.events:
                if self.agents.get(event.agent_id) != company_id:
                    continue
                if event_type is not None and event.event_type != event_type:
                    continue
                if not date_range.contains(event.timestamp):
                    continue
                counts[(day_key(event.timestamp), event.event_type)] += 1

        return _to_event_counts(counts)

    async def grouped_call_event_counts(
        self,
        company_id: int,
        date_range: DateRange
    ) -> List[DailyEventCount]:
        counts: Dict[Tuple[date, EventType], int] = defaultdict(int)
        for call in self._calls_in_range(company_id, date_range):
            day = day_key(call.start_at)
            for event in call.events:
                counts[(day, event.event_type)] += 1

        return _to_event_counts(counts)

    async def list_call_durations(
        self,
        company_id: int,
        date_range: DateRange
    ) -> List[int]:
        return [call.duration_seconds for call in self._calls_in_range(company_id, date_range)]

    async def get_schema(
        self,
        schema_id: int,
        day_index_range: Optional[Tuple[int, int]] = None
    ) -> Optional[ShiftSchemaRecord]:
        schema = self.schemas.get(schema_id)
        if schema is None:
            return None

        days = sorted(schema.days, key=lambda d: d.day_index)
        if day_index_range is not None:
            from_day_index, to_day_index = day_index_range
            days = [d for d in days if from_day_index <= d.day_index <= to_day_index]

        # sorted() is stable, so equal start minutes keep declaration order
        days = [
            replace(d, blocks=sorted(d.blocks, key=lambda b: b.start_minutes))
            for d in days
        ]
        return replace(schema, days=days)

    async def get_goal(self, goal_id: int) -> Optional[GoalTargets]:
        return self.goals.get(goal_id)

    def _calls_in_range(self, company_id: int, date_range: DateRange) -> List[CallRecord]:
        calls = [
            call for call in self.calls
            if call.company_id == company_id and date_range.contains(call.start_at)
        ]
        return sorted(calls, key=lambda c: (as_utc(c.start_at), c.id))
