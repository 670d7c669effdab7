"""
PostgreSQL implementation of the AnalyticsStore port.

Runs the queries from callboard.sql on an asyncpg connection and converts rows
into the record types of callboard.services.store.

Type handling:
    - Range bounds are bound as naive UTC datetimes, because the call tables
      use ``timestamp without time zone`` columns holding UTC.
    - Returned timestamps are re-attached to UTC.
    - Aggregates (bigint SUM/COUNT) are coerced with to_number so no Decimal
      reaches the report builders.

Driver errors are not caught here; they propagate to the caller unchanged.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from asyncpg import Connection

from callboard.models.enums import EventType
from callboard.services.numbers import to_number
from callboard.services.store import (
    CallRecord,
    DailyCallSums,
    DailyEventCount,
    FunnelEventRecord,
    GoalTargets,
    SchemaBlockRecord,
    SchemaDayRecord,
    ShiftSchemaRecord,
)
from callboard.services.temporal import DateRange, as_utc
from callboard.sql import (
    get_call_durations_query,
    get_call_event_counts_query,
    get_calls_with_events_query,
    get_daily_call_sums_query,
    get_daily_event_counts_query,
    get_goal_query,
    get_schema_blocks_query,
    get_schema_query,
)


logger = logging.getLogger(__name__)


def _to_db_timestamp(ts: datetime) -> datetime:
    """Convert an aware datetime to the naive UTC value stored in the database."""
    return as_utc(ts).replace(tzinfo=None)


def _from_db_timestamp(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


class PostgresAnalyticsStore:
    """
    AnalyticsStore backed by an asyncpg connection.

    The connection is owned by the caller (typically the request-scoped
    get_db_session dependency); this class never acquires or releases it.

    Example:
        async with pool.acquire() as conn:
            store = PostgresAnalyticsStore(conn)
            sums = await store.grouped_call_sums(1, date_range)
    """

    def __init__(self, conn: Connection):
        self._conn = conn

    def _range_args(self, company_id: int, date_range: DateRange) -> Tuple:
        return (
            company_id,
            _to_db_timestamp(date_range.start),
            _to_db_timestamp(date_range.end),
        )

    async def list_calls_in_range(
        self,
        company_id: int,
        date_range: DateRange
    ) -> List[CallRecord]:
        rows = await self._conn.fetch(
            get_calls_with_events_query(),
            *self._range_args(company_id, date_range)
        )

        # Rows arrive one per (call, event); fold them back into calls
        calls: Dict[int, CallRecord] = {}
        for row in rows:
            call = calls.get(row['call_id'])
            if call is None:
                call = CallRecord(
                    id=row['call_id'],
                    company_id=row['company_id'],
                    agent_id=row['agent_id'],
                    start_at=_from_db_timestamp(row['start_at']),
                    duration_seconds=int(to_number(row['duration_seconds'])),
                )
                calls[call.id] = call

            if row['event_id'] is not None:
                call.events.append(FunnelEventRecord(
                    id=row['event_id'],
                    event_type=EventType(row['event_type']),
                    timestamp=_from_db_timestamp(row['event_timestamp']),
                    agent_id=row['event_agent_id'],
                    call_id=call.id,
                ))

        logger.debug(f"Loaded {len(calls)} calls for company_id={company_id}")
        return list(calls.values())

    async def grouped_call_sums(
        self,
        company_id: int,
        date_range: DateRange
    ) -> List[DailyCallSums]:
        rows = await self._conn.fetch(
            get_daily_call_sums_query(),
            *self._range_args(company_id, date_range)
        )
        return [
            DailyCallSums(
                date=row['day'],
                duration_seconds=int(to_number(row['duration_seconds'])),
                calls=int(to_number(row['calls'])),
            )
            for row in rows
        ]

    async def grouped_event_counts(
        self,
        company_id: int,
        date_range: DateRange,
        event_type: Optional[EventType] = None
    ) -> List[DailyEventCount]:
        args = self._range_args(company_id, date_range)
        if event_type is not None:
            query = get_daily_event_counts_query(filter_by_type=True)
            args = args + (EventType(event_type).value,)
        else:
            query = get_daily_event_counts_query()

        rows = await self._conn.fetch(query, *args)
        return [self._event_count_from_row(row) for row in rows]

    async def grouped_call_event_counts(
        self,
        company_id: int,
        date_range: DateRange
    ) -> List[DailyEventCount]:
        rows = await self._conn.fetch(
            get_call_event_counts_query(),
            *self._range_args(company_id, date_range)
        )
        return [self._event_count_from_row(row) for row in rows]

    async def list_call_durations(
        self,
        company_id: int,
        date_range: DateRange
    ) -> List[int]:
        rows = await self._conn.fetch(
            get_call_durations_query(),
            *self._range_args(company_id, date_range)
        )
        return [int(to_number(row['duration_seconds'])) for row in rows]

    async def get_schema(
        self,
        schema_id: int,
        day_index_range: Optional[Tuple[int, int]] = None
    ) -> Optional[ShiftSchemaRecord]:
        header = await self._conn.fetchrow(get_schema_query(), schema_id)
        if header is None:
            return None

        if day_index_range is not None:
            from_day_index, to_day_index = day_index_range
            rows = await self._conn.fetch(
                get_schema_blocks_query(filter_by_day_index=True),
                schema_id,
                from_day_index,
                to_day_index,
            )
        else:
            rows = await self._conn.fetch(get_schema_blocks_query(), schema_id)

        days: Dict[int, SchemaDayRecord] = {}
        for row in rows:
            day = days.get(row['day_id'])
            if day is None:
                day = SchemaDayRecord(day_index=row['day_index'])
                days[row['day_id']] = day

            if row['block_id'] is not None:
                day.blocks.append(SchemaBlockRecord(
                    start_minutes=row['start_minutes'],
                    end_minutes=row['end_minutes'],
                    block_type=row['block_type'],
                    name=row['block_name'],
                ))

        return ShiftSchemaRecord(
            id=header['id'],
            company_id=header['company_id'],
            name=header['name'],
            schema_type=header['schema_type'],
            days=list(days.values()),
        )

    async def get_goal(self, goal_id: int) -> Optional[GoalTargets]:
        row = await self._conn.fetchrow(get_goal_query(), goal_id)
        if row is None:
            return None

        return GoalTargets(
            id=row['id'],
            company_id=row['company_id'],
            talk_time_minutes=to_number(row['talk_time_minutes']),
            seeds=int(to_number(row['seeds'])),
            callbacks=int(to_number(row['callbacks'])),
            leads=int(to_number(row['leads'])),
            sales=int(to_number(row['sales'])),
            number_of_calls=int(to_number(row['number_of_calls'])),
            number_of_long_calls=int(to_number(row['number_of_long_calls'])),
        )

    @staticmethod
    def _event_count_from_row(row) -> DailyEventCount:
        return DailyEventCount(
            date=row['day'],
            event_type=EventType(row['event_type']),
            count=int(to_number(row['count'])),
        )
