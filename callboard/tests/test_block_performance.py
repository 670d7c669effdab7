"""
Tests for the schema-block mapper and the two block performance reports.

Covers:
- The Morning/Afternoon scenario end to end
- Half-open block boundaries (07:59 is outside [480, 720))
- Overlap tie-break: lowest start minute wins
- Absolute vs signed day index between the two variants
- Whole-minute vs two-decimal rounding
- Schema lookup errors and tenant scoping
"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from callboard.models.enums import EventType
from callboard.services.block_performance import (
    attribute_calls,
    block_performance,
    block_performance_for_days,
    build_accumulators,
)
from callboard.services.errors import InvalidRangeError, NotFoundError
from callboard.services.store import (
    SchemaBlockRecord,
    SchemaDayRecord,
    ShiftSchemaRecord,
)
from callboard.services.temporal import DateRange
from callboard.tests.conftest import (
    COMPANY_ID,
    OTHER_COMPANY_ID,
    RANGE_START,
    SCHEMA_ID,
    at,
)


def two_day_schema() -> ShiftSchemaRecord:
    """Schema with one full-day block on each of days 0 and 1."""
    return ShiftSchemaRecord(
        id=SCHEMA_ID,
        company_id=COMPANY_ID,
        name='Two Day',
        days=[
            SchemaDayRecord(day_index=1, blocks=[SchemaBlockRecord(0, 1440, name='Day 1')]),
            SchemaDayRecord(day_index=0, blocks=[SchemaBlockRecord(0, 1440, name='Day 0')]),
        ],
    )


# =============================================================================
# Unfiltered Report
# =============================================================================


class TestBlockPerformance:
    """block_performance over the whole schema."""

    @pytest.mark.asyncio
    async def test_morning_afternoon_scenario(self, make_call, make_store, may_range) -> None:
        """
        Minutes 500 and 700 land in Morning, minute 900 in Afternoon.

        Morning: 600s + 300s = 15 min, 2 seeds.
        Afternoon: 900s = 15 min, 1 seed.
        """
        store = make_store(calls=[
            make_call(at(RANGE_START, 500), 600, events=[EventType.SEED]),
            make_call(at(RANGE_START, 700), 300, events=[EventType.SEED]),
            make_call(at(RANGE_START, 900), 900, events=[EventType.SEED]),
        ])

        result = await block_performance(store, COMPANY_ID, may_range, SCHEMA_ID)

        assert [
            (r.blockName, r.talkTime, r.seeds, r.sales) for r in result
        ] == [
            ('Morning', 15, 2, 0),
            ('Afternoon', 15, 1, 0),
        ]
        assert result[0].dayIndex == 0
        assert (result[0].startMinutes, result[0].endMinutes) == (480, 720)
        assert (result[1].startMinutes, result[1].endMinutes) == (720, 1080)

    @pytest.mark.asyncio
    async def test_nine_am_call_attributes_full_duration_and_events(
        self, make_call, make_store, may_range
    ) -> None:
        store = make_store(calls=[
            make_call(at(RANGE_START, 540), 1800, events=[EventType.SEED, EventType.SALE]),
        ])

        result = await block_performance(store, COMPANY_ID, may_range, SCHEMA_ID)

        morning = result[0]
        assert morning.talkTime == 30
        assert morning.seeds == 1
        assert morning.sales == 1

    @pytest.mark.asyncio
    async def test_call_before_first_block_is_dropped(
        self, make_call, make_store, may_range
    ) -> None:
        store = make_store(calls=[
            make_call(at(RANGE_START, 479, 59), 600, events=[EventType.SEED]),
        ])

        result = await block_performance(store, COMPANY_ID, may_range, SCHEMA_ID)

        assert all(r.talkTime == 0 and r.seeds == 0 for r in result)

    @pytest.mark.asyncio
    async def test_block_end_is_exclusive(self, make_call, make_store, may_range) -> None:
        store = make_store(calls=[make_call(at(RANGE_START, 720), 120)])

        result = await block_performance(store, COMPANY_ID, may_range, SCHEMA_ID)

        assert result[0].talkTime == 0
        assert result[1].talkTime == 2

    @pytest.mark.asyncio
    async def test_calls_on_days_without_blocks_are_dropped(
        self, make_call, make_store, may_range
    ) -> None:
        store = make_store(calls=[make_call(at(date(2024, 5, 2), 500), 600)])

        result = await block_performance(store, COMPANY_ID, may_range, SCHEMA_ID)

        assert len(result) == 2
        assert all(r.talkTime == 0 for r in result)

    @pytest.mark.asyncio
    async def test_talk_time_rounds_half_up_to_whole_minutes(
        self, make_call, make_store, may_range
    ) -> None:
        store = make_store(calls=[make_call(at(RANGE_START, 500), 150)])

        result = await block_performance(store, COMPANY_ID, may_range, SCHEMA_ID)

        assert result[0].talkTime == 3

    @pytest.mark.asyncio
    async def test_days_ordered_by_index(self, make_call, make_store, may_range) -> None:
        store = make_store(
            calls=[make_call(at(date(2024, 5, 2), 60), 120)],
            schemas=[two_day_schema()],
        )

        result = await block_performance(store, COMPANY_ID, may_range, SCHEMA_ID)

        assert [r.dayIndex for r in result] == [0, 1]
        assert [r.talkTime for r in result] == [0, 2]

    @pytest.mark.asyncio
    async def test_missing_schema_raises_not_found(self, make_store, may_range) -> None:
        with pytest.raises(NotFoundError):
            await block_performance(make_store(), COMPANY_ID, may_range, 999)

    @pytest.mark.asyncio
    async def test_schema_of_other_tenant_raises_not_found(
        self, make_store, may_range
    ) -> None:
        with pytest.raises(NotFoundError):
            await block_performance(make_store(), OTHER_COMPANY_ID, may_range, SCHEMA_ID)

    @pytest.mark.asyncio
    async def test_schema_without_days_returns_empty(self, make_store, may_range) -> None:
        empty = ShiftSchemaRecord(id=SCHEMA_ID, company_id=COMPANY_ID, name='Empty')

        result = await block_performance(
            make_store(schemas=[empty]), COMPANY_ID, may_range, SCHEMA_ID
        )

        assert result == []

    @pytest.mark.asyncio
    async def test_minutes_read_in_report_timezone(self, make_call, make_store) -> None:
        """13:00 UTC is 09:00 in New York (EDT), inside Morning."""
        tz = ZoneInfo('America/New_York')
        date_range = DateRange.for_days(RANGE_START, RANGE_START, tz)
        store = make_store(calls=[
            make_call(datetime(2024, 5, 1, 13, 0, tzinfo=timezone.utc), 600),
        ])

        result = await block_performance(store, COMPANY_ID, date_range, SCHEMA_ID, tz=tz)

        assert result[0].talkTime == 10
        assert result[1].talkTime == 0


# =============================================================================
# Day-Filtered Report
# =============================================================================


class TestBlockPerformanceForDays:
    """block_performance_for_days over a sub-range of schema days."""

    @pytest.mark.asyncio
    async def test_reports_only_requested_days(self, make_call, make_store, may_range) -> None:
        store = make_store(
            calls=[
                make_call(at(RANGE_START, 60), 60),
                make_call(at(date(2024, 5, 2), 60), 120),
            ],
            schemas=[two_day_schema()],
        )

        result = await block_performance_for_days(
            store, COMPANY_ID, may_range, SCHEMA_ID, 1, 1
        )

        assert len(result) == 1
        assert result[0].dayIndex == 1
        assert result[0].blockName == 'Day 1'
        assert result[0].talkTime == 2

    @pytest.mark.asyncio
    async def test_talk_time_rounds_to_two_decimals(
        self, make_call, make_store, may_range
    ) -> None:
        # 100s = 1.6666... minutes
        store = make_store(calls=[make_call(at(RANGE_START, 500), 100)])

        result = await block_performance_for_days(
            store, COMPANY_ID, may_range, SCHEMA_ID, 0, 0
        )

        assert result[0].talkTime == pytest.approx(1.67)

    @pytest.mark.asyncio
    async def test_inverted_day_indices_raise(self, make_store, may_range) -> None:
        with pytest.raises(InvalidRangeError):
            await block_performance_for_days(
                make_store(), COMPANY_ID, may_range, SCHEMA_ID, 3, 1
            )

    @pytest.mark.asyncio
    async def test_no_days_in_sub_range_raises_not_found(
        self, make_store, may_range
    ) -> None:
        with pytest.raises(NotFoundError):
            await block_performance_for_days(
                make_store(), COMPANY_ID, may_range, SCHEMA_ID, 2, 4
            )

    @pytest.mark.asyncio
    async def test_missing_schema_raises_not_found(self, make_store, may_range) -> None:
        with pytest.raises(NotFoundError):
            await block_performance_for_days(
                make_store(), COMPANY_ID, may_range, 999, 0, 0
            )


# =============================================================================
# Mapper
# =============================================================================


class TestAttributeCalls:
    """Day index and tie-break rules of the mapper."""

    def test_overlap_lowest_start_minute_wins(self, make_call) -> None:
        schema = ShiftSchemaRecord(
            id=1,
            company_id=COMPANY_ID,
            name='Overlap',
            days=[SchemaDayRecord(day_index=0, blocks=[
                SchemaBlockRecord(600, 900, name='Late'),
                SchemaBlockRecord(480, 720, name='Early'),
            ])],
        )
        accumulators = build_accumulators(schema)

        matched = attribute_calls(
            accumulators,
            [make_call(at(RANGE_START, 650), 600)],
            datetime(2024, 5, 1, tzinfo=timezone.utc),
        )

        assert matched == 1
        by_name = {a.block_name: a for a in accumulators}
        assert by_name['Early'].talk_time == pytest.approx(10)
        assert by_name['Late'].talk_time == 0

    def test_equal_start_keeps_declaration_order(self, make_call) -> None:
        schema = ShiftSchemaRecord(
            id=1,
            company_id=COMPANY_ID,
            name='Tie',
            days=[SchemaDayRecord(day_index=0, blocks=[
                SchemaBlockRecord(480, 600, name='First'),
                SchemaBlockRecord(480, 720, name='Second'),
            ])],
        )
        accumulators = build_accumulators(schema)

        attribute_calls(
            accumulators,
            [make_call(at(RANGE_START, 500), 60)],
            datetime(2024, 5, 1, tzinfo=timezone.utc),
        )

        assert [a.block_name for a in accumulators] == ['First', 'Second']
        assert accumulators[0].talk_time == pytest.approx(1)
        assert accumulators[1].talk_time == 0

    def test_absolute_day_index_folds_calls_before_start(self, make_call) -> None:
        """A call 1 hour before the range start is day 0 absolute, day -1 signed."""
        range_start = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
        call = make_call(range_start - timedelta(hours=1), 60)

        absolute = build_accumulators(two_day_schema())
        signed = build_accumulators(two_day_schema())

        assert attribute_calls(absolute, [call], range_start, absolute_day_index=True) == 1
        assert attribute_calls(signed, [call], range_start) == 0

    def test_day_index_range_skips_other_days(self, make_call) -> None:
        accumulators = build_accumulators(two_day_schema())

        matched = attribute_calls(
            accumulators,
            [make_call(at(RANGE_START, 60), 60)],
            datetime(2024, 5, 1, tzinfo=timezone.utc),
            day_index_range=(1, 1),
        )

        assert matched == 0
