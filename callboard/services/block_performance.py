"""
Schema-block mapper: attributes call activity to the blocks of a shift schema.

A shift schema defines, per zero-based day of its cycle, a list of half-open
minute intervals ``[start, end)``. Each call in the report range is placed on a
day index (days elapsed since the range start) and a wall-clock minute, and
its talk time, SEED and SALE events are added to the block containing it.

Two reports are built from the same mapper:

- block_performance: whole schema, day index from the absolute time difference,
  talk time rounded to whole minutes.
- block_performance_for_days: only schema days in [from_day_index,
  to_day_index], signed day index, talk time rounded to two decimals.

Matching rules:
    - A call matches a block when the day index equals the block's day and
      start_minutes <= minute < end_minutes.
    - Overlapping blocks: the block with the lowest start minute wins; equal
      starts fall back to declaration order.
    - Calls matching no block are dropped from the report without error.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Dict, List, Optional, Sequence, Tuple

from callboard.models.enums import EventType
from callboard.models.schemas import BlockPerformance
from callboard.services.errors import InvalidRangeError, NotFoundError
from callboard.services.numbers import round_half_up
from callboard.services.store import AnalyticsStore, CallRecord, ShiftSchemaRecord
from callboard.services.temporal import (
    DateRange,
    minutes_from_midnight,
    relative_day_index,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Accumulators
# =============================================================================


@dataclass
class BlockAccumulator:
    """Running totals for one (schema day, block) pair."""
    day_index: int
    start_minutes: int
    end_minutes: int
    block_name: Optional[str] = None
    talk_time: float = 0.0
    seeds: int = 0
    sales: int = 0

    def contains(self, minute: int) -> bool:
        return self.start_minutes <= minute < self.end_minutes

    def add_call(self, call: CallRecord) -> None:
        self.talk_time += call.duration_seconds / 60
        self.seeds += call.count_events(EventType.SEED)
        self.sales += call.count_events(EventType.SALE)


def build_accumulators(schema: ShiftSchemaRecord) -> List[BlockAccumulator]:
    """
    Create one zeroed accumulator per block, in report order.

    Report order is days ascending by index, then blocks ascending by start
    minute; ties keep the schema's declaration order.
    """
    accumulators = [
        BlockAccumulator(
            day_index=day.day_index,
            start_minutes=block.start_minutes,
            end_minutes=block.end_minutes,
            block_name=block.name,
        )
        for day in schema.days
        for block in day.blocks
    ]
    return sorted(accumulators, key=lambda a: (a.day_index, a.start_minutes))


def find_block(
    blocks_by_day: Dict[int, List[BlockAccumulator]],
    day_index: int,
    minute: int
) -> Optional[BlockAccumulator]:
    """Return the first block of ``day_index`` containing ``minute``, if any."""
    for block in blocks_by_day.get(day_index, []):
        if block.contains(minute):
            return block
    return None


def attribute_calls(
    accumulators: List[BlockAccumulator],
    calls: Sequence[CallRecord],
    range_start: datetime,
    tz: Optional[tzinfo] = None,
    absolute_day_index: bool = False,
    day_index_range: Optional[Tuple[int, int]] = None
) -> int:
    """
    Add each call to the block it falls into.

    Args:
        accumulators: Output of build_accumulators, updated in place.
        calls: Calls with their events.
        range_start: Start of the report range (day index 0).
        tz: Zone used for the call's wall-clock minute.
        absolute_day_index: Use the absolute time difference for the day index.
        day_index_range: Skip calls whose day index is outside this inclusive range.

    Returns:
        Number of calls attributed to a block.
    """
    blocks_by_day: Dict[int, List[BlockAccumulator]] = {}
    for accumulator in accumulators:
        blocks_by_day.setdefault(accumulator.day_index, []).append(accumulator)

    matched = 0
    for call in calls:
        day_index = relative_day_index(call.start_at, range_start, absolute=absolute_day_index)
        if day_index_range is not None:
            from_day_index, to_day_index = day_index_range
            if not from_day_index <= day_index <= to_day_index:
                continue

        minute = minutes_from_midnight(call.start_at, tz)
        block = find_block(blocks_by_day, day_index, minute)
        if block is not None:
            block.add_call(call)
            matched += 1

    return matched


async def _load_schema(
    store: AnalyticsStore,
    schema_id: int,
    company_id: int,
    day_index_range: Optional[Tuple[int, int]] = None
) -> ShiftSchemaRecord:
    schema = await store.get_schema(schema_id, day_index_range)

    # A schema of another tenant is reported exactly like a missing one
    if schema is None or schema.company_id != company_id:
        logger.warning(f"Schema {schema_id} not found for company_id={company_id}")
        raise NotFoundError(f"Schema {schema_id} not found")

    return schema


# =============================================================================
# Reports
# =============================================================================


async def block_performance(
    store: AnalyticsStore,
    company_id: int,
    date_range: DateRange,
    schema_id: int,
    tz: Optional[tzinfo] = None
) -> List[BlockPerformance]:
    """
    Attribute the range's calls to every block of a shift schema.

    Args:
        store: Storage collaborator.
        company_id: Tenant identifier.
        date_range: Inclusive report window; its start is day index 0.
        schema_id: Shift schema to map against.
        tz: Zone of the schema's wall-clock minutes (UTC when omitted).

    Returns:
        One BlockPerformance per (day, block) of the schema, talk time rounded
        to whole minutes.

    Raises:
        NotFoundError: If the schema does not exist for the tenant.
    """
    schema = await _load_schema(store, schema_id, company_id)
    calls = await store.list_calls_in_range(company_id, date_range)

    accumulators = build_accumulators(schema)
    matched = attribute_calls(
        accumulators,
        calls,
        date_range.start,
        tz=tz,
        absolute_day_index=True,
    )

    logger.info(
        f"Block performance for schema_id={schema_id}: "
        f"{matched}/{len(calls)} calls in {len(accumulators)} blocks"
    )
    return [
        _to_point(accumulator, round_half_up(accumulator.talk_time))
        for accumulator in accumulators
    ]


async def block_performance_for_days(
    store: AnalyticsStore,
    company_id: int,
    date_range: DateRange,
    schema_id: int,
    from_day_index: int,
    to_day_index: int,
    tz: Optional[tzinfo] = None
) -> List[BlockPerformance]:
    """
    Attribute calls to the blocks of a sub-range of schema days.

    Only schema days with ``from_day_index <= dayIndex <= to_day_index`` are
    reported, and only calls whose signed day index falls in that range are
    considered.

    Returns:
        One BlockPerformance per (day, block) in the sub-range, talk time
        rounded to two decimals.

    Raises:
        InvalidRangeError: If from_day_index is greater than to_day_index.
        NotFoundError: If the schema does not exist for the tenant or has no
            days in the sub-range.
    """
    if from_day_index > to_day_index:
        raise InvalidRangeError(
            f"fromDayIndex ({from_day_index}) cannot be greater than toDayIndex ({to_day_index})"
        )

    day_index_range = (from_day_index, to_day_index)
    schema = await _load_schema(store, schema_id, company_id, day_index_range)
    if not schema.days:
        logger.warning(
            f"Schema {schema_id} has no days in [{from_day_index}, {to_day_index}]"
        )
        raise NotFoundError("No schema days found for the specified range")

    calls = await store.list_calls_in_range(company_id, date_range)

    accumulators = build_accumulators(schema)
    matched = attribute_calls(
        accumulators,
        calls,
        date_range.start,
        tz=tz,
        day_index_range=day_index_range,
    )

    logger.info(
        f"Block performance for schema_id={schema_id} days "
        f"[{from_day_index}, {to_day_index}]: {matched}/{len(calls)} calls"
    )
    return [
        _to_point(accumulator, round_half_up(accumulator.talk_time, 2))
        for accumulator in accumulators
    ]


def _to_point(accumulator: BlockAccumulator, talk_time: float) -> BlockPerformance:
    return BlockPerformance(
        dayIndex=accumulator.day_index,
        startMinutes=accumulator.start_minutes,
        endMinutes=accumulator.end_minutes,
        blockName=accumulator.block_name,
        talkTime=talk_time,
        seeds=accumulator.seeds,
        sales=accumulator.sales,
    )
