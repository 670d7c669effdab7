"""
Storage port consumed by the analytics aggregation engine.

The report builders never issue SQL themselves. They read through an
AnalyticsStore, which lets the same aggregation code run against PostgreSQL in
production (PostgresAnalyticsStore) and against plain Python lists in tests
(InMemoryAnalyticsStore).

Records defined here are read-only snapshots of rows owned by the webhook
ingestion service and the schema/goal management screens.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Protocol, Tuple

from callboard.models.enums import EventType
from callboard.services.temporal import DateRange


# =============================================================================
# Call and Funnel Event Records
# =============================================================================


@dataclass
class FunnelEventRecord:
    """A funnel milestone recorded by an agent against a call."""
    id: int
    event_type: EventType
    timestamp: datetime
    agent_id: int
    call_id: int


@dataclass
class CallRecord:
    """
    A dialed call with its nested funnel events.

    Attributes:
        id: Call identifier.
        company_id: Tenant owning the call.
        agent_id: Agent who handled the call.
        start_at: Talk start (UTC).
        duration_seconds: Talk time in seconds, never negative.
        events: Funnel events attached to the call.
    """
    id: int
    company_id: int
    agent_id: int
    start_at: datetime
    duration_seconds: int
    events: List[FunnelEventRecord] = field(default_factory=list)

    def count_events(self, event_type: EventType) -> int:
        return sum(1 for event in self.events if event.event_type == event_type)


# =============================================================================
# Shift Schema Records
# =============================================================================


@dataclass
class SchemaBlockRecord:
    """Half-open minute interval ``[start_minutes, end_minutes)`` of a schema day."""
    start_minutes: int
    end_minutes: int
    block_type: Optional[str] = None
    name: Optional[str] = None

    def contains(self, minute: int) -> bool:
        return self.start_minutes <= minute < self.end_minutes


@dataclass
class SchemaDayRecord:
    """Blocks defined for one zero-based day of the schema cycle."""
    day_index: int
    blocks: List[SchemaBlockRecord] = field(default_factory=list)


@dataclass
class ShiftSchemaRecord:
    """A tenant's named shift template."""
    id: int
    company_id: int
    name: str
    schema_type: Optional[str] = None
    days: List[SchemaDayRecord] = field(default_factory=list)


# =============================================================================
# Goal Records
# =============================================================================


@dataclass
class GoalTargets:
    """
    Daily targets of a temporal goal.

    A target of 0 means the metric is not part of the goal.
    """
    id: int
    company_id: int
    talk_time_minutes: float = 0
    seeds: int = 0
    callbacks: int = 0
    leads: int = 0
    sales: int = 0
    number_of_calls: int = 0
    number_of_long_calls: int = 0


# =============================================================================
# Grouped Rows
# =============================================================================


@dataclass
class DailyCallSums:
    """Calls of one UTC day: summed duration and count."""
    date: date
    duration_seconds: int
    calls: int


@dataclass
class DailyEventCount:
    """Number of events of one type on one UTC day."""
    date: date
    event_type: EventType
    count: int


# =============================================================================
# Port
# =============================================================================


class AnalyticsStore(Protocol):
    """
    Read-only queries the report builders depend on.

    Every method is scoped to one tenant and an inclusive DateRange. Errors
    raised by an implementation propagate to the caller unchanged.
    """

    async def list_calls_in_range(
        self,
        company_id: int,
        date_range: DateRange
    ) -> List[CallRecord]:
        """Calls started in range, each with all of its funnel events."""
        ...

    async def grouped_call_sums(
        self,
        company_id: int,
        date_range: DateRange
    ) -> List[DailyCallSums]:
        """Per-UTC-day duration sum and call count, ascending by day."""
        ...

    async def grouped_event_counts(
        self,
        company_id: int,
        date_range: DateRange,
        event_type: Optional[EventType] = None
    ) -> List[DailyEventCount]:
        """
        Events by the company's agents with a timestamp in range, counted per
        event day and type. Restricted to one type when event_type is given.
        """
        ...

    async def grouped_call_event_counts(
        self,
        company_id: int,
        date_range: DateRange
    ) -> List[DailyEventCount]:
        """Events attached to the company's calls in range, counted per call day and type."""
        ...

    async def list_call_durations(
        self,
        company_id: int,
        date_range: DateRange
    ) -> List[int]:
        """Duration in seconds of every call started in range."""
        ...

    async def get_schema(
        self,
        schema_id: int,
        day_index_range: Optional[Tuple[int, int]] = None
    ) -> Optional[ShiftSchemaRecord]:
        """
        Schema with days ordered by index and blocks by start minute.

        When day_index_range is given only days with an index inside the
        inclusive range are returned.
        """
        ...

    async def get_goal(self, goal_id: int) -> Optional[GoalTargets]:
        """Goal targets, or None when the id does not exist."""
        ...
