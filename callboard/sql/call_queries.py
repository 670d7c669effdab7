"""
Parameterized SQL for call and funnel event aggregation.

Tables are the ones written by the dialer webhook ingestion service:
    - "Call": id, "companyId", "agentId", "startAt", "durationSeconds"
    - "FunnelEvent": id, "type", "timestamp", "agentId", "callId"
    - "Agent": id, "companyId"

Timestamps are stored as UTC in ``timestamp`` columns, so DATE(...) yields the
UTC calendar day. Every query takes the tenant id as $1 and the inclusive
range bounds as $2 and $3.
"""


# Shared tenant and range predicate on "Call" aliased as c
CALL_RANGE_PREDICATE: str = (
    'c."companyId" = $1 AND c."startAt" >= $2 AND c."startAt" <= $3'
)


def get_calls_with_events_query() -> str:
    """
    Generate SQL listing the tenant's calls in range with their funnel events.

    One row per (call, event); calls without events appear once with NULL
    event columns. Rows are ordered so that a call's events are contiguous.

    Returns:
        str: Query taking ($1 company_id, $2 start, $3 end).
    """
    return f"""
    SELECT
        c.id AS call_id,
        c."companyId" AS company_id,
        c."agentId" AS agent_id,
        c."startAt" AS start_at,
        c."durationSeconds" AS duration_seconds,
        fe.id AS event_id,
        fe."type"::text AS event_type,
        fe."timestamp" AS event_timestamp,
        fe."agentId" AS event_agent_id
    FROM "Call" c
    LEFT JOIN "FunnelEvent" fe ON fe."callId" = c.id
    WHERE {CALL_RANGE_PREDICATE}
    ORDER BY c."startAt" ASC, c.id ASC, fe.id ASC
    """


def get_daily_call_sums_query() -> str:
    """
    Generate SQL summing call durations and counting calls per UTC day.

    Returns:
        str: Query taking ($1 company_id, $2 start, $3 end), ascending by day.
    """
    return f"""
    SELECT
        DATE(c."startAt") AS day,
        COALESCE(SUM(c."durationSeconds"), 0)::bigint AS duration_seconds,
        COUNT(c.id) AS calls
    FROM "Call" c
    WHERE {CALL_RANGE_PREDICATE}
    GROUP BY DATE(c."startAt")
    ORDER BY DATE(c."startAt") ASC
    """


def get_daily_event_counts_query(filter_by_type: bool = False) -> str:
    """
    Generate SQL counting funnel events per event day and type.

    Events are attributed to the tenant through their agent, and filtered on
    the event's own timestamp (which can differ slightly from the call start).

    Args:
        filter_by_type: Add a ``"type" = $4`` predicate.

    Returns:
        str: Query taking ($1 company_id, $2 start, $3 end[, $4 event_type]).
    """
    type_predicate = 'AND fe."type"::text = $4' if filter_by_type else ''

    return f"""
    SELECT
        DATE(fe."timestamp") AS day,
        fe."type"::text AS event_type,
        COUNT(fe.id) AS count
    FROM "FunnelEvent" fe
    JOIN "Agent" a ON fe."agentId" = a.id
    WHERE a."companyId" = $1
      AND fe."timestamp" >= $2
      AND fe."timestamp" <= $3
      {type_predicate}
    GROUP BY DATE(fe."timestamp"), fe."type"
    ORDER BY DATE(fe."timestamp") ASC, fe."type"::text ASC
    """


def get_call_event_counts_query() -> str:
    """
    Generate SQL counting events attached to calls, per call day and type.

    Unlike get_daily_event_counts_query this is anchored on the calls: an
    event counts on the day its call started, and only calls of the tenant in
    range contribute.

    Returns:
        str: Query taking ($1 company_id, $2 start, $3 end).
    """
    return f"""
    SELECT
        DATE(c."startAt") AS day,
        fe."type"::text AS event_type,
        COUNT(fe.id) AS count
    FROM "Call" c
    JOIN "FunnelEvent" fe ON fe."callId" = c.id
    WHERE {CALL_RANGE_PREDICATE}
    GROUP BY DATE(c."startAt"), fe."type"
    ORDER BY DATE(c."startAt") ASC, fe."type"::text ASC
    """


def get_call_durations_query() -> str:
    """
    Generate SQL listing the duration of every call in range.

    Returns:
        str: Query taking ($1 company_id, $2 start, $3 end).
    """
    return f"""
    SELECT c."durationSeconds" AS duration_seconds
    FROM "Call" c
    WHERE {CALL_RANGE_PREDICATE}
    """
