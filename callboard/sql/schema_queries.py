"""
Parameterized SQL for shift schemas and temporal goals.

Tables are maintained by the schema and goal management screens:
    - "Schema": id, "companyId", name, type
    - "SchemaDay": id, "schemaId", "dayIndex"
    - "SchemaBlock": id, "schemaDayId", "startMinutesFromMidnight",
      "endMinutesFromMidnight", "blockType", name
    - "TemporalGoals": id, "companyId", "talkTimeMinutes", seeds, callbacks,
      leads, sales, "numberOfCalls", "numberOfLongCalls"
"""


def get_schema_query() -> str:
    """
    Generate SQL fetching a schema header by id.

    Returns:
        str: Query taking ($1 schema_id).
    """
    return """
    SELECT
        s.id,
        s."companyId" AS company_id,
        s.name,
        s."type"::text AS schema_type
    FROM "Schema" s
    WHERE s.id = $1
    """


def get_schema_blocks_query(filter_by_day_index: bool = False) -> str:
    """
    Generate SQL listing a schema's days and their blocks.

    One row per block; a day without blocks appears once with NULL block
    columns. Days are ordered by index and blocks by start minute, then by
    creation order, which is the tie-break order used for overlapping blocks.

    Args:
        filter_by_day_index: Restrict days to ``"dayIndex" BETWEEN $2 AND $3``.

    Returns:
        str: Query taking ($1 schema_id[, $2 from_day_index, $3 to_day_index]).
    """
    day_predicate = 'AND d."dayIndex" BETWEEN $2 AND $3' if filter_by_day_index else ''

    return f"""
    SELECT
        d.id AS day_id,
        d."dayIndex" AS day_index,
        b.id AS block_id,
        b."startMinutesFromMidnight" AS start_minutes,
        b."endMinutesFromMidnight" AS end_minutes,
        b."blockType"::text AS block_type,
        b.name AS block_name
    FROM "SchemaDay" d
    LEFT JOIN "SchemaBlock" b ON b."schemaDayId" = d.id
    WHERE d."schemaId" = $1
      {day_predicate}
    ORDER BY d."dayIndex" ASC, b."startMinutesFromMidnight" ASC, b.id ASC
    """


def get_goal_query() -> str:
    """
    Generate SQL fetching the targets of a temporal goal.

    Returns:
        str: Query taking ($1 goal_id).
    """
    return """
    SELECT
        g.id,
        g."companyId" AS company_id,
        g."talkTimeMinutes" AS talk_time_minutes,
        g.seeds,
        g.callbacks,
        g.leads,
        g.sales,
        g."numberOfCalls" AS number_of_calls,
        g."numberOfLongCalls" AS number_of_long_calls
    FROM "TemporalGoals" g
    WHERE g.id = $1
    """
