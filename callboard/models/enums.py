"""
Enumeration definitions for the Callboard backend.

EventType matches the ``"EventType"`` enum of the relational store shared with
the webhook ingestion service; the other enums are display vocabularies.

All enums inherit from both `str` and `Enum` so they serialize as plain strings
in Pydantic models and bind directly as asyncpg parameters.
"""

from enum import Enum


class EventType(str, Enum):
    """
    Funnel milestone recorded against a call.

    Funnel order: SEED -> CALLBACK -> LEAD -> SALE.
    """
    SEED = "SEED"
    CALLBACK = "CALLBACK"
    LEAD = "LEAD"
    SALE = "SALE"


class DurationRange(str, Enum):
    """
    Display labels of the call-duration histogram bins, in display order.

    Bin edges in seconds: [0, 60), [60, 180), [180, 300), [300, 600), [600, inf).
    """
    UNDER_1_MIN = "0-1 min"
    FROM_1_TO_3_MIN = "1-3 min"
    FROM_3_TO_5_MIN = "3-5 min"
    FROM_5_TO_10_MIN = "5-10 min"
    OVER_10_MIN = "10+ min"


class FunnelStage(str, Enum):
    """Display names of the conversion funnel stages, in funnel order."""
    SEEDS = "Seeds"
    CALLBACKS = "Callbacks"
    LEADS = "Leads"
    SALES = "Sales"
