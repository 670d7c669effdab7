"""
Exceptions raised by the analytics services.

The API layer maps NotFoundError to 404 and InvalidRangeError to 400. Storage
failures are not wrapped: asyncpg errors reach the caller unmodified.
"""


class AnalyticsError(Exception):
    """Base class for report errors the caller can act on."""


class NotFoundError(AnalyticsError):
    """A schema or goal id did not resolve for the tenant, or a schema has no days in the requested sub-range."""


class InvalidRangeError(AnalyticsError, ValueError):
    """A date range or day-index range is empty or inverted."""
