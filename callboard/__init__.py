"""
Callboard Analytics Backend Package.

FastAPI service layer for the call-center analytics dashboard. Serves
tenant-scoped reports built from dialer call records and funnel events:
daily activity, shift-block performance, call-duration distribution,
seed timeline heatmap, conversion funnel and goal consistency.

Subpackages:
    - api: FastAPI route handlers
    - core: Configuration, database, and dependencies
    - models: Pydantic schemas and enums
    - services: Analytics aggregation engine and storage adapters
    - sql: Parameterized SQL queries
"""

__version__ = "1.0.0"
