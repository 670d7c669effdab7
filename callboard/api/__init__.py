"""
API package for the Callboard FastAPI backend.

Routers:
- datavis: Dashboard report endpoints, mounted under /api/datavis

Usage:
    from callboard.api import datavis_router
    app.include_router(datavis_router, prefix="/api/datavis", tags=["datavis"])
"""

from callboard.api.datavis import router as datavis_router

__all__ = ['datavis_router']
