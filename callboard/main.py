"""
FastAPI application entry point for the Callboard API.

Configures logging and CORS, owns the database pool lifecycle and mounts the
data visualization router under /api/datavis.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from pydantic import ValidationError
from fastapi.middleware.cors import CORSMiddleware

from callboard import __version__
from callboard.api.datavis import router as datavis_router
from callboard.core.config import get_settings
from callboard.core.database import close_db, init_db

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for application startup and shutdown.

    On startup:
        - Apply LOG_LEVEL to the root logger
        - Initialize the database connection pool

    On shutdown:
        - Close the database connection pool
    """
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    logger.info("Callboard API starting")
    try:
        await init_db()
        logger.info("Database connection pool initialized")
    except Exception as e:
        # Endpoints report 500 until the database is reachable
        logger.error(f"Failed to initialize database: {e}")

    yield

    logger.info("Callboard API shutting down")
    try:
        await close_db()
        logger.info("Database connection pool closed")
    except Exception as e:
        logger.error(f"Error closing database pool: {e}")


app = FastAPI(
    title="Callboard API",
    version=__version__,
    description=(
        "Read-only analytics over call and funnel event data. "
        "Serves the daily activity, shift block, call duration, heatmap, "
        "funnel and goal consistency reports of the agent dashboard."
    ),
    lifespan=lifespan,
)


def _cors_origins() -> list:
    try:
        return get_settings().cors_origins
    except ValidationError as e:
        logger.warning(f"Settings unavailable, using default CORS origins: {e}")
        return ["http://localhost:3000", "http://127.0.0.1:3000"]


app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(datavis_router, prefix="/api/datavis", tags=["datavis"])


@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring and load balancer probes.

    Returns:
        Dict with status 'healthy'
    """
    return {"status": "healthy"}


@app.get("/")
async def root():
    """
    Root endpoint providing API information.

    Returns:
        Dict with API name and version
    """
    return {
        "name": "Callboard API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "callboard.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
