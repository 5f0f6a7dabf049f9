"""Health check endpoint."""

import sqlite3

import structlog
from fastapi import APIRouter, Depends

from hobbyu.db.database import Database
from hobbyu.web.deps import get_database
from hobbyu.web.schemas import HealthResponse

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(db: Database = Depends(get_database)) -> HealthResponse:
    """Report API status and whether the database answers."""
    try:
        with db.connect() as conn:
            conn.execute("SELECT 1").fetchone()
        database = "ok"
    except sqlite3.Error as e:
        logger.warning("health.database_unavailable", error=str(e))
        database = "unavailable"

    return HealthResponse(
        status="ok" if database == "ok" else "degraded",
        database=database,
    )
