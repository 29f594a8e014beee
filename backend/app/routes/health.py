"""
Duet Backend — Health Check Route
===================================

What:  Liveness/readiness probe for Docker and load balancers.
How:   Runs `SELECT 1` on a pooled connection. The service reports
       `degraded` (still HTTP 200) when the database cannot be reached, so
       the probe itself never fails on a database outage.
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app import __version__
from app.database import engine
from app.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Reports service version, uptime and database connectivity.",
)
async def health_check() -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        db_status = "disconnected"
        overall = "degraded"
        logger.warning("Health check: database unreachable: %s", e)

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
