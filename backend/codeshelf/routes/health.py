"""
CodeShelf Backend — Health Check Route
========================================

What:  GET /api/health for monitoring and load balancer probes.
How:   Runs SELECT 1 against the engine and reports uptime and environment.

Status levels:
    - healthy:   database reachable
    - degraded:  database unreachable (still HTTP 200 so the probe itself
                 is distinguishable from a dead process)
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter
from sqlalchemy import text

from codeshelf import __version__
from codeshelf.config import settings
from codeshelf.schemas.snippet import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    from codeshelf.database import engine

    db_status = "connected"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "degraded"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        timestamp=datetime.now(timezone.utc),
        uptime=round(time.time() - _start_time, 2),
        environment=settings.environment,
        version=__version__,
        database=db_status,
    )
