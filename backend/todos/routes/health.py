"""
Todos Backend — Health Check Route
==================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Reports which storage backend is active and, for the SQL backend,
       whether the database answers `SELECT 1`.

Status levels:
    - healthy:   storage reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from todos import __version__
from todos.database import check_connection
from todos.repositories import TodoSQLRepository
from todos.schemas.todo import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request):
    repository = request.app.state.repository
    backend = "memory"
    db_status = "not_used"
    overall = "healthy"

    if isinstance(repository, TodoSQLRepository):
        backend = "sql"
        db_status = "connected"
        try:
            await check_connection(repository.engine)
        except Exception as e:
            db_status = "disconnected"
            overall = "unhealthy"
            logger.warning("Health check: database unreachable: %s", str(e))

    health = HealthResponse(
        status=overall,
        version=__version__,
        backend=backend,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(
        status_code=200 if overall == "healthy" else 503,
        content=health.model_dump(),
    )
