"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from shopdesk import __version__
from shopdesk.application.dto.responses import ComponentHealthResponse, HealthResponse

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Database health check.

    Round-trips SQLite through the pool. Unhealthy until migrations have
    created the schema.
    """
    import aiosqlite

    from shopdesk.infrastructure.storage.sqlite import get_pool

    try:
        pool_status = await get_pool().status()
        db_status = ComponentHealthResponse(
            name="sqlite",
            healthy=pool_status.schema_version is not None,
            latency_ms=pool_status.latency_ms,
            error=None if pool_status.schema_version else "schema not migrated",
            schema_version=pool_status.schema_version,
            connections_open=pool_status.opened,
            connections_in_use=pool_status.in_use,
        )
    except (aiosqlite.Error, OSError) as e:
        db_status = ComponentHealthResponse(name="sqlite", healthy=False, error=str(e))

    return HealthResponse(
        status="healthy" if db_status.healthy else "unhealthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        database=db_status,
    )
