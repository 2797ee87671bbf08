"""
Health Check Endpoints

Provides:
1. /health - Service status including the database check
2. /health/live - Simple liveness probe
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from database.async_engine import check_database_connection
from domain.value_objects import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health(request: Request):
    """Full health check; 503 when the database is unreachable."""
    state = request.app.state
    database_ok = await check_database_connection(state.engine)

    body = {
        "status": "healthy" if database_ok else "unhealthy",
        "version": state.settings.version,
        "environment": state.settings.environment,
        "timestamp": utcnow().isoformat() + "Z",
        "checks": {
            "database": "ok" if database_ok else "unavailable",
            "websocket": state.connection_manager.get_stats(),
        },
    }
    if not database_ok:
        logger.warning("Health check failed: database unavailable")
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body)
    return body


@router.get("/health/live")
async def liveness():
    return {"status": "alive"}
