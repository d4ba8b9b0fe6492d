"""
Health check endpoints.
"""

import time

from fastapi import APIRouter, Depends

from billdesk import __version__
from billdesk.api.dependencies import get_sess_store
from billdesk.application.dto.responses import HealthResponse
from billdesk.config import get_settings
from billdesk.core.interfaces import ISessionStore

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check(
    store: ISessionStore = Depends(get_sess_store),
) -> HealthResponse:
    """
    Basic health check.

    Returns service status, uptime and the number of open billing sessions.
    """
    sessions = await store.list_sessions()
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        environment=get_settings().environment,
        open_sessions=len(sessions),
    )


# Unprefixed liveness check for container orchestrators
root_router = APIRouter(tags=["health"])


@root_router.get("/health")
async def liveness() -> dict[str, str]:
    return {"status": "healthy", "version": __version__}
