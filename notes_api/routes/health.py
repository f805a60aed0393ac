"""
Notes API — Health Check Route
===============================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Pings the note store and reports database connectivity and uptime.

Status levels:
    - healthy:   Database reachable (HTTP 200)
    - unhealthy: Database unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from notes_api import __version__
from notes_api.dependencies import get_note_store
from notes_api.exceptions import StoreUnavailableError
from notes_api.schemas.note import HealthResponse
from notes_api.services.note_store import NoteStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(store: NoteStore = Depends(get_note_store)):
    """
    Check that the note store answers a trivial query.

    Returns:
        HealthResponse with status 200 when the database answers, 503 otherwise.
    """
    try:
        await store.ping()
    except StoreUnavailableError as e:
        logger.warning("Health check: database unreachable: %s", e.context)
        body = HealthResponse(
            status="unhealthy",
            version=__version__,
            database="disconnected",
            uptime_seconds=round(time.time() - _start_time, 2),
        )
        return JSONResponse(status_code=503, content=body.model_dump())

    return HealthResponse(
        status="healthy",
        version=__version__,
        database="connected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
