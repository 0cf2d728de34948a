"""
Health-check route.

Endpoints:
    GET /health: service status plus reachability of the upstream APIs
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from bridge.config import Configuration, get_configuration
from bridge.models.health import (
    HealthErrorResponse,
    HealthResponse,
    ServicesStatus,
)
from bridge.services.upstream import check_claude_api, check_monday_api

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_started_at = time.monotonic()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={500: {"model": HealthErrorResponse, "description": "Health check failed."}},
    summary="Health check",
)
async def health_check(
    configuration: Configuration = Depends(get_configuration),
) -> HealthResponse | JSONResponse:
    """Report region, environment and upstream reachability."""
    try:
        monday = await check_monday_api(configuration)
        claude = await check_claude_api(configuration)
    except Exception as exc:
        logger.exception("Health check failed")
        return JSONResponse(
            status_code=500,
            content=HealthErrorResponse(message=str(exc)).model_dump(),
        )

    return HealthResponse(
        region=configuration.region.value,
        environment=configuration.environment.value,
        services=ServicesStatus(monday=monday, claude=claude),
        uptime=round(time.monotonic() - _started_at, 3),
    )
