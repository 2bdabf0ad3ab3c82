"""
Health Check Endpoints
======================

Liveness and readiness probes for monitoring and Kubernetes.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from api.services.account_repository import ping
from config import Settings, get_settings
from exceptions import DatabaseUnavailableError


# Set up module logger
logger = logging.getLogger(__name__)

router = APIRouter()


class ReadinessResponse(BaseModel):
    """Kubernetes readiness probe response."""
    status: str = Field(description="Readiness status")
    message: str = Field(description="Status message")
    timestamp: str = Field(description="ISO 8601 timestamp")


class LivenessResponse(BaseModel):
    """Kubernetes liveness probe response."""
    status: str = Field(description="Liveness status")
    timestamp: str = Field(description="ISO 8601 timestamp")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    status_code=status.HTTP_200_OK,
    summary="Kubernetes readiness probe",
    description="""
    Checks that the MongoDB client is initialized and the server answers ping.

    Returns:
    - HTTP 200 if ready to serve traffic
    - HTTP 503 if the database is unavailable
    """
)
async def readiness_probe(
    settings: Settings = Depends(get_settings)
) -> ReadinessResponse:
    from api.main import app_state

    client = app_state.get("mongo_client")
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database client not initialized"
        )

    try:
        await ping(client, settings)
    except DatabaseUnavailableError as e:
        logger.warning(f"Readiness probe failed: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Not ready: {e.message}"
        )

    logger.debug("Readiness probe: READY")
    return ReadinessResponse(
        status="ready",
        message="Application is ready to serve traffic",
        timestamp=_now()
    )


@router.get(
    "/health/live",
    response_model=LivenessResponse,
    status_code=status.HTTP_200_OK,
    summary="Kubernetes liveness probe",
)
async def liveness_probe() -> LivenessResponse:
    """
    Check if the application process is alive.

    Does not check external dependencies - that's what readiness is for.
    """
    logger.debug("Liveness probe: ALIVE")
    return LivenessResponse(
        status="alive",
        timestamp=_now()
    )
