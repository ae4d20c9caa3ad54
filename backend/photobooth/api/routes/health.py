"""Health & Readiness Probes — liveness, readiness and integration status endpoints.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if database is unreachable (readiness)
    - GET /health/integrations reports which vendors are configured, never their secrets

Design Decisions:
    - Separate liveness/readiness: liveness restarts the container,
      readiness removes it from the load balancer
    - Integrations are informational: a missing vendor never fails readiness,
      routes that need it answer 503 INTEGRATION_NOT_CONFIGURED instead
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from photobooth.api.dependencies import integration_status
from photobooth.config import Settings, get_settings
from photobooth.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "photobooth-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe — includes database connectivity."""
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}


@router.get("/integrations")
async def integrations_check(settings: Settings = Depends(get_settings)):
    """Which vendor integrations have credentials configured."""
    return {"integrations": integration_status(settings)}
