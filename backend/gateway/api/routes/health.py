"""Health & Readiness Probes: liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/live always returns 200 if the process is up
    - GET /health/ready returns 503 if the store does not answer PING
    - Both paths have two segments and never collide with a /{key} route
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from gateway.api.dependencies import get_store
from gateway.core.errors import GatewayError
from gateway.infrastructure.redis_store import StoreClient

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {"status": "healthy", "service": "rejson-gateway"}


@router.get("/ready")
async def readiness_check(store: StoreClient | None = Depends(get_store)):
    """Readiness probe, includes store connectivity."""
    store_ok = False
    if store is not None:
        try:
            store_ok = await store.ping()
        except GatewayError as e:
            logger.error(f"Store health check failed: {e}")
    if not store_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "store_unavailable"},
        )
    return {"status": "ready", "checks": {"store": "healthy"}}
