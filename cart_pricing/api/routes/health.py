"""Health Probe - liveness endpoint for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - The pricing authority is not probed: its outages surface per request as 503
"""

import logging

from fastapi import APIRouter, status

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "cart-pricing-api",
        "version": "1.0.0",
    }
