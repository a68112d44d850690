"""
Health check route.

PUBLIC endpoint (no authentication) for load balancers and deployment
checks. It does not touch the database.
"""

from fastapi import APIRouter

from invoicing.schemas.health import HealthResponse
from invoicing.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description=(
        "Public health check endpoint (no authentication required). "
        "Returns a simple status indicator for monitoring and load balancing."
    ),
    status_code=200,
)
async def health_check() -> HealthResponse:
    """Return {"status": "ok"} while the process is serving requests."""
    logger.debug("Health check endpoint called")

    return HealthResponse(status="ok")
