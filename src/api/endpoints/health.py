"""
API Health Check Endpoint

Health check for the hotel-api service and its database.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from src.api.dependencies import get_database
from src.api.schemas import ErrorResponse, HealthResponse
from src.core.config import settings
from src.core.exceptions import DatabaseException
from src.core.logger import get_logger
from src.stores.database import Database

logger = get_logger(__name__)

router = APIRouter()


async def check_database_health(database: Database) -> Dict[str, Any]:
    """Check database connection health."""
    try:
        status = await run_in_threadpool(database.test_connection)
        return {"status": "healthy", "details": status}
    except DatabaseException as e:
        logger.warning("Database health check failed: %s", e.message)
        return {"status": "unhealthy", "error": e.message}


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="API Health Check",
    description="Check the overall health of the API and its database",
    tags=["health"],
    responses={
        200: {"model": HealthResponse, "description": "Health check results"},
        503: {"model": ErrorResponse, "description": "Service unavailable"},
    },
)
async def health_check(database: Database = Depends(get_database)) -> HealthResponse:
    """
    Health check endpoint for the API.

    Returns:
        HealthResponse: Overall health status and component details
    """
    components: Dict[str, Any] = {}
    overall_healthy = True

    if settings.health__check_database:
        db_health = await check_database_health(database)
        components["database"] = db_health
        if db_health["status"] == "unhealthy":
            overall_healthy = False

    components["api"] = {
        "status": "healthy",
        "version": settings.api__version,
        "environment": settings.environment,
    }

    return HealthResponse(
        status="healthy" if overall_healthy else "unhealthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.api__version,
        environment=settings.environment,
        components=components,
    )
