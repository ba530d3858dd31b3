"""
Service information, health and schema bootstrap endpoints.
"""

from fastapi import APIRouter, Depends, status
from datetime import datetime, timezone
from typing import Dict, Any
import logging

from property_service import database
from property_service.config import settings
from property_service.services.property import PropertyService
from property_service.utils.dependencies import get_property_service
from property_service.utils.exceptions import ServiceUnavailableError
from property_service.schemas.error import get_error_responses

logger = logging.getLogger(__name__)

router = APIRouter(tags=["System"])


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/")
async def root() -> Dict[str, Any]:
    """
    Root endpoint listing the service's endpoints.
    """
    return {
        "message": settings.app_name,
        "status": "running",
        "version": settings.app_version,
        "endpoints": {
            "health": "/health",
            "health-db": "/health/db",
            "setup-database": "/setup-database (GET)",
            "add-property": "/properties (POST)",
            "search-properties": "/properties (GET)",
            "get-property": "/properties/{id} (GET)",
            "property-stats": "/properties/stats (GET)",
            "test": "/test"
        }
    }


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    Liveness probe. Does not touch the store.
    """
    return {
        "status": "OK",
        "service": settings.service_name,
        "timestamp": _utc_timestamp(),
        "version": settings.app_version
    }


@router.get("/health/db", responses=get_error_responses(503))
async def database_health_check() -> Dict[str, Any]:
    """
    Readiness probe running ``SELECT 1`` against the store.

    Raises:
        ServiceUnavailableError: If the store is unreachable or not configured
    """
    db_healthy = await database.test_database_connection()

    if not db_healthy:
        logger.warning("Database health check failed")
        raise ServiceUnavailableError("Database connection failed")

    return {
        "status": "OK",
        "database": "connected",
        "timestamp": _utc_timestamp()
    }


@router.get("/test")
async def test_endpoint() -> Dict[str, Any]:
    """Configuration smoke check."""
    return {
        "message": "Property service test endpoint working!",
        "database": "Connected" if settings.database_configured else "Not configured",
        "port": settings.port
    }


@router.get(
    "/setup-database",
    status_code=status.HTTP_200_OK,
    summary="Create the properties table",
    description="Idempotently create the properties table and its duplicate-listing index.",
    responses=get_error_responses(500, 503)
)
async def setup_database(
    property_service: PropertyService = Depends(get_property_service)
) -> Dict[str, Any]:
    """
    Run the schema bootstrap. Safe to call repeatedly.

    Raises:
        SchemaSetupError: If the DDL fails
    """
    await property_service.setup_database()

    return {
        "message": "Properties table created successfully!",
        "table": "properties",
        "timestamp": _utc_timestamp()
    }
