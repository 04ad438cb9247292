"""Health check endpoint for monitoring application status."""

import time

from fastapi import APIRouter, Depends, status

from urlshort.api import schemas
from urlshort.api.dependencies import get_cleanup_service, get_scheduler_service
from urlshort.core.config import settings
from urlshort.scheduler.scheduler import SchedulerService
from urlshort.services.cleanup import CleanupService

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=schemas.HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Get system health status",
    response_description="Health status of the registry and the cleanup scheduler"
)
async def health_check(
    cleanup_service: CleanupService = Depends(get_cleanup_service),
    scheduler_service: SchedulerService = Depends(get_scheduler_service)
):
    """Report registry size, pending expired entries and scheduler state."""
    scheduler_status = scheduler_service.get_status()
    health_status = "healthy"
    if settings.SCHEDULER_ENABLED and not scheduler_status["running"]:
        health_status = "degraded"

    return schemas.HealthResponse(
        status=health_status,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT.value,
        timestamp=time.time(),
        registry=schemas.RegistryStatus(**cleanup_service.get_cleanup_stats()),
        scheduler=schemas.SchedulerStatus(**scheduler_status),
    )
