"""API dependencies for FastAPI.

This module provides dependency injection functions giving endpoints access
to the URL registry services built once by the application factory.
"""

from fastapi import Request

from urlshort.core.config import settings
from urlshort.scheduler.scheduler import SchedulerService
from urlshort.services.cleanup import CleanupService
from urlshort.services.shortener import ShortenedURLService


async def get_shortener_service(request: Request) -> ShortenedURLService:
    """Get the application's URL shortening service."""
    return request.app.state.shortener_service


async def get_cleanup_service(request: Request) -> CleanupService:
    """Get the application's cleanup service."""
    return request.app.state.cleanup_service


async def get_scheduler_service(request: Request) -> SchedulerService:
    """Get the application's scheduler service."""
    return request.app.state.scheduler_service


def get_base_url():
    """Get the base URL for shortened links."""
    return settings.BASE_URL
