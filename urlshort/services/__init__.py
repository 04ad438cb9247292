"""Service layer for the URL shortener application.

This package contains service classes implementing the business logic of the application.
Services sit on top of the URL repository and raise domain-specific errors.
"""

from urlshort.services.shortener import ShortenedURLService
from urlshort.services.cleanup import CleanupService

__all__ = ["ShortenedURLService", "CleanupService"]
