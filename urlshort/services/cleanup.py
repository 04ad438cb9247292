"""Cleanup service for the URL shortener application.

This module contains the CleanupService class which reaps expired URLs from
the registry. Resolution and stats enforce expiry on their own; the sweep
only bounds memory held by abandoned entries.
"""

import time
from typing import Any, Dict

from loguru import logger

from urlshort.core.telemetry import get_meter
from urlshort.models.url import Clock, utc_now
from urlshort.repositories.url_repository import URLRepository

meter = get_meter("urlshort.services.cleanup")

cleaned_urls_counter = meter.create_counter(
    name="urlshort.urls.cleaned",
    description="Number of expired URLs removed by the cleanup sweep",
    unit="1",
)


class CleanupService:
    """
    Service for cleanup operations in the URL shortener.
    """

    def __init__(self, url_repository: URLRepository, clock: Clock = utc_now):
        self.url_repository = url_repository
        self.clock = clock

    def cleanup_expired_urls(self) -> int:
        """
        Remove every URL that has expired by now.

        Returns:
            Number of URLs removed
        """
        now = self.clock()
        start_time = time.perf_counter()

        deleted_count = self.url_repository.delete_expired_urls(now)
        execution_time = time.perf_counter() - start_time

        if deleted_count > 0:
            cleaned_urls_counter.add(deleted_count)
            logger.info(
                "Cleaned up expired URLs",
                cleaned_count=deleted_count,
                execution_time=round(execution_time, 4),
                timestamp=now.isoformat(),
            )
        return deleted_count

    def get_cleanup_stats(self) -> Dict[str, Any]:
        """
        Get statistics about data that needs cleanup.

        Returns:
            Dict with the registry size and the number of expired entries
            still waiting for the sweep
        """
        now = self.clock()
        return {
            "total_urls": len(self.url_repository),
            "expired_urls": self.url_repository.count_expired_urls(now),
            "timestamp": now.isoformat(),
        }
