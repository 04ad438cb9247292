"""Scheduler implementation for the URL shortener application.

This module provides a scheduler service that runs the periodic cleanup of
expired URLs using APScheduler.
"""

from typing import Any, Dict, List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from urlshort.core.config import settings
from urlshort.services.cleanup import CleanupService

CLEANUP_JOB_ID = "cleanup_expired_urls"


def cleanup_expired_urls_job(cleanup_service: CleanupService) -> Optional[int]:
    """
    Job to cleanup expired URLs.

    Failures are logged and swallowed so that a broken sweep never stops
    the next one from running.

    Returns:
        Number of URLs removed, or None if the sweep failed
    """
    logger.debug("Starting scheduled cleanup of expired URLs")
    try:
        deleted = cleanup_service.cleanup_expired_urls()
    except Exception as e:
        logger.opt(exception=True).error("Error in scheduled URL cleanup job", error=str(e))
        return None

    logger.debug("Scheduled cleanup completed", deleted=deleted)
    return deleted


class SchedulerService:
    """
    Scheduler service for managing background tasks.

    This service provides a wrapper around APScheduler to handle
    scheduling and execution of the URL cleanup sweep.
    """

    def __init__(self, cleanup_service: CleanupService):
        """Initialize the scheduler service."""
        self.cleanup_service = cleanup_service
        self.scheduler: Optional[AsyncIOScheduler] = None
        self.is_running = False
        self.jobs: List[Dict[str, Any]] = []

    def initialize(self) -> None:
        """
        Initialize the scheduler.

        This sets up the APScheduler with its job defaults,
        but does not start it yet.
        """
        if self.scheduler:
            logger.warning("Scheduler already initialized")
            return

        self.scheduler = AsyncIOScheduler(
            job_defaults={
                'coalesce': settings.SCHEDULER_JOB_COALESCE,
                'max_instances': settings.SCHEDULER_JOB_MAX_INSTANCES,
                'misfire_grace_time': settings.SCHEDULER_MISFIRE_GRACE_TIME
            },
            timezone='UTC',
        )
        logger.info("Scheduler initialized")

    def start(self) -> None:
        """
        Start the scheduler and register jobs.

        Must be called from within a running event loop.
        """
        if not self.scheduler:
            self.initialize()

        if self.is_running:
            logger.warning("Scheduler already running")
            return

        try:
            self.scheduler.add_job(
                cleanup_expired_urls_job,
                trigger=IntervalTrigger(
                    minutes=settings.CLEANUP_INTERVAL_MINUTES,
                    timezone='UTC'
                ),
                args=[self.cleanup_service],
                id=CLEANUP_JOB_ID,
                name='Cleanup Expired URLs',
                replace_existing=True
            )

            self.jobs = [{
                'id': CLEANUP_JOB_ID,
                'name': 'Cleanup Expired URLs',
                'interval': f'{settings.CLEANUP_INTERVAL_MINUTES} minutes',
                'function': 'cleanup_expired_urls_job'
            }]

            self.scheduler.start()
            self.is_running = True
            logger.info("Scheduler started", jobs=len(self.jobs))

            if settings.CLEANUP_START_ON_STARTUP:
                logger.info("Running cleanup job on startup")
                self.scheduler.add_job(
                    cleanup_expired_urls_job,
                    args=[self.cleanup_service],
                    id='cleanup_startup',
                    name='Startup Cleanup',
                    replace_existing=True
                )
        except Exception:
            logger.exception("Error starting scheduler")
            self.is_running = False
            raise

    def shutdown(self) -> None:
        """
        Shutdown the scheduler gracefully.
        """
        if not self.scheduler or not self.is_running:
            logger.warning("Scheduler not running, nothing to shut down")
            return

        self.scheduler.shutdown(wait=True)
        self.is_running = False
        self.scheduler = None
        logger.info("Scheduler shut down successfully")

    def get_status(self) -> Dict[str, Any]:
        """
        Get the current status of the scheduler.

        Returns:
            Dict with information about the scheduler status and jobs
        """
        job_details = []
        if self.scheduler and self.is_running:
            for job in self.scheduler.get_jobs():
                job_details.append({
                    'job_id': job.id,
                    'name': job.name,
                    'next_run_time': job.next_run_time.isoformat() if job.next_run_time else None
                })

        return {
            'running': self.is_running,
            'jobs': self.jobs,
            'scheduler_jobs_status': job_details
        }
