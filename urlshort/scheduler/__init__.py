"""Scheduler module for the URL shortener application.

This module provides scheduled task functionality using APScheduler.
"""

from urlshort.scheduler.scheduler import SchedulerService, cleanup_expired_urls_job

__all__ = ["SchedulerService", "cleanup_expired_urls_job"]
