"""Tests for the cleanup scheduler."""

from datetime import timedelta

import pytest

from urlshort.core.config import settings
from urlshort.scheduler.scheduler import (
    CLEANUP_JOB_ID,
    SchedulerService,
    cleanup_expired_urls_job,
)
from tests.utils import create_test_url


class BrokenCleanupService:
    def cleanup_expired_urls(self):
        raise RuntimeError("sweep exploded")


@pytest.mark.scheduler
def test_cleanup_job_returns_deleted_count(url_repository, cleanup_service, clock):
    url_repository.create_short_url(create_test_url("expired", validity_minutes=1))
    clock.advance(minutes=2)

    assert cleanup_expired_urls_job(cleanup_service) == 1
    assert len(url_repository) == 0


@pytest.mark.scheduler
def test_cleanup_job_survives_errors():
    assert cleanup_expired_urls_job(BrokenCleanupService()) is None


@pytest.mark.scheduler
def test_status_before_start(cleanup_service):
    scheduler_service = SchedulerService(cleanup_service)

    assert scheduler_service.get_status() == {
        "running": False,
        "jobs": [],
        "scheduler_jobs_status": [],
    }


@pytest.mark.scheduler
@pytest.mark.asyncio
async def test_start_registers_cleanup_job(cleanup_service, monkeypatch):
    monkeypatch.setattr(settings, "CLEANUP_START_ON_STARTUP", False)
    scheduler_service = SchedulerService(cleanup_service)

    scheduler_service.start()
    try:
        job = scheduler_service.scheduler.get_job(CLEANUP_JOB_ID)
        assert job is not None
        assert job.trigger.interval == timedelta(minutes=5)

        status = scheduler_service.get_status()
        assert status["running"] is True
        assert status["jobs"][0]["id"] == CLEANUP_JOB_ID
        assert status["jobs"][0]["interval"] == "5 minutes"
        assert [job["job_id"] for job in status["scheduler_jobs_status"]] == [CLEANUP_JOB_ID]
    finally:
        scheduler_service.shutdown()

    assert scheduler_service.is_running is False
    assert scheduler_service.get_status()["running"] is False


@pytest.mark.scheduler
@pytest.mark.asyncio
async def test_start_twice_is_a_no_op(cleanup_service, monkeypatch):
    monkeypatch.setattr(settings, "CLEANUP_START_ON_STARTUP", False)
    scheduler_service = SchedulerService(cleanup_service)

    scheduler_service.start()
    scheduler = scheduler_service.scheduler
    scheduler_service.start()

    assert scheduler_service.scheduler is scheduler
    scheduler_service.shutdown()


@pytest.mark.scheduler
def test_shutdown_without_start(cleanup_service):
    scheduler_service = SchedulerService(cleanup_service)

    scheduler_service.shutdown()

    assert scheduler_service.is_running is False
