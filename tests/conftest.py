"""Test fixtures for the URL shortener application."""

import os

# Settings are read once at import time; configure the test environment first
os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_FILE_ENABLED"] = "false"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["OTEL_ENABLED"] = "false"
os.environ["BASE_URL"] = "http://sho.rt"

from typing import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from urlshort.main import create_app
from urlshort.repositories.url_repository import URLRepository
from urlshort.services.cleanup import CleanupService
from urlshort.services.shortener import ShortenedURLService
from tests.utils import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    """Return a clock frozen at a fixed instant."""
    return FakeClock()


@pytest.fixture
def url_repository() -> URLRepository:
    """Return an empty URL repository."""
    return URLRepository()


@pytest.fixture
def shortener_service(url_repository, clock) -> ShortenedURLService:
    return ShortenedURLService(url_repository, clock=clock)


@pytest.fixture
def cleanup_service(url_repository, clock) -> CleanupService:
    return CleanupService(url_repository, clock=clock)


@pytest.fixture
def test_app(clock) -> FastAPI:
    """Create an app with its own registry driven by the test clock."""
    return create_app(clock=clock)


@pytest.fixture
def client(test_app) -> Generator[TestClient, None, None]:
    """Return FastAPI TestClient instance."""
    with TestClient(test_app) as test_client:
        yield test_client
