"""Test utilities for URL shortener tests."""

import random
import string
from datetime import datetime, timedelta, timezone
from typing import Optional

from urlshort.models.url import ShortURL

START_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def random_string(length: int = 10) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choice(string.ascii_letters + string.digits) for _ in range(length))


def random_url() -> str:
    """Generate a random URL for testing."""
    domain = f"{random_string(8)}.com"
    path = random_string(12)
    return f"https://{domain}/{path}"


class FakeClock:
    """Controllable clock; call it to read the time, ``advance`` to move it."""

    def __init__(self, start: datetime = START_TIME):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


def create_test_url(
    short_code: Optional[str] = None,
    original_url: Optional[str] = None,
    created_at: datetime = START_TIME,
    validity_minutes: int = 30,
    is_custom: bool = False,
    access_count: int = 0
) -> ShortURL:
    """Build a ShortURL with sensible defaults."""
    return ShortURL(
        short_code=short_code or random_string(6),
        original_url=original_url or random_url(),
        created_at=created_at,
        expires_at=created_at + timedelta(minutes=validity_minutes),
        is_custom=is_custom,
        access_count=access_count,
    )
