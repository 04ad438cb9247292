"""URL shortener data models.

This module defines the ShortURL model held by the in-memory URL registry.
"""
from datetime import datetime, timedelta, timezone
from typing import Callable

from pydantic import BaseModel, Field, model_validator

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class ShortURL(BaseModel):
    """
    A shortened URL record.

    Stores the mapping between a short code and the original URL, along with
    its creation and expiry timestamps and the number of successful
    resolutions. Entries are not guaranteed to be unexpired just because
    they are stored; use ``is_expired`` at read time.
    """

    short_code: str = Field(description="Unique code for the shortened URL")
    original_url: str = Field(description="The original (long) URL to redirect to")
    created_at: datetime = Field(
        default_factory=utc_now,
        description="Timestamp when this short URL was created"
    )
    expires_at: datetime = Field(description="When this short URL expires")
    access_count: int = Field(
        default=0,
        ge=0,
        description="Number of successful resolutions"
    )
    is_custom: bool = Field(
        default=False,
        description="Whether the short code was supplied by the caller"
    )

    @model_validator(mode="after")
    def check_expiry_after_creation(self) -> "ShortURL":
        if self.expires_at <= self.created_at:
            raise ValueError("expires_at must be later than created_at")
        return self

    @property
    def validity_minutes(self) -> int:
        """Lifetime of the entry in whole minutes."""
        return int((self.expires_at - self.created_at).total_seconds() // 60)

    def is_expired(self, now: datetime) -> bool:
        """Check if the short URL has expired at ``now``.

        An entry is still valid at the exact instant of ``expires_at``.
        """
        return now > self.expires_at

    @staticmethod
    def generate_expiration(created_at: datetime, validity_minutes: int) -> datetime:
        """Compute the expiry timestamp for an entry created at ``created_at``."""
        return created_at + timedelta(minutes=validity_minutes)
