"""API request and response schemas.

This module contains Pydantic models for API request validation
and response serialization. Field names are camelCase on the wire.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serializing snake_case fields as camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class URLCreateRequest(CamelModel):
    """Request schema for creating a shortened URL.

    ``shortcode`` and ``validity`` are left untyped so that values of the
    wrong type reach the service and are reported as an invalid shortcode
    or validity rather than a generic validation error.
    """
    url: Optional[str] = None
    shortcode: Optional[Any] = None
    validity: Optional[Any] = None


class CreatedURL(CamelModel):
    """Public view of a freshly created short URL."""
    shortcode: str
    short_url: str  # Full URL including base domain
    original_url: str
    expires_at: datetime
    validity_minutes: int


class URLCreateResponse(CamelModel):
    success: bool = True
    data: CreatedURL


class URLStats(CamelModel):
    """Read-only statistics projection of a short URL."""
    shortcode: str
    original_url: str
    created_at: datetime
    expires_at: datetime
    access_count: int
    is_expired: bool
    is_custom: bool


class URLStatsResponse(CamelModel):
    success: bool = True
    data: URLStats


class DeleteResponse(CamelModel):
    success: bool = True
    message: str


class ErrorResponse(CamelModel):
    """Structured error body returned for every failed request."""
    error: str  # HTTP reason phrase
    message: str
    code: str  # Machine-readable error code
    request_id: str


class JobStatus(CamelModel):
    id: str
    name: str
    interval: str
    function: str


class SchedulerStatus(CamelModel):
    running: bool
    jobs: List[JobStatus]
    scheduler_jobs_status: List[Dict[str, Optional[str]]]


class RegistryStatus(CamelModel):
    total_urls: int
    expired_urls: int
    timestamp: str


class HealthResponse(CamelModel):
    status: str
    version: str
    environment: str
    timestamp: float
    registry: RegistryStatus
    scheduler: SchedulerStatus
