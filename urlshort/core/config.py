"""Application configuration module.

This module contains settings for the URL shortener application,
loaded from environment variables with appropriate defaults.
"""

from __future__ import annotations

import string
from enum import Enum
from pathlib import Path
from typing import Any, List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

_ASCII_ALPHANUMERIC = frozenset(string.ascii_letters + string.digits)


class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Application settings loaded from environment variables with defaults.

    Settings are loaded from environment variables, with fallback to
    values in .env file if present, and finally to the default values
    specified here.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment setting
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT

    # App Information
    APP_NAME: str = "URL Shortener"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = "In-memory URL shortening service with expiring links"

    # Server
    HOST: str = "localhost"
    PORT: int = 3000
    BASE_URL: str = "http://localhost:3000"  # Used for generating short URLs
    DEBUG: bool = False

    # CORS settings
    CORS_ORIGINS: Union[List[str], str] = ["*"]

    # Shortcode generation
    URL_CODE_LENGTH: int = 6  # Starting length for generated codes
    URL_CODE_CHARS: str = string.ascii_letters + string.digits
    URL_CODE_MAX_ATTEMPTS: int = 1000  # Hard cap on generation attempts
    URL_CODE_ATTEMPTS_PER_LENGTH: int = 100  # Failed attempts before the length grows
    URL_CUSTOM_CODE_MIN_LENGTH: int = 3
    URL_CUSTOM_CODE_MAX_LENGTH: int = 20

    # Expiration
    DEFAULT_VALIDITY_MINUTES: int = 30

    # URL cleanup
    CLEANUP_INTERVAL_MINUTES: int = 5
    CLEANUP_START_ON_STARTUP: bool = False

    # Scheduler settings
    SCHEDULER_ENABLED: bool = True
    SCHEDULER_JOB_COALESCE: bool = True  # Combine multiple pending executions of a job into a single execution
    SCHEDULER_JOB_MAX_INSTANCES: int = 1
    SCHEDULER_MISFIRE_GRACE_TIME: int = 60  # Seconds to still run a misfired job

    # Logging configuration
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FILENAME: str = "app.log"
    LOG_FILE_ENABLED: bool = True
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "7 days"
    LOG_FORMAT: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[request_id]} | {message}"
    LOG_JSON: bool = True
    REQUEST_LOGGING_ENABLED: bool = True

    # OpenTelemetry configuration
    OTEL_ENABLED: bool = False
    OTEL_SERVICE_NAME: str = "url-shortener"
    OTEL_RESOURCE_ATTRIBUTES: str = "service.namespace=url-shortener"
    OTEL_EXPORTER_OTLP_ENDPOINT: str = "http://localhost:4317"
    OTEL_EXPORTER_OTLP_METRICS_ENDPOINT: str = "http://localhost:4317"
    OTEL_EXPORTER_OTLP_PROTOCOL: str = "grpc"  # grpc or http/protobuf
    OTEL_TRACES_SAMPLER: str = "parentbased_traceidratio"
    OTEL_TRACES_SAMPLER_ARG: float = 1.0
    OTEL_METRICS_EXPORT_INTERVAL_MILLIS: int = 60000

    @field_validator("CORS_ORIGINS", mode="before")
    def validate_list_or_string(cls, v: Union[List[str], str]) -> List[str]:
        """Convert comma-separated string to list if needed."""
        if isinstance(v, str):
            if not v.strip():
                return []
            if v == "*":
                return ["*"]
            return [item.strip() for item in v.split(",")]
        return v

    @field_validator("BASE_URL")
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator(
        "URL_CODE_LENGTH",
        "URL_CODE_MAX_ATTEMPTS",
        "URL_CODE_ATTEMPTS_PER_LENGTH",
        "DEFAULT_VALIDITY_MINUTES",
        "CLEANUP_INTERVAL_MINUTES",
    )
    def validate_positive(cls, v: Any) -> int:
        if v < 1:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("URL_CODE_CHARS")
    def validate_code_chars(cls, v: str) -> str:
        if not v or not set(v) <= _ASCII_ALPHANUMERIC:
            raise ValueError("URL_CODE_CHARS must be a non-empty ASCII alphanumeric alphabet")
        return v


# Create a singleton instance of the settings
settings = Settings()
