"""Exceptions for the URL shortener service layer.

Every concrete error carries an ``ErrorKind`` so the API layer can map
it to a response by kind rather than by inspecting the message.
"""

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_URL = "invalid_url"
    INVALID_VALIDITY = "invalid_validity"
    INVALID_SHORTCODE = "invalid_shortcode"
    SHORTCODE_EXISTS = "shortcode_exists"
    SHORTCODE_GENERATION_FAILED = "shortcode_generation_failed"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"


class ServiceError(Exception):
    """Base exception for all service-level errors."""
    kind: ErrorKind


class URLError(ServiceError):
    """Base exception for URL-related errors."""
    pass


class URLValidationError(URLError):
    """Input to a registry operation failed validation."""
    pass


class InvalidURLError(URLValidationError):
    """The URL is not an absolute HTTP/HTTPS URL."""
    kind = ErrorKind.INVALID_URL


class InvalidValidityError(URLValidationError):
    """The validity period is not a positive whole number of minutes."""
    kind = ErrorKind.INVALID_VALIDITY


class CustomCodeValidationError(URLValidationError):
    """The requested custom code doesn't meet the shape requirements."""
    kind = ErrorKind.INVALID_SHORTCODE


class URLCreationError(URLError):
    """Error occurred during URL creation."""
    pass


class CustomCodeAlreadyExistsError(URLCreationError):
    """The requested custom code is already in use."""
    kind = ErrorKind.SHORTCODE_EXISTS


class ShortCodeGenerationError(URLCreationError):
    """Failed to generate a unique short code."""
    kind = ErrorKind.SHORTCODE_GENERATION_FAILED


class URLNotFoundError(URLError):
    """URL with the specified short code was not found."""
    kind = ErrorKind.NOT_FOUND


class URLExpiredError(URLError):
    """URL has expired and is no longer valid."""
    kind = ErrorKind.EXPIRED
