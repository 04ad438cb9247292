"""Translation of service errors into HTTP responses.

Errors are classified by their ``ErrorKind``; the table below is the only
place that knows how each kind surfaces to clients.
"""

from http import HTTPStatus
from typing import Any, Dict, Tuple

from fastapi import status

from urlshort.services.exceptions import ErrorKind

ERROR_RESPONSES: Dict[ErrorKind, Tuple[int, str]] = {
    ErrorKind.INVALID_URL: (status.HTTP_400_BAD_REQUEST, "INVALID_URL"),
    ErrorKind.INVALID_VALIDITY: (status.HTTP_400_BAD_REQUEST, "INVALID_VALIDITY"),
    ErrorKind.INVALID_SHORTCODE: (status.HTTP_400_BAD_REQUEST, "INVALID_SHORTCODE"),
    ErrorKind.SHORTCODE_EXISTS: (status.HTTP_409_CONFLICT, "SHORTCODE_EXISTS"),
    ErrorKind.SHORTCODE_GENERATION_FAILED: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "SHORTCODE_GENERATION_FAILED",
    ),
    ErrorKind.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "SHORTCODE_NOT_FOUND"),
    ErrorKind.EXPIRED: (status.HTTP_410_GONE, "SHORTCODE_EXPIRED"),
}

# Client-facing messages for kinds whose service message is not meant for clients
PUBLIC_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.NOT_FOUND: "Shortened URL not found",
    ErrorKind.EXPIRED: "Shortened URL has expired",
}


class APIError(Exception):
    """Request-level error raised by the HTTP adapter itself."""

    def __init__(self, status_code: int, code: str, message: str):
        self.status_code = status_code
        self.code = code
        self.message = message
        super().__init__(message)


def error_body(status_code: int, message: str, code: str, request_id: str) -> Dict[str, Any]:
    """Build the structured error body shared by every error response."""
    return {
        "error": HTTPStatus(status_code).phrase,
        "message": message,
        "code": code,
        "requestId": request_id,
    }
