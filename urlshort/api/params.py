"""Common API parameter definitions.

This module provides reusable parameter definitions for FastAPI endpoints.
"""

from fastapi import Path, status

from urlshort.api.errors import APIError


def ShortCodeParam() -> str:
    """
    Common short code path parameter.

    Returns:
        A Path parameter with a description for the API docs
    """
    return Path(..., description="The short code of the URL")


def require_short_code(short_code: str) -> str:
    """
    Reject a blank short code before it reaches the service.

    Raises:
        APIError: 400 ``MISSING_SHORTCODE`` if the code is empty or blank
    """
    if not short_code or not short_code.strip():
        raise APIError(status.HTTP_400_BAD_REQUEST, "MISSING_SHORTCODE", "Shortcode is required")
    return short_code
