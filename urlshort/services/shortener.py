"""URL shortening service for the URL shortener application.

This module contains the ShortenedURLService class which implements business logic
for URL shortening, resolution, statistics and deletion on top of the in-memory
URL repository.
"""

import random
import re
from typing import Any, Dict, Optional

from loguru import logger
from pydantic import HttpUrl, TypeAdapter, ValidationError

from urlshort.core.config import settings
from urlshort.core.telemetry import get_meter
from urlshort.models.url import Clock, ShortURL, utc_now
from urlshort.repositories.base import (
    DuplicateEntityError,
    EntityExpiredError,
    EntityNotFoundError,
)
from urlshort.repositories.url_repository import URLRepository
from urlshort.services.exceptions import (
    CustomCodeAlreadyExistsError,
    CustomCodeValidationError,
    InvalidURLError,
    InvalidValidityError,
    ShortCodeGenerationError,
    URLExpiredError,
    URLNotFoundError,
)

_CODE_PATTERN = re.compile(r"[A-Za-z0-9]+")
_http_url_adapter = TypeAdapter(HttpUrl)

meter = get_meter("urlshort.services.shortener")

urls_created_counter = meter.create_counter(
    name="urlshort.urls.created",
    description="Number of URLs shortened",
    unit="1",
)

redirects_counter = meter.create_counter(
    name="urlshort.redirects",
    description="Number of successful short code resolutions",
    unit="1",
)


class ShortenedURLService:
    """
    Service for URL shortening business logic.

    This service handles short code generation, URL creation, resolution
    with lazy expiry enforcement, read-only statistics and deletion.
    """

    def __init__(self, url_repository: URLRepository, clock: Clock = utc_now):
        """
        Initialize the URL shortening service.

        Args:
            url_repository: Repository holding the URL registry
            clock: Callable returning the current aware UTC datetime
        """
        self.url_repository = url_repository
        self.clock = clock

    def create_short_url(
        self,
        original_url: str,
        custom_code: Optional[str] = None,
        validity_minutes: Optional[Any] = None
    ) -> ShortURL:
        """
        Create a shortened URL with an optional custom code.

        Args:
            original_url: The original URL to shorten
            custom_code: Optional caller-chosen short code
            validity_minutes: Lifetime in minutes, defaults to
                ``DEFAULT_VALIDITY_MINUTES``

        Returns:
            ShortURL: The created entry

        Raises:
            InvalidURLError: If the URL is not an absolute HTTP/HTTPS URL
            InvalidValidityError: If the validity is not a positive integer
            CustomCodeValidationError: If the custom code has the wrong shape
            CustomCodeAlreadyExistsError: If the custom code is already taken
            ShortCodeGenerationError: If no free code was found in time
        """
        logger.info(
            "Creating short URL",
            original_url=original_url,
            custom_code=custom_code,
            validity_minutes=validity_minutes,
        )

        self._validate_url(original_url)
        validity = self._validate_validity(validity_minutes)

        created_at = self.clock()
        try:
            expires_at = ShortURL.generate_expiration(created_at, validity)
        except OverflowError:
            raise InvalidValidityError(
                "Validity must be a positive integer representing minutes"
            )

        if custom_code is not None and custom_code != "":
            self._validate_custom_code(custom_code)
            url = ShortURL(
                short_code=custom_code,
                original_url=original_url,
                created_at=created_at,
                expires_at=expires_at,
                is_custom=True,
            )
            try:
                url = self.url_repository.create_short_url(url)
            except DuplicateEntityError:
                logger.warning("Shortcode already exists", short_code=custom_code)
                raise CustomCodeAlreadyExistsError("Shortcode already exists")
        else:
            url = self._create_with_generated_code(original_url, created_at, expires_at)

        urls_created_counter.add(1, {"custom": url.is_custom})
        logger.info(
            "Short URL created successfully",
            short_code=url.short_code,
            original_url=url.original_url,
            expires_at=url.expires_at.isoformat(),
        )
        return url

    def get_url_for_redirect(self, short_code: str) -> ShortURL:
        """
        Resolve a short code and count the access.

        An expired entry is evicted on the spot, so the next lookup of the
        same code reports it as missing.

        Args:
            short_code: The short code to resolve

        Returns:
            ShortURL: Snapshot of the entry after the increment

        Raises:
            URLNotFoundError: If no URL with this code exists
            URLExpiredError: If the URL had expired
        """
        try:
            url = self.url_repository.increment_access_count(short_code, self.clock())
        except EntityNotFoundError:
            logger.warning("Shortcode not found", short_code=short_code)
            raise URLNotFoundError("Shortcode not found")
        except EntityExpiredError:
            logger.warning("Shortcode expired and evicted", short_code=short_code)
            raise URLExpiredError("Shortened URL has expired")

        redirects_counter.add(1)
        logger.info(
            "Original URL retrieved successfully",
            short_code=short_code,
            access_count=url.access_count,
        )
        return url

    def get_url_stats(self, short_code: str) -> Dict[str, Any]:
        """
        Get statistics about a shortened URL.

        Read-only: an expired entry is reported with ``is_expired`` set and
        stays in place until the cleanup sweep removes it.

        Raises:
            URLNotFoundError: If no URL with this code exists
        """
        url = self.url_repository.get_by_short_code(short_code)
        if url is None:
            logger.warning("Shortcode not found for stats", short_code=short_code)
            raise URLNotFoundError("Shortcode not found")

        return {
            "short_code": url.short_code,
            "original_url": url.original_url,
            "created_at": url.created_at,
            "expires_at": url.expires_at,
            "access_count": url.access_count,
            "is_expired": url.is_expired(self.clock()),
            "is_custom": url.is_custom,
        }

    def delete_url(self, short_code: str) -> bool:
        """
        Delete a shortened URL by its code, expired or not.

        Raises:
            URLNotFoundError: If no URL with this code exists
        """
        if not self.url_repository.delete(short_code):
            logger.warning("Shortcode not found for deletion", short_code=short_code)
            raise URLNotFoundError("Shortcode not found")

        logger.info("Short URL deleted successfully", short_code=short_code)
        return True

    def _create_with_generated_code(self, original_url, created_at, expires_at) -> ShortURL:
        """
        Store the URL under a freshly generated code.

        Each candidate goes straight to the repository's atomic insert; a
        collision there counts as a failed attempt. The code grows by one
        character after every ``URL_CODE_ATTEMPTS_PER_LENGTH`` failures and
        generation gives up after ``URL_CODE_MAX_ATTEMPTS``.

        Raises:
            ShortCodeGenerationError: If every attempt collided
        """
        length = settings.URL_CODE_LENGTH
        for attempt in range(1, settings.URL_CODE_MAX_ATTEMPTS + 1):
            candidate = ShortURL(
                short_code=self._generate_short_code(length),
                original_url=original_url,
                created_at=created_at,
                expires_at=expires_at,
                is_custom=False,
            )
            try:
                return self.url_repository.create_short_url(candidate)
            except DuplicateEntityError:
                pass

            if attempt % settings.URL_CODE_ATTEMPTS_PER_LENGTH == 0:
                length += 1
                logger.debug("Increasing generated code length", length=length, attempts=attempt)

        logger.error("Shortcode generation failed", attempts=settings.URL_CODE_MAX_ATTEMPTS)
        raise ShortCodeGenerationError("Unable to generate unique shortcode")

    def _generate_short_code(self, length: int) -> str:
        """
        Generate a random short code of specified length.

        Args:
            length: Length of the code to generate

        Returns:
            str: A random code drawn uniformly from ``URL_CODE_CHARS``
        """
        chars = settings.URL_CODE_CHARS
        return ''.join(random.choice(chars) for _ in range(length))

    def _validate_url(self, url: Any) -> None:
        # HttpUrl strips surrounding whitespace, but the raw string is what gets stored
        valid = isinstance(url, str) and url == url.strip()
        if valid:
            try:
                _http_url_adapter.validate_python(url)
            except ValidationError:
                valid = False

        if not valid:
            logger.warning("Invalid URL provided", original_url=url)
            raise InvalidURLError("Invalid URL format. Must be a valid HTTP/HTTPS URL")

    def _validate_validity(self, validity: Any) -> int:
        if validity is None:
            return settings.DEFAULT_VALIDITY_MINUTES

        # JSON numbers carry no int/float distinction; accept 15.0 as 15
        if isinstance(validity, float) and validity.is_integer():
            validity = int(validity)

        if isinstance(validity, bool) or not isinstance(validity, int) or validity < 1:
            logger.warning("Invalid validity period", validity_minutes=validity)
            raise InvalidValidityError(
                "Validity must be a positive integer representing minutes"
            )
        return validity

    def _validate_custom_code(self, code: Any) -> None:
        if not isinstance(code, str):
            message = "Shortcode must be a non-empty string"
        elif not (settings.URL_CUSTOM_CODE_MIN_LENGTH <= len(code) <= settings.URL_CUSTOM_CODE_MAX_LENGTH):
            message = (
                f"Shortcode must be between {settings.URL_CUSTOM_CODE_MIN_LENGTH}-"
                f"{settings.URL_CUSTOM_CODE_MAX_LENGTH} characters"
            )
        elif not _CODE_PATTERN.fullmatch(code):
            message = "Shortcode must contain only alphanumeric characters"
        else:
            return

        logger.warning("Invalid custom shortcode", custom_code=code, error=message)
        raise CustomCodeValidationError(message)
