"""Tests for the URL shortening service."""

import string
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from urlshort.core.config import settings
from urlshort.services.exceptions import (
    CustomCodeAlreadyExistsError,
    CustomCodeValidationError,
    ErrorKind,
    InvalidURLError,
    InvalidValidityError,
    ShortCodeGenerationError,
    URLExpiredError,
    URLNotFoundError,
)
from urlshort.services.shortener import ShortenedURLService
from tests.utils import random_url

ALPHANUMERIC = set(string.ascii_letters + string.digits)


@pytest.mark.service
class TestCreateShortURL:

    def test_generated_code(self, shortener_service, clock):
        url = shortener_service.create_short_url("https://example.com/some/long/path")

        assert len(url.short_code) >= 6
        assert set(url.short_code) <= ALPHANUMERIC
        assert url.original_url == "https://example.com/some/long/path"
        assert url.is_custom is False
        assert url.access_count == 0
        assert url.created_at == clock.now

    def test_default_validity(self, shortener_service):
        url = shortener_service.create_short_url(random_url())

        assert url.validity_minutes == 30
        assert url.expires_at == url.created_at + timedelta(minutes=30)

    def test_custom_validity(self, shortener_service):
        url = shortener_service.create_short_url(random_url(), validity_minutes=15)

        assert url.expires_at == url.created_at + timedelta(minutes=15)
        assert url.validity_minutes == 15

    def test_integral_float_validity_accepted(self, shortener_service):
        url = shortener_service.create_short_url(random_url(), validity_minutes=15.0)

        assert url.validity_minutes == 15

    @pytest.mark.parametrize("validity", [0, -1, 1.5, "15", True, [15]])
    def test_invalid_validity(self, shortener_service, validity):
        with pytest.raises(InvalidValidityError) as exc_info:
            shortener_service.create_short_url(random_url(), validity_minutes=validity)

        assert exc_info.value.kind is ErrorKind.INVALID_VALIDITY

    def test_validity_beyond_calendar_rejected(self, shortener_service):
        with pytest.raises(InvalidValidityError):
            shortener_service.create_short_url(random_url(), validity_minutes=10 ** 12)

    @pytest.mark.parametrize(
        "bad_url",
        [
            "not-a-url",
            "ftp://example.com/file",
            "example.com",
            "",
            None,
            12345,
            "  https://example.com/x",
            "https://example.com/x\n",
        ],
    )
    def test_invalid_url(self, shortener_service, bad_url):
        with pytest.raises(InvalidURLError):
            shortener_service.create_short_url(bad_url)

    def test_original_url_stored_verbatim(self, shortener_service):
        url = shortener_service.create_short_url("https://Example.com")

        assert url.original_url == "https://Example.com"

    def test_custom_code(self, shortener_service):
        url = shortener_service.create_short_url(random_url(), custom_code="validCode")

        assert url.short_code == "validCode"
        assert url.is_custom is True

    @pytest.mark.parametrize(
        "custom_code, message",
        [
            ("ab", "between 3-20 characters"),
            ("a" * 21, "between 3-20 characters"),
            ("abc$%", "only alphanumeric"),
            ("abc-def", "only alphanumeric"),
            ("abc\n", "only alphanumeric"),
            ("cafés", "only alphanumeric"),
        ],
    )
    def test_invalid_custom_code(self, shortener_service, custom_code, message):
        with pytest.raises(CustomCodeValidationError) as exc_info:
            shortener_service.create_short_url(random_url(), custom_code=custom_code)

        assert message in str(exc_info.value)

    @pytest.mark.parametrize("custom_code", [12345, ["abc"], False])
    def test_non_string_custom_code(self, shortener_service, custom_code):
        with pytest.raises(CustomCodeValidationError) as exc_info:
            shortener_service.create_short_url(random_url(), custom_code=custom_code)

        assert exc_info.value.kind is ErrorKind.INVALID_SHORTCODE
        assert len(shortener_service.url_repository) == 0

    def test_custom_code_length_bounds_accepted(self, shortener_service):
        assert shortener_service.create_short_url(random_url(), custom_code="abc").short_code == "abc"
        assert shortener_service.create_short_url(random_url(), custom_code="A" * 20).short_code == "A" * 20

    def test_duplicate_custom_code(self, shortener_service):
        shortener_service.create_short_url(random_url(), custom_code="validCode")

        with pytest.raises(CustomCodeAlreadyExistsError):
            shortener_service.create_short_url(random_url(), custom_code="validCode")

    def test_expired_custom_code_blocks_until_reaped(self, shortener_service, cleanup_service, clock):
        shortener_service.create_short_url(random_url(), custom_code="reuseMe", validity_minutes=1)
        clock.advance(minutes=5)

        with pytest.raises(CustomCodeAlreadyExistsError):
            shortener_service.create_short_url(random_url(), custom_code="reuseMe")

        assert cleanup_service.cleanup_expired_urls() == 1
        url = shortener_service.create_short_url(random_url(), custom_code="reuseMe")
        assert url.access_count == 0

    def test_empty_custom_code_generates(self, shortener_service):
        url = shortener_service.create_short_url(random_url(), custom_code="")

        assert url.is_custom is False
        assert len(url.short_code) == settings.URL_CODE_LENGTH


@pytest.mark.service
class TestShortCodeGeneration:

    def test_collision_is_retried(self, shortener_service, monkeypatch):
        shortener_service.create_short_url(random_url(), custom_code="taken1")
        candidates = iter(["taken1", "taken1", "fresh1"])
        monkeypatch.setattr(shortener_service, "_generate_short_code", lambda length: next(candidates))

        url = shortener_service.create_short_url(random_url())

        assert url.short_code == "fresh1"

    def test_length_grows_and_attempts_are_capped(self, shortener_service, monkeypatch):
        shortener_service.create_short_url(random_url(), custom_code="taken1")
        lengths = []

        def always_taken(length):
            lengths.append(length)
            return "taken1"

        monkeypatch.setattr(shortener_service, "_generate_short_code", always_taken)

        with pytest.raises(ShortCodeGenerationError) as exc_info:
            shortener_service.create_short_url(random_url())

        assert exc_info.value.kind is ErrorKind.SHORTCODE_GENERATION_FAILED
        assert len(lengths) == 1000
        assert set(lengths[:100]) == {6}
        assert set(lengths[100:200]) == {7}
        assert lengths[-1] == 15
        assert len(shortener_service.url_repository) == 1

    def test_generate_short_code_alphabet(self, shortener_service):
        code = shortener_service._generate_short_code(12)

        assert len(code) == 12
        assert set(code) <= ALPHANUMERIC

    def test_concurrent_creates_are_unique(self, url_repository, clock, monkeypatch):
        # A tiny alphabet forces constant collisions between the workers
        monkeypatch.setattr(settings, "URL_CODE_CHARS", "ab")
        service = ShortenedURLService(url_repository, clock=clock)

        with ThreadPoolExecutor(max_workers=8) as executor:
            urls = list(executor.map(lambda _: service.create_short_url(random_url()), range(100)))

        codes = [url.short_code for url in urls]
        assert len(set(codes)) == 100
        assert len(url_repository) == 100


@pytest.mark.service
class TestResolveStatsDelete:

    def test_resolve_increments_access_count(self, shortener_service):
        created = shortener_service.create_short_url("https://example.com/target")

        first = shortener_service.get_url_for_redirect(created.short_code)
        second = shortener_service.get_url_for_redirect(created.short_code)

        assert first.original_url == "https://example.com/target"
        assert first.access_count == 1
        assert second.access_count == 2

    def test_resolve_missing(self, shortener_service):
        with pytest.raises(URLNotFoundError) as exc_info:
            shortener_service.get_url_for_redirect("nothere")

        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    def test_resolve_expired_then_not_found(self, shortener_service, clock):
        created = shortener_service.create_short_url(random_url(), validity_minutes=10)
        clock.advance(minutes=10, seconds=1)

        with pytest.raises(URLExpiredError) as exc_info:
            shortener_service.get_url_for_redirect(created.short_code)
        assert exc_info.value.kind is ErrorKind.EXPIRED

        with pytest.raises(URLNotFoundError):
            shortener_service.get_url_for_redirect(created.short_code)

    def test_stats(self, shortener_service, clock):
        created = shortener_service.create_short_url(random_url(), custom_code="statsCode")
        shortener_service.get_url_for_redirect("statsCode")

        stats = shortener_service.get_url_stats("statsCode")

        assert stats == {
            "short_code": "statsCode",
            "original_url": created.original_url,
            "created_at": clock.now,
            "expires_at": clock.now + timedelta(minutes=30),
            "access_count": 1,
            "is_expired": False,
            "is_custom": True,
        }

    def test_stats_does_not_count_access(self, shortener_service):
        created = shortener_service.create_short_url(random_url())

        shortener_service.get_url_stats(created.short_code)
        shortener_service.get_url_stats(created.short_code)

        assert shortener_service.get_url_stats(created.short_code)["access_count"] == 0

    def test_stats_after_expiry_until_cleanup(self, shortener_service, cleanup_service, clock):
        created = shortener_service.create_short_url(random_url(), validity_minutes=5)
        shortener_service.get_url_for_redirect(created.short_code)
        clock.advance(minutes=6)

        stats = shortener_service.get_url_stats(created.short_code)
        assert stats["is_expired"] is True
        assert stats["access_count"] == 1

        cleanup_service.cleanup_expired_urls()

        with pytest.raises(URLNotFoundError):
            shortener_service.get_url_stats(created.short_code)

    def test_stats_missing(self, shortener_service):
        with pytest.raises(URLNotFoundError):
            shortener_service.get_url_stats("nothere")

    def test_delete_once(self, shortener_service):
        created = shortener_service.create_short_url(random_url())

        assert shortener_service.delete_url(created.short_code) is True

        with pytest.raises(URLNotFoundError):
            shortener_service.delete_url(created.short_code)

    def test_delete_expired_entry(self, shortener_service, clock):
        created = shortener_service.create_short_url(random_url(), validity_minutes=1)
        clock.advance(hours=1)

        assert shortener_service.delete_url(created.short_code) is True
