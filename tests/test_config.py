"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from urlshort.core.config import EnvironmentType, Settings


def test_defaults():
    config = Settings(_env_file=None, ENVIRONMENT="development", BASE_URL="http://localhost:3000")

    assert config.ENVIRONMENT is EnvironmentType.DEVELOPMENT
    assert config.URL_CODE_LENGTH == 6
    assert config.URL_CODE_MAX_ATTEMPTS == 1000
    assert config.DEFAULT_VALIDITY_MINUTES == 30
    assert config.CLEANUP_INTERVAL_MINUTES == 5
    assert len(config.URL_CODE_CHARS) == 62


def test_cors_origins_comma_separated():
    config = Settings(_env_file=None, CORS_ORIGINS="https://a.com, https://b.com")

    assert config.CORS_ORIGINS == ["https://a.com", "https://b.com"]


def test_base_url_trailing_slash_stripped():
    config = Settings(_env_file=None, BASE_URL="https://sho.rt/")

    assert config.BASE_URL == "https://sho.rt"


@pytest.mark.parametrize("field", ["URL_CODE_LENGTH", "DEFAULT_VALIDITY_MINUTES", "CLEANUP_INTERVAL_MINUTES"])
def test_non_positive_values_rejected(field):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: 0})


def test_code_alphabet_must_be_alphanumeric():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, URL_CODE_CHARS="abc-")


def test_code_alphabet_must_be_ascii():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, URL_CODE_CHARS="abcé")
