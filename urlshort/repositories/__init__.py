"""Repository layer for the URL shortener application.

This module provides the in-memory store that backs the URL registry and
the exceptions it raises.
"""

from urlshort.repositories.base import (
    RepositoryError,
    EntityNotFoundError,
    EntityExpiredError,
    DuplicateEntityError
)
from urlshort.repositories.url_repository import URLRepository

__all__ = [
    "RepositoryError",
    "EntityNotFoundError",
    "EntityExpiredError",
    "DuplicateEntityError",
    "URLRepository",
]
