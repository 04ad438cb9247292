"""URL Repository for the URL shortener application.

This module provides the URLRepository class, the in-memory store behind the
URL registry. Every mutation happens under a single lock so that each
operation is atomic with respect to the others.
"""

import threading
from datetime import datetime
from typing import Dict, List, Optional

from urlshort.models.url import ShortURL
from urlshort.repositories.base import (
    DuplicateEntityError,
    EntityExpiredError,
    EntityNotFoundError,
)


class URLRepository:
    """
    Lock-guarded mapping from short code to ShortURL.

    Entries handed out by this repository are copies; the stored records
    can only be changed through the repository's own methods.
    """

    def __init__(self):
        self.model_type = ShortURL
        self._urls: Dict[str, ShortURL] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)

    def create_short_url(self, url: ShortURL) -> ShortURL:
        """
        Insert a new entry if its short code is free.

        The existence check and the insert happen in one locked step, so two
        concurrent callers can never both claim the same code.

        Args:
            url: The entry to store

        Returns:
            A copy of the stored entry

        Raises:
            DuplicateEntityError: If the short code is already present,
                expired or not
        """
        with self._lock:
            if url.short_code in self._urls:
                raise DuplicateEntityError(self.model_type, "short_code", url.short_code)
            stored = url.model_copy()
            self._urls[stored.short_code] = stored
            return stored.model_copy()

    def get_by_short_code(self, short_code: str) -> Optional[ShortURL]:
        """
        Find a URL by its short code without touching it.

        Args:
            short_code: The unique short code to look up

        Returns:
            A copy of the entry if present (expired or not), None otherwise
        """
        with self._lock:
            url = self._urls.get(short_code)
            return url.model_copy() if url is not None else None

    def increment_access_count(self, short_code: str, now: datetime) -> ShortURL:
        """
        Record a successful resolution of an unexpired entry.

        The expiry check and its consequence run under the lock: an expired
        entry is evicted, a live one has its counter incremented.

        Args:
            short_code: The short code being resolved
            now: Current time used for the expiry check

        Returns:
            A copy of the entry with the incremented counter

        Raises:
            EntityNotFoundError: If no entry has this code
            EntityExpiredError: If the entry had expired; it is removed
        """
        with self._lock:
            url = self._urls.get(short_code)
            if url is None:
                raise EntityNotFoundError(self.model_type, short_code)
            if url.is_expired(now):
                del self._urls[short_code]
                raise EntityExpiredError(self.model_type, short_code)
            url.access_count += 1
            return url.model_copy()

    def delete(self, short_code: str) -> bool:
        """
        Remove an entry regardless of its expiry.

        Returns:
            True if an entry was removed, False if none existed
        """
        with self._lock:
            return self._urls.pop(short_code, None) is not None

    def get_expired_short_codes(self, now: datetime) -> List[str]:
        """
        Snapshot the codes of entries expired at ``now``.

        Only the copy of the mapping is taken under the lock; expiry is
        checked on the snapshot. ``expires_at`` never changes after insert.
        """
        with self._lock:
            entries = list(self._urls.items())
        return [code for code, url in entries if url.is_expired(now)]

    def delete_if_expired(self, short_code: str, now: datetime) -> bool:
        """Remove a single entry if it is still present and expired at ``now``."""
        with self._lock:
            url = self._urls.get(short_code)
            if url is None or not url.is_expired(now):
                return False
            del self._urls[short_code]
            return True

    def delete_expired_urls(self, now: datetime) -> int:
        """
        Remove every entry expired at ``now``.

        Candidates are snapshotted first and then removed one at a time, so
        the lock is never held across the whole scan. An entry already gone
        by the time its turn comes (resolved, deleted) is not counted.

        Returns:
            Number of entries removed
        """
        deleted = 0
        for short_code in self.get_expired_short_codes(now):
            if self.delete_if_expired(short_code, now):
                deleted += 1
        return deleted

    def count_expired_urls(self, now: datetime) -> int:
        """Count entries that are expired but not yet reaped."""
        with self._lock:
            entries = list(self._urls.values())
        return sum(1 for url in entries if url.is_expired(now))
