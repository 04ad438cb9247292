"""Data models for the URL shortener application."""

from urlshort.models.url import Clock, ShortURL, utc_now

__all__ = ["Clock", "ShortURL", "utc_now"]
