"""Core module for the URL shortener application."""

from urlshort.core.config import settings

__all__ = ["settings"]
