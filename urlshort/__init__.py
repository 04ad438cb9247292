"""In-memory URL shortening service with expiring links."""

__version__ = "1.0.0"
