"""HTTP middleware for the URL shortener application."""

from urlshort.middleware.logging import LoggingMiddleware, get_request_id, request_id_var
from urlshort.middleware.tracing import TracingMiddleware

__all__ = ["LoggingMiddleware", "TracingMiddleware", "get_request_id", "request_id_var"]
