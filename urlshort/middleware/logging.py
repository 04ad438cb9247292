"""
Request logging middleware for FastAPI using Loguru.

Assigns every request a correlation id, binds it into the Loguru context
for everything logged while the request is handled, echoes it in the
``X-Request-ID`` response header and writes one access line per request.
"""

import time
import uuid
from contextvars import ContextVar

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from urlshort.core.config import settings

REQUEST_ID_HEADER = "X-Request-ID"

# Context variable to store request ID across async context
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id(request: Request) -> str:
    """Return the correlation id assigned to ``request``, or ``"unknown"``."""
    return getattr(request.state, "request_id", None) or request_id_var.get() or "unknown"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Correlation id and access logging for every HTTP request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request_id_var.set(request_id)
        # Stored on the scope state so exception handlers outside this
        # middleware can still read it
        request.state.request_id = request_id

        client_ip = request.client.host if request.client else "unknown"
        if "X-Forwarded-For" in request.headers:
            forwarded_ips = request.headers["X-Forwarded-For"].split(",")
            if forwarded_ips:
                client_ip = forwarded_ips[0].strip()

        start_time = time.perf_counter()
        with logger.contextualize(request_id=request_id):
            if settings.REQUEST_LOGGING_ENABLED:
                logger.info(
                    "Incoming request",
                    method=request.method,
                    path=request.url.path,
                    client_ip=client_ip,
                    user_agent=request.headers.get("user-agent", ""),
                )

            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id

            if settings.REQUEST_LOGGING_ENABLED:
                process_time_ms = round((time.perf_counter() - start_time) * 1000, 2)
                logger.log(
                    "REQUEST",
                    "{method} {path} {status_code} {process_time_ms}ms",
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    process_time_ms=process_time_ms,
                    client_ip=client_ip,
                )

        return response
