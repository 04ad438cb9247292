"""Tracing middleware recording a server span and HTTP metrics per request."""

import time
from typing import Dict, Union

from fastapi import Request
from opentelemetry.trace import SpanKind, Status, StatusCode
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.routing import Match

from urlshort.core.telemetry import get_meter, get_tracer

tracer = get_tracer("urlshort.middleware")
meter = get_meter("urlshort.middleware")

request_counter = meter.create_counter(
    name="urlshort.http.requests",
    description="Number of HTTP requests",
    unit="1",
)

request_duration = meter.create_histogram(
    name="urlshort.http.duration",
    description="Duration of HTTP requests",
    unit="ms",
)


def _route_template(request: Request) -> str:
    """Return the matched route path, e.g. ``/stats/{short_code}``.

    Short codes are unbounded, so raw paths never become metric labels.
    """
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", request.url.path)
    return "unmatched"


class TracingMiddleware(BaseHTTPMiddleware):
    """Server span, request counter and duration histogram for every request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.perf_counter()
        route = _route_template(request)

        attributes: Dict[str, Union[str, int]] = {
            "http.method": request.method,
            "http.route": route,
        }
        with tracer.start_as_current_span(
            f"{request.method} {route}",
            kind=SpanKind.SERVER,
            attributes={
                **attributes,
                "http.target": request.url.path,
                "http.user_agent": request.headers.get("user-agent", ""),
            },
        ) as span:
            response = await call_next(request)

            span.set_attribute("http.status_code", response.status_code)
            if response.status_code >= 500:
                span.set_status(Status(StatusCode.ERROR))

            attributes["http.status_code"] = response.status_code
            request_counter.add(1, attributes)
            request_duration.record((time.perf_counter() - start_time) * 1000, attributes)

        return response
