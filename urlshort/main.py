"""Main application module.

This module builds the FastAPI application: it constructs the URL registry,
includes routes, and configures middleware, exception handlers and the
cleanup scheduler.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from urlshort.api import api_router
from urlshort.api.errors import ERROR_RESPONSES, PUBLIC_MESSAGES, APIError, error_body
from urlshort.core.config import settings
from urlshort.core.logging import setup_logging
from urlshort.core.telemetry import setup_telemetry
from urlshort.middleware.logging import REQUEST_ID_HEADER, LoggingMiddleware, get_request_id
from urlshort.middleware.tracing import TracingMiddleware
from urlshort.models.url import Clock, utc_now
from urlshort.repositories.url_repository import URLRepository
from urlshort.scheduler.scheduler import SchedulerService
from urlshort.services.cleanup import CleanupService
from urlshort.services.exceptions import ServiceError
from urlshort.services.shortener import ShortenedURLService


def _error_response(request: Request, status_code: int, message: str, code: str) -> JSONResponse:
    request_id = get_request_id(request)
    return JSONResponse(
        status_code=status_code,
        content=error_body(status_code, message, code, request_id),
        headers={REQUEST_ID_HEADER: request_id},
    )


async def service_exception_handler(request: Request, exc: ServiceError):
    """Map registry errors to responses by their kind."""
    status_code, code = ERROR_RESPONSES[exc.kind]
    if status_code >= 500:
        logger.error("Service error", kind=exc.kind.value, error=str(exc), path=request.url.path)
    message = PUBLIC_MESSAGES.get(exc.kind, str(exc))
    return _error_response(request, status_code, message, code)


async def api_exception_handler(request: Request, exc: APIError):
    return _error_response(request, exc.status_code, exc.message, exc.code)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        logger.warning("Route not found", method=request.method, path=request.url.path)
        return _error_response(
            request, exc.status_code, "The requested resource was not found", "ROUTE_NOT_FOUND"
        )
    return _error_response(request, exc.status_code, str(exc.detail), "HTTP_ERROR")


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies as client errors."""
    logger.warning("Request validation error", errors=str(exc.errors()))
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    return _error_response(request, status.HTTP_400_BAD_REQUEST, message, "VALIDATION_ERROR")


async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to catch and log all unhandled exceptions."""
    logger.opt(exception=exc).error(
        "Unhandled exception",
        request_id=get_request_id(request),
        method=request.method,
        url=str(request.url),
    )
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        str(exc) if settings.DEBUG else "An unexpected error occurred",
        "INTERNAL_ERROR",
    )


def create_app(clock: Optional[Clock] = None) -> FastAPI:
    """
    Build the application with its own URL registry.

    Args:
        clock: Source of the current time for every expiry decision,
            defaults to the system UTC clock

    Returns:
        FastAPI: The configured application
    """
    setup_logging()
    setup_telemetry()
    clock = clock or utc_now

    url_repository = URLRepository()
    cleanup_service = CleanupService(url_repository, clock=clock)
    scheduler_service = SchedulerService(cleanup_service)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
        logger.info(f"Environment: {settings.ENVIRONMENT.value}")
        if settings.SCHEDULER_ENABLED:
            try:
                scheduler_service.start()
            except Exception:
                logger.critical("Scheduler could not be started")
        else:
            logger.info("Scheduler is disabled in settings")

        yield

        logger.info(f"Shutting down {settings.APP_NAME}")
        if scheduler_service.is_running:
            scheduler_service.shutdown()

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    app.state.clock = clock
    app.state.url_repository = url_repository
    app.state.shortener_service = ShortenedURLService(url_repository, clock=clock)
    app.state.cleanup_service = cleanup_service
    app.state.scheduler_service = scheduler_service

    app.add_middleware(TracingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )
    # Outermost, so every log line and error body carries the request id
    app.add_middleware(LoggingMiddleware)

    app.include_router(api_router)

    app.add_exception_handler(ServiceError, service_exception_handler)
    app.add_exception_handler(APIError, api_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    return app


def run() -> None:
    """Run the service with uvicorn."""
    uvicorn.run(
        "urlshort.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    run()
