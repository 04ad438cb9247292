"""Routes package initialization.

This module exports the route collection for the application.
"""

from fastapi import APIRouter

from urlshort.api.routes import shortener, redirect, health

# Create root router
api_router = APIRouter()

# Health and shortener routes first: "/health" and "/stats/..." must win
# over the catch-all short code routes
api_router.include_router(health.router)
api_router.include_router(shortener.router)

# Redirect route at the root path, short URLs are served at /{short_code}
api_router.include_router(redirect.router)

__all__ = ["api_router"]
