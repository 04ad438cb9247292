from fastapi import APIRouter, Depends, status
from loguru import logger

from urlshort.api import schemas
from urlshort.api.dependencies import get_base_url, get_shortener_service
from urlshort.api.errors import APIError
from urlshort.api.params import ShortCodeParam, require_short_code
from urlshort.services.shortener import ShortenedURLService

router = APIRouter(tags=["shortener"])


@router.post(
    "/shorten",
    response_model=schemas.URLCreateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": schemas.ErrorResponse, "description": "Invalid URL, validity or custom code"},
        409: {"model": schemas.ErrorResponse, "description": "Custom code already exists"},
        500: {"model": schemas.ErrorResponse, "description": "Short code generation failed"},
    }
)
async def create_short_url(
    url_data: schemas.URLCreateRequest,
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
    base_url: str = Depends(get_base_url)
):
    if not url_data.url:
        logger.warning("Missing URL in request")
        raise APIError(status.HTTP_400_BAD_REQUEST, "MISSING_URL", "URL is required")

    url = shortener_service.create_short_url(
        original_url=url_data.url,
        custom_code=url_data.shortcode,
        validity_minutes=url_data.validity
    )
    return schemas.URLCreateResponse(
        data=schemas.CreatedURL(
            shortcode=url.short_code,
            short_url=f"{base_url}/{url.short_code}",
            original_url=url.original_url,
            expires_at=url.expires_at,
            validity_minutes=url.validity_minutes,
        )
    )


@router.get(
    "/stats/{short_code}",
    response_model=schemas.URLStatsResponse,
    responses={
        400: {"model": schemas.ErrorResponse, "description": "Missing short code"},
        404: {"model": schemas.ErrorResponse, "description": "URL not found"}
    }
)
async def get_url_stats(
    short_code: str = ShortCodeParam(),
    shortener_service: ShortenedURLService = Depends(get_shortener_service)
):
    stats = shortener_service.get_url_stats(require_short_code(short_code))
    return schemas.URLStatsResponse(
        data=schemas.URLStats(
            shortcode=stats["short_code"],
            original_url=stats["original_url"],
            created_at=stats["created_at"],
            expires_at=stats["expires_at"],
            access_count=stats["access_count"],
            is_expired=stats["is_expired"],
            is_custom=stats["is_custom"],
        )
    )


@router.delete(
    "/{short_code}",
    response_model=schemas.DeleteResponse,
    responses={
        400: {"model": schemas.ErrorResponse, "description": "Missing short code"},
        404: {"model": schemas.ErrorResponse, "description": "URL not found"}
    }
)
async def delete_short_url(
    short_code: str = ShortCodeParam(),
    shortener_service: ShortenedURLService = Depends(get_shortener_service)
):
    shortener_service.delete_url(require_short_code(short_code))
    return schemas.DeleteResponse(message="Shortened URL deleted successfully")
