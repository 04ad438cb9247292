"""URL redirection endpoint with access counting."""

from fastapi import APIRouter, Depends, status
from loguru import logger
from starlette.responses import RedirectResponse

from urlshort.api import schemas
from urlshort.api.dependencies import get_shortener_service
from urlshort.api.params import ShortCodeParam, require_short_code
from urlshort.services.shortener import ShortenedURLService

router = APIRouter(tags=["redirect"])


@router.get(
    "/{short_code}",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
    responses={
        400: {"model": schemas.ErrorResponse, "description": "Missing short code"},
        404: {"model": schemas.ErrorResponse, "description": "URL not found"},
        410: {"model": schemas.ErrorResponse, "description": "URL has expired"},
    }
)
async def redirect_to_original_url(
    short_code: str = ShortCodeParam(),
    shortener_service: ShortenedURLService = Depends(get_shortener_service)
):
    """Redirect to the original URL, counting the access."""
    url = shortener_service.get_url_for_redirect(require_short_code(short_code))
    logger.info("Redirecting to original URL", short_code=short_code)
    return RedirectResponse(url=url.original_url, status_code=status.HTTP_302_FOUND)
