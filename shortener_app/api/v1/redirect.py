from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from shortener_app.dependencies import get_url_service
from shortener_app.exceptions import ShortIdNotFoundError
from shortener_app.services.url_service import URLService

router = APIRouter(tags=["redirect"])


@router.get("/{short_id}")
async def redirect_to_long_url(
    short_id: str,
    url_service: URLService = Depends(get_url_service)
):
    """
    Redirect to the original URL.

    Flow (optimized for latency):
    1. Resolve long_url, cache first
    2. Approximate hit counter bumped in the cache
    3. Durable hit increment runs in the background
    4. Redirect immediately (the user never waits for the DB write)
    """
    try:
        long_url = await url_service.resolve(short_id)
    except ShortIdNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found"
        )

    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)
