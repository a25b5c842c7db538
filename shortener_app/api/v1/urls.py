from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from shortener_app.config import Settings
from shortener_app.dependencies import get_settings, get_url_service
from shortener_app.exceptions import ShortIdNotFoundError, ShorteningFailedError, ValidationFailedError
from shortener_app.schemas.url import PopularLink, URLCreate, URLList, URLResponse
from shortener_app.services.url_service import URLService
from shortener_app.services.validators import validate_long_url

router = APIRouter(prefix="/urls", tags=["urls"])


@router.post("/", response_model=URLResponse, status_code=status.HTTP_201_CREATED)
async def create_short_url(
    url_data: URLCreate,
    request: Request,
    response: Response,
    url_service: URLService = Depends(get_url_service),
    settings: Settings = Depends(get_settings)
):
    """Create a short URL, or return the existing one for the same long URL"""
    try:
        long_url = validate_long_url(url_data.long_url)
    except ValidationFailedError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.reason)

    creator = request.client.host if request.client else None
    try:
        record, created = await url_service.create_or_get(long_url, creator_identity=creator)
    except ShorteningFailedError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create a short URL, please retry"
        )

    if not created:
        response.status_code = status.HTTP_200_OK
    return URLResponse.from_record(record, settings.base_url)


@router.get("/", response_model=URLList)
async def list_urls(
    url_service: URLService = Depends(get_url_service),
    settings: Settings = Depends(get_settings)
):
    """All short URLs, newest first"""
    records = await url_service.list_all()
    items = [URLResponse.from_record(record, settings.base_url) for record in records]
    return URLList(count=len(items), items=items)


@router.get("/popular", response_model=List[PopularLink])
async def popular_urls(
    limit: int = Query(10, ge=1, le=100),
    url_service: URLService = Depends(get_url_service)
):
    """Most visited links by approximate (cache) hit count"""
    return await url_service.popular_links(limit)


@router.get("/{short_id}", response_model=URLResponse)
async def get_url_info(
    short_id: str,
    url_service: URLService = Depends(get_url_service),
    settings: Settings = Depends(get_settings)
):
    """Information about a short URL, read from the database"""
    try:
        record = await url_service.get_link(short_id)
    except ShortIdNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found"
        )
    return URLResponse.from_record(record, settings.base_url)
