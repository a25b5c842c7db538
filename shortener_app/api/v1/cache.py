from fastapi import APIRouter, Depends, status

from shortener_app.dependencies import get_url_service
from shortener_app.schemas.url import CacheStats
from shortener_app.services.url_service import URLService

router = APIRouter(prefix="/cache", tags=["cache"])


@router.get("/stats", response_model=CacheStats)
async def cache_stats(url_service: URLService = Depends(get_url_service)):
    """Cache availability and backend statistics"""
    return await url_service.cache_stats()


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cache(url_service: URLService = Depends(get_url_service)):
    """Drop every cached entry; the database is untouched"""
    await url_service.clear_cache()
