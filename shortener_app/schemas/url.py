from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Any, Dict
from datetime import datetime


class ShortLinkRecord(BaseModel):
    """Plain copy of a durable short link row.

    Returned by the store, serialized into the cache and handed to the
    HTTP layer. from_attributes=True lets it read straight from the ORM model.
    """
    short_id: str
    long_url: str
    hits: int = Field(0, ge=0)
    created_at: datetime
    expires_at: Optional[datetime] = None
    created_by: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class URLCreate(BaseModel):
    long_url: str = Field(..., min_length=1, description="The original URL to be shortened")


class URLResponse(BaseModel):
    """Response schema for a short link"""
    short_id: str
    short_url: str
    long_url: str
    hits: int
    created_at: datetime

    @classmethod
    def from_record(cls, record: ShortLinkRecord, base_url: str) -> "URLResponse":
        """Build the response; short_url is derived from base_url and short_id"""
        return cls(
            short_id=record.short_id,
            short_url=f"{base_url.rstrip('/')}/{record.short_id}",
            long_url=record.long_url,
            hits=record.hits,
            created_at=record.created_at,
        )


class PopularLink(BaseModel):
    short_id: str
    hits: int


class CacheStats(BaseModel):
    connected: bool
    info: Optional[Dict[str, Any]] = None


class URLList(BaseModel):
    count: int
    items: List[URLResponse]
