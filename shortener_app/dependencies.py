"""
FastAPI dependencies for dependency injection.

Components are built once by the ServiceContainer during app startup
and handed to routes from app.state, never looked up as globals.
"""

from fastapi import Request

from shortener_app.config import Settings
from shortener_app.container import ServiceContainer
from shortener_app.services.url_service import URLService


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_url_service(request: Request) -> URLService:
    """
    Get URLService with all dependencies injected.

    Controller depends on service; service depends on infrastructure
    (store, cache, hit tracker).
    """
    return get_container(request).url_service


def get_settings(request: Request) -> Settings:
    return get_container(request).settings
