from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from shortener_app.api.v1 import cache, redirect, urls
from shortener_app.cache.strategies import CacheStrategy
from shortener_app.config import Settings, settings as default_settings
from shortener_app.container import ServiceContainer
from shortener_app.logging_config import configure_logging
from shortener_app.middleware.logging import add_logging_middleware


def create_app(settings: Optional[Settings] = None, cache_backend: Optional[CacheStrategy] = None) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        settings: Settings to use; the environment-loaded ones by default
        cache_backend: Pre-built cache backend (tests inject failing or in-memory ones)
    """
    settings = settings or default_settings
    configure_logging(settings.log_level, settings.json_logs)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        container = ServiceContainer(settings, cache=cache_backend)
        await container.startup()
        app.state.container = container
        try:
            yield
        finally:
            await container.shutdown()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="A URL shortener service built with FastAPI",
        debug=settings.debug,
        lifespan=lifespan,
    )
    add_logging_middleware(app)

    @app.get("/")
    def read_root():
        """Root endpoint with API information"""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "endpoints": {
                "shorten": "POST /api/v1/urls/",
                "list": "GET /api/v1/urls/",
                "redirect": "GET /{short_id}",
                "cache_stats": "GET /cache/stats",
            },
            "docs": "/docs",
        }

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "environment": settings.environment}

    ######## Include routers (redirect last: it catches every other path)
    app.include_router(urls.router, prefix="/api/v1")
    app.include_router(cache.router)
    app.include_router(redirect.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=default_settings.host, port=default_settings.port)
