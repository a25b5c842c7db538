"""
Logging middleware for request/response logging.

Logs method, path, status code, processing time and client IP for
every request, and exposes the processing time as X-Process-Time.
"""

import time
import logging
from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("url_shortener.access")


class LoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        client_ip = self._get_client_ip(request)
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time = time.perf_counter() - start_time

        # Format: METHOD PATH STATUS_CODE PROCESS_TIME_MS CLIENT_IP
        logger.info(
            "%s %s %s %.2fms IP:%s",
            request.method, request.url.path, response.status_code,
            process_time * 1000, client_ip,
        )

        response.headers["X-Process-Time"] = f"{process_time:.6f}"
        return response

    @staticmethod
    def _get_client_ip(request: Request) -> str:
        """Client IP, honouring X-Forwarded-For from a proxy"""
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"


def add_logging_middleware(app: FastAPI) -> None:
    app.add_middleware(LoggingMiddleware)
