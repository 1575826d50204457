"""
Custom middleware for CORS and request logging
"""

import logging
import time

from fastapi import Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.exceptions import general_exception_handler

logger = logging.getLogger(__name__)


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Add permissive CORS headers to every response.

    Any OPTIONS request is answered directly with an empty 200 response,
    whatever the path and whether or not it is a real preflight. Unhandled
    errors are turned into the 500 JSON answer here, so they carry the
    headers too.
    """

    def __init__(
        self,
        app,
        allow_origin: str = "*",
        allow_methods: list | None = None,
        allow_headers: list | None = None,
    ):
        super().__init__(app)
        self.headers = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Headers": ", ".join(allow_headers or ["Content-Type"]),
            "Access-Control-Allow-Methods": ", ".join(
                allow_methods or ["POST", "GET", "OPTIONS"]
            ),
        }

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            try:
                response = await call_next(request)
            except Exception as exc:
                response = await general_exception_handler(request, exc)

        for name, value in self.headers.items():
            response.headers[name] = value

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all requests for monitoring"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        # Log request
        client_host = request.client.host if request.client is not None else "unknown"
        logger.info(
            "Request: %s %s from %s", request.method, request.url.path, client_host
        )

        # Process request
        response = await call_next(request)

        # Log response
        process_time = time.time() - start_time
        logger.info("Response: %d in %.3fs", response.status_code, process_time)

        return response
