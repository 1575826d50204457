import os
import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
import uvicorn
from contextlib import asynccontextmanager

from app.application.interfaces import ISearchAdapters
from app.core.config import settings
from app.core.exceptions import (
    BatchValidationError,
    batch_validation_exception_handler,
    validation_exception_handler,
)
from app.core.middleware import CORSHeadersMiddleware, RequestLoggingMiddleware
from app.infrastructure.adapters.bundles.search import get_search_adapter_bundle
from app.presentation.api.v1.routers import batch
from app.presentation.api.v1.routers import health


def configure_logging() -> None:
    """Log to console and, when configured, to a rotating file"""
    log_handlers = [logging.StreamHandler()]
    if settings.log_file:
        log_dir = os.path.dirname(settings.log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        log_handlers.append(
            RotatingFileHandler(
                settings.log_file,
                maxBytes=5 * 1024 * 1024,
                backupCount=2,
                encoding="utf-8",
            )
        )
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format=settings.log_format,
        datefmt=settings.log_date_format,
        handlers=log_handlers,
    )


configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    logger.info("Starting Image Batch Search API...")
    if getattr(app.state, "search_adapters", None) is None:
        # Missing credentials raise ConfigurationError here and abort startup
        app.state.search_adapters = get_search_adapter_bundle()
    yield
    logger.info("Shutting down Image Batch Search API...")


def create_application(adapters: Optional[ISearchAdapters] = None) -> FastAPI:
    """Create and configure FastAPI application.

    ``adapters`` is normally built at startup from settings; passing it in
    wires the application to an explicit set of adapters instead.
    """

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.search_adapters = adapters

    # Add custom middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSHeadersMiddleware,
        allow_origin=settings.cors_allow_origin,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Add exception handlers
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(BatchValidationError, batch_validation_exception_handler)

    app.include_router(batch.router)
    app.include_router(health.router)

    # Everything else is served from the static directory, when present
    if settings.static_dir and os.path.isdir(settings.static_dir):
        app.mount(
            "/", StaticFiles(directory=settings.static_dir, html=True), name="static"
        )

    return app


# Create application instance
app = create_application()

if __name__ == "__main__":
    dev_mode = os.getenv("DEV_MODE", "false").lower() == "true"
    uvicorn.run(
        "app.presentation.main:app",
        host=settings.host,
        port=settings.port,
        reload=dev_mode,
    )
