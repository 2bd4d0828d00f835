"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, and configures lifespan.

Dependencies: fastapi, pagecraft.api, pagecraft.observability, pagecraft.configs
System role: Application initialization and configuration
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pagecraft.api import api_router
from pagecraft.api.deps.dependencies import get_service_cache
from pagecraft.configs import get_settings
from pagecraft.observability.logger import configure_logging
from pagecraft.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Configures logging and pre-warms the service cache on startup.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(f"Application startup: logging configured (environment={settings.environment})")

    cache = get_service_cache()
    client = cache.model_client
    _ = cache.conversion_service
    if client.is_configured:
        logger.info(f"Model client ready: {client.model_id}")
    else:
        logger.warning("Model credentials not found, all tasks will return fallback results")

    yield

    cache.clear()
    logger.info("Application shutdown: service cache cleared")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Pagecraft Conversion API",
        description="Web-to-PDF typesetting and PDF-to-website generation backed by a hosted language model",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Add observability middleware (added first = last to execute)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pagecraft.main:app",
        host="0.0.0.0",
        port=8000,
    )
