"""
Main FastAPI application for the conversational search engine.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .routes import search
from .services import get_services, initialize_services
from config.settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logging.basicConfig(level="DEBUG" if settings.debug else settings.log_level.upper())
    logger.info(f"{settings.service_name} starting up...")

    initialize_services()
    services = get_services()
    if services.engine is not None:
        await services.engine.init()

    logger.info(f"{settings.service_name} ready")
    yield
    logger.info(f"{settings.service_name} shutting down...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.service_name,
        description="Conversational query understanding and ranking over a product catalog.",
        version=settings.api_version,
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.include_router(search.router, prefix="/api/v1", tags=["Search"])

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "service": settings.service_name,
            "version": settings.api_version,
            "status": "operational",
            "docs": "/docs",
        }

    # Health check
    @app.get("/health")
    async def health():
        services = get_services()
        return {
            "status": "healthy" if services.is_ready else "degraded",
            "services": services.health(),
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
