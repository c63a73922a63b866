"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from vacademy.api.dependencies import close_admin_core_client
from vacademy.api.routes import health, page_contexts, templates, variables
from vacademy.config import VERSION
from vacademy.utilities.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown."""
    # Startup
    setup_logging()
    logger.info("[STARTUP] Vacademy template variables API v%s", VERSION)

    yield

    # Shutdown
    await close_admin_core_client()
    logger.info("[SHUTDOWN] Admin-core client closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Vacademy Template Variables API",
        description="Template variable resolution for institute messaging",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Include API routers
    app.include_router(health.router, prefix="/api/v1", tags=["Health"])
    app.include_router(variables.router, prefix="/api/v1", tags=["Variables"])
    app.include_router(templates.router, prefix="/api/v1", tags=["Templates"])
    app.include_router(page_contexts.router, prefix="/api/v1", tags=["Page Contexts"])

    return app


app = create_app()
