"""
Main entry point for the LYNQ insights service.

Creates the FastAPI application instance for uvicorn:

    uvicorn lynq_insights.main:app --port 8090
"""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lynq_insights.api.error_handlers import register_error_handlers
from lynq_insights.api.routes.health import router as health_router
from lynq_insights.api.routes.insights import router as insights_router
from lynq_insights.clients.completion import create_completion_client
from lynq_insights.core.config import get_settings
from lynq_insights.core.logging import configure_logging, get_logger


# Configure structured logging on module load
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    On startup: create the shared completion client
    On shutdown: close its connection pool and drop the shared pipeline
    """
    settings = get_settings()
    logger.info(
        "Starting insights service",
        port=settings.port,
        pipeline_mode=settings.pipeline_mode,
        backend_configured=settings.backend_configured,
    )
    if not settings.backend_configured:
        logger.warning("Completion backend API key not configured")

    app.state.started_at = time.monotonic()
    completion_client = create_completion_client(settings)
    app.state.completion_client = completion_client

    yield

    logger.info("Shutting down insights service")
    await completion_client.close()
    app.state.completion_client = None
    app.state.pipeline = None


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers:
    - insights_router: POST/OPTIONS /insights
    - health_router: GET /health, /health/ready, /health/live
    """
    app = FastAPI(
        title="LYNQ Insights Service",
        description="Multi-stage insight generation for learning-module metrics",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    register_error_handlers(app)

    app.include_router(insights_router)
    app.include_router(health_router)

    return app


# Create application instance
app = create_app()
