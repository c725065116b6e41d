"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, flashai.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flashai.api.deps.dependencies import get_service_cache
from flashai.boundary.db import init_models
from flashai.configs import get_settings
from flashai.observability.logger import configure_logging

from .routers import documents_router, health_router, jobs_router, knowledge_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Startup: logging, schema bootstrap, service cache warm-up, job reaper.
    Shutdown: cancels running jobs and closes network clients.
    """
    settings = get_settings()
    configure_logging(settings.effective_log_level)
    logger = logging.getLogger("uvicorn")

    # Startup
    await init_models()
    cache = get_service_cache()
    service = cache.ingestion_service
    logger.info("Service cache pre-warmed")

    reaper = None
    if settings.ingestion.job_ttl_seconds > 0:
        reaper = asyncio.create_task(
            service.run_reaper(
                settings.ingestion.job_ttl_seconds,
                settings.ingestion.reaper_interval_seconds,
            ),
            name="job-reaper",
        )
        logger.info(f"Job reaper started (ttl={settings.ingestion.job_ttl_seconds}s)")

    yield

    # Shutdown
    if reaper is not None:
        reaper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await reaper
    await cache.aclose()
    logger.info("Service cache cleared")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Flash-AI Ingestion API",
        description="PDF ingestion into exam topics and spaced repetition flashcards",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(documents_router, prefix="/api/v1")
    app.include_router(jobs_router, prefix="/api/v1")
    app.include_router(knowledge_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "flashai.api.main:app",
        host="0.0.0.0",
        port=8080,
        reload=get_settings().debug,
    )
