"""
Dependency injection container.

Builds the process-wide collaborators once (job tracker, concurrency limiter,
HTTP client, remote model clients, pipeline) and exposes them as FastAPI
dependencies.

Dependencies: flashai.configs, flashai.application, flashai.boundary, flashai.core
System role: DI container for service injection
"""

import asyncio
import logging
from functools import lru_cache

import httpx
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from flashai.application.services import IngestionService, KnowledgeService
from flashai.boundary.ai import SynthesisClient, VisionClient
from flashai.boundary.db import get_async_db, get_async_session_factory
from flashai.boundary.storage import LocalDocumentStorage
from flashai.configs import Settings, get_settings
from flashai.core.document_processing import IngestionPipeline
from flashai.core.document_processing.prompts import EXAM_SYSTEM_PROMPT, FLASHCARD_SYSTEM_PROMPT
from flashai.core.document_processing.tasks import (
    BatchAnalysisEngine,
    GhostscriptRenderer,
    SavingTask,
    SynthesisTask,
)
from flashai.core.job_tracker import JobTracker

logger = logging.getLogger(__name__)


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings
        self._job_tracker: JobTracker | None = None
        self._limiter: asyncio.Semaphore | None = None
        self._http_client: httpx.AsyncClient | None = None
        self._vision_client: VisionClient | None = None
        self._session_factory: async_sessionmaker | None = None
        self._saving_task: SavingTask | None = None
        self._pipeline: IngestionPipeline | None = None
        self._ingestion_service: IngestionService | None = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def job_tracker(self) -> JobTracker:
        """Get cached job tracker."""
        if self._job_tracker is None:
            self._job_tracker = JobTracker()
        return self._job_tracker

    @property
    def concurrency_limiter(self) -> asyncio.Semaphore:
        """Process-wide cap on in-flight vision calls."""
        if self._limiter is None:
            self._limiter = asyncio.Semaphore(self.settings.ingestion.max_concurrent_calls)
        return self._limiter

    @property
    def http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.settings.vision.timeout_seconds)
        return self._http_client

    @property
    def vision_client(self) -> VisionClient:
        """Get cached vision client."""
        if self._vision_client is None:
            self._vision_client = VisionClient.from_settings(
                self.settings.vision,
                http_client=self.http_client,
            )
        return self._vision_client

    @property
    def session_factory(self) -> async_sessionmaker:
        if self._session_factory is None:
            self._session_factory = get_async_session_factory()
        return self._session_factory

    @property
    def saving_task(self) -> SavingTask:
        if self._saving_task is None:
            self._saving_task = SavingTask(self.session_factory)
        return self._saving_task

    @property
    def ingestion_pipeline(self) -> IngestionPipeline | None:
        """Get cached pipeline; None when AI credentials are missing."""
        if self._pipeline is None and self.settings.ai_configured:
            synthesis = self.settings.synthesis
            exam_client = SynthesisClient.for_gemini(
                api_key=synthesis.google_api_key,
                model_id=synthesis.model,
                system_prompt=EXAM_SYSTEM_PROMPT,
                temperature=synthesis.exam_temperature,
                max_output_tokens=synthesis.max_output_tokens,
                timeout_seconds=synthesis.exam_timeout_seconds,
            )
            flashcard_client = SynthesisClient.for_gemini(
                api_key=synthesis.google_api_key,
                model_id=synthesis.model,
                system_prompt=FLASHCARD_SYSTEM_PROMPT,
                temperature=synthesis.flashcard_temperature,
                max_output_tokens=synthesis.max_output_tokens,
                timeout_seconds=synthesis.flashcard_timeout_seconds,
            )
            ingestion = self.settings.ingestion
            self._pipeline = IngestionPipeline(
                renderer=GhostscriptRenderer(
                    binary=ingestion.ghostscript_binary,
                    dpi=ingestion.render_dpi,
                ),
                analysis_engine=BatchAnalysisEngine(self.vision_client, self.concurrency_limiter),
                synthesis_task=SynthesisTask(exam_client, flashcard_client),
                saving_task=self.saving_task,
                settings=ingestion,
            )
        return self._pipeline

    @property
    def ingestion_service(self) -> IngestionService:
        """Get cached ingestion service."""
        if self._ingestion_service is None:
            if not self.settings.ai_configured:
                logger.warning(
                    f"{__name__}:ingestion_service - AI credentials missing; uploads will be rejected"
                )
            self._ingestion_service = IngestionService(
                job_tracker=self.job_tracker,
                pipeline=self.ingestion_pipeline,
                saving_task=self.saving_task,
                storage=LocalDocumentStorage(self.settings.ingestion.upload_dir),
                settings=self.settings.ingestion,
            )
        return self._ingestion_service

    async def aclose(self) -> None:
        """Cancel running jobs, close network clients and clear all cached instances."""
        if self._ingestion_service is not None:
            await self._ingestion_service.shutdown()
        if self._http_client is not None:
            await self._http_client.aclose()
        self.clear()

    def clear(self) -> None:
        """Clear all cached instances."""
        self._job_tracker = None
        self._limiter = None
        self._http_client = None
        self._vision_client = None
        self._session_factory = None
        self._saving_task = None
        self._pipeline = None
        self._ingestion_service = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_job_tracker() -> JobTracker:
    """
    Get the process-wide job tracker.

    Returns:
        JobTracker: In-memory upload job registry
    """
    return get_service_cache().job_tracker


def get_ingestion_service() -> IngestionService:
    """
    Get ingestion service instance.

    Returns:
        IngestionService: Upload job orchestrator wired to the shared pipeline
    """
    return get_service_cache().ingestion_service


def get_knowledge_service(db: AsyncSession = Depends(get_async_db)) -> KnowledgeService:
    """
    Get knowledge service bound to the request's session.

    Args:
        db: AsyncSession from dependency injection

    Returns:
        KnowledgeService: Topics and flashcards reader
    """
    return KnowledgeService(db)
