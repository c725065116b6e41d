"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory database, fake renderer / vision / chat model doubles,
pipeline and service builders, temp directories
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite, langchain_core
System role: Test infrastructure and fixture management
"""

import asyncio
import re
import shutil
import tempfile
from pathlib import Path

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from flashai.boundary.ai.synthesis_client import SynthesisClient
from flashai.boundary.storage import LocalDocumentStorage
from flashai.configs.ingestion import IngestionSettings
from flashai.core.document_processing import IngestionPipeline
from flashai.core.document_processing.models import PageImage
from flashai.core.document_processing.prompts import EXAM_SYSTEM_PROMPT, FLASHCARD_SYSTEM_PROMPT
from flashai.core.document_processing.tasks import (
    BatchAnalysisEngine,
    SavingTask,
    SynthesisTask,
)
from flashai.core.exceptions import RenderError
from flashai.core.job_tracker import JobTracker
from flashai.application.services import IngestionService

EXAM_RESPONSE = (
    '```json\n{"topics": [{"name": "Eigenvalues", "description": "Spectral decomposition", '
    '"frequency": 3, "references": [1, 2]}, {"name": "Determinants", "description": "", '
    '"frequency": 0, "references": []}], "notes": "linear algebra"}\n```'
)

FLASHCARD_RESPONSE = (
    'Here are the cards:\n{"concepts": [{"name": "Photosynthesis", "description": "Light to sugar", '
    '"cards": [{"front": "What pigment absorbs light?", "back": "Chlorophyll"}, '
    '{"front": "Where does it happen?", "back": "Chloroplasts"}]}, '
    '{"name": "", "description": "nameless", "cards": [{"front": "x", "back": "y"}]}], "notes": ""}'
)


def make_pages(count: int) -> list[PageImage]:
    """Build `count` fake rendered pages numbered from 1."""
    return [
        PageImage(page_number=i, image_data=f"data:image/png;base64,PAGE{i}")
        for i in range(1, count + 1)
    ]


def fake_pdf(pages: int) -> bytes:
    """Bytes understood by FakeRenderer: a PDF header plus the page count."""
    return f"%PDF-1.4 pages={pages}".encode()


class FakeRenderer:
    """Renderer double: page count is read from the stored file's content."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def render(self, file_path: str) -> list[PageImage]:
        self.calls.append(file_path)
        match = re.search(rb"pages=(\d+)", Path(file_path).read_bytes())
        if match is None:
            raise RenderError("get page count: not a pdf", file_path)
        count = int(match.group(1))
        if count == 0:
            raise RenderError("pdf has no pages", file_path)
        return make_pages(count)


class FakeVisionClient:
    """Vision client double recording calls and peak concurrency."""

    def __init__(self, delays: dict[int, float] | None = None, fail_pages: set[int] | None = None) -> None:
        self.calls: list[list[str]] = []
        self.instructions: list[str] = []
        self.delays = delays or {}
        self.fail_pages = fail_pages or set()
        self.in_flight = 0
        self.peak_in_flight = 0

    async def analyze(self, images: list[str], instruction: str) -> str:
        self.calls.append(images)
        self.instructions.append(instruction)
        first_page = int(images[0].rsplit("PAGE", 1)[-1])
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(first_page, 0))
            if first_page in self.fail_pages:
                raise RuntimeError(f"boom on page {first_page}")
            return f"analysis starting at page {first_page} ({len(images)} images)"
        finally:
            self.in_flight -= 1


@pytest.fixture
async def session_factory():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        async_sessionmaker: Factory bound to a fresh, seeded schema
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from flashai.boundary.db.connection import init_models

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_models(engine)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory

    await engine.dispose()


@pytest.fixture
async def test_async_db(session_factory):
    """
    Yields:
        AsyncSession: Test database session rolled back after the test
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def temp_dir():
    """
    Create a temporary directory for test files.

    Yields:
        Path: Path to temporary directory
    """
    temp_path = Path(tempfile.mkdtemp(prefix="flashai_test_"))
    yield temp_path

    if temp_path.exists():
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def ingestion_settings(temp_dir):
    return IngestionSettings(
        upload_dir=str(temp_dir / "uploads"),
        exam_batch_size=4,
        information_batch_size=2,
        max_concurrent_calls=3,
    )


@pytest.fixture
def fake_renderer():
    return FakeRenderer()


@pytest.fixture
def fake_vision():
    return FakeVisionClient()


@pytest.fixture
def build_pipeline(session_factory, fake_renderer, ingestion_settings):
    """
    Factory building a pipeline around fakes.

    Returns:
        Callable: build(vision=None, exam_responses=None, flashcard_responses=None)
    """

    def build(vision=None, exam_responses=None, flashcard_responses=None, limit=3):
        exam_model = FakeListChatModel(responses=exam_responses or [EXAM_RESPONSE])
        flashcard_model = FakeListChatModel(responses=flashcard_responses or [FLASHCARD_RESPONSE])
        synthesis = SynthesisTask(
            SynthesisClient(exam_model, system_prompt=EXAM_SYSTEM_PROMPT, timeout_seconds=5),
            SynthesisClient(flashcard_model, system_prompt=FLASHCARD_SYSTEM_PROMPT, timeout_seconds=5),
        )
        return IngestionPipeline(
            renderer=fake_renderer,
            analysis_engine=BatchAnalysisEngine(vision or FakeVisionClient(), asyncio.Semaphore(limit)),
            synthesis_task=synthesis,
            saving_task=SavingTask(session_factory),
            settings=ingestion_settings,
        )

    return build


@pytest.fixture
def build_service(build_pipeline, session_factory, ingestion_settings):
    """
    Factory building an IngestionService with its own JobTracker.

    Returns:
        Callable: build(pipeline=None, ai_configured=True, job_tracker=None) -> IngestionService
    """

    def build(pipeline=None, ai_configured=True, job_tracker=None):
        return IngestionService(
            job_tracker=job_tracker or JobTracker(),
            pipeline=(pipeline or build_pipeline()) if ai_configured else None,
            saving_task=SavingTask(session_factory),
            storage=LocalDocumentStorage(ingestion_settings.upload_dir),
            settings=ingestion_settings,
        )

    return build
