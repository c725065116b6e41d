"""
Ingestion pipeline orchestrator.

Coordinates rendering, batch vision analysis, synthesis and persistence for
one stored document, reporting progress after every stage and batch.

Exam documents:        convert -> analyze -> synthesize -> save (topic weights)
Information documents: load context -> convert -> analyze -> synthesize -> save (flashcards)

Any stage failure surfaces as DocumentProcessingError naming the stage.
There is no cross-stage retry; retries live inside the vision client.

Dependencies: All task modules, flashai.configs
System role: Pipeline orchestration (coordinates only)
"""

import logging
import time
from typing import Awaitable, Callable, TypeVar

from flashai.configs.ingestion import IngestionSettings
from flashai.core.exceptions import DocumentProcessingError, FlashAIException
from flashai.models.document import DocumentType

from .models import FlashcardPromptContext, PipelineResult
from .prompts import EXAM_VISION_PROMPT, build_focus_prompt, build_information_vision_prompt
from .tasks import BatchAnalysisEngine, PageRenderer, SavingTask, SynthesisTask

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, str, int, int], None]

T = TypeVar("T")


def _noop_progress(step: str, message: str, current: int, total: int) -> None:
    return None


class IngestionPipeline:
    """Orchestrate document ingestion: render -> analyze -> synthesize -> save."""

    def __init__(
        self,
        renderer: PageRenderer,
        analysis_engine: BatchAnalysisEngine,
        synthesis_task: SynthesisTask,
        saving_task: SavingTask,
        settings: IngestionSettings | None = None,
    ) -> None:
        """
        Initialize pipeline with its stage tasks.

        Args:
            renderer: PDF page renderer
            analysis_engine: Batch vision analysis engine
            synthesis_task: Exam topic / flashcard synthesis
            saving_task: Database reads and writes
            settings: Ingestion settings (uses defaults if None)
        """
        self._renderer = renderer
        self._analysis_engine = analysis_engine
        self._synthesis_task = synthesis_task
        self._saving_task = saving_task
        self._settings = settings or IngestionSettings()

    async def process(
        self,
        document_id: str,
        file_path: str,
        doc_type: DocumentType,
        progress: ProgressCallback | None = None,
    ) -> PipelineResult:
        """
        Process a stored document through the full pipeline.

        Args:
            document_id: ID of the registered document row
            file_path: Path of the stored PDF
            doc_type: Exam or information document
            progress: Called as progress(step, message, current, total)

        Returns:
            PipelineResult: Page count and saved extraction payload

        Raises:
            DocumentProcessingError: Any stage failed
        """
        if doc_type == DocumentType.EXAM:
            return await self.process_exam_document(document_id, file_path, progress)
        return await self.process_information_document(document_id, file_path, progress)

    async def process_exam_document(
        self,
        document_id: str,
        file_path: str,
        progress: ProgressCallback | None = None,
    ) -> PipelineResult:
        notify = progress or _noop_progress
        start_time = time.perf_counter()

        pages = await self._render(document_id, file_path, notify, percent=0)
        page_count = len(pages)

        notify("analyze", f"Analyzing {page_count} pages", 10, 100)
        analysis = await self._run_stage(
            "analyze",
            self._analysis_engine.analyze(
                pages,
                EXAM_VISION_PROMPT,
                batch_size=self._settings.exam_batch_size,
                progress=self._span(notify, "analyze", "Analyzed {done}/{total} pages", 10, 80),
            ),
            document_id,
            page_count,
        )

        notify("synthesize", "Synthesizing exam topics", 80, 100)
        extraction = await self._run_stage(
            "synthesize",
            self._synthesis_task.synthesize_exam_topics(analysis),
            document_id,
            page_count,
        )

        notify("save", "Saving topics", 90, 100)
        saved = await self._run_stage(
            "save",
            self._saving_task.save_exam_topics(
                document_id,
                extraction,
                progress=self._span(notify, "save", "Saved {done}/{total} topics", 90, 100),
            ),
            document_id,
            page_count,
        )

        notify("complete", "Processing complete", 100, 100)
        return PipelineResult(
            document_id=document_id,
            pages=page_count,
            payload=extraction.model_dump(),
            message=f"Extracted {saved} exam topics",
            processing_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    async def process_information_document(
        self,
        document_id: str,
        file_path: str,
        progress: ProgressCallback | None = None,
    ) -> PipelineResult:
        notify = progress or _noop_progress
        start_time = time.perf_counter()

        notify("concepts", "Loading exam concepts", 0, 100)
        concepts = await self._run_stage(
            "concepts",
            self._saving_task.list_concepts(self._settings.context_concept_limit),
            document_id,
            0,
        )

        notify("flashcards", "Loading existing flashcards", 2, 100)
        cards = await self._run_stage(
            "flashcards",
            self._saving_task.list_card_summaries(self._settings.context_card_limit),
            document_id,
            0,
        )

        notify("extract", "Preparing prompt context", 5, 100)
        context = FlashcardPromptContext(
            focus_concepts=concepts[: self._settings.focus_concept_limit],
            existing_concepts=concepts,
            existing_cards=cards,
        )
        vision_prompt = build_information_vision_prompt(build_focus_prompt(context.focus_concepts))

        pages = await self._render(document_id, file_path, notify, percent=10)
        page_count = len(pages)

        notify("analyze", f"Analyzing {page_count} pages", 20, 100)
        analysis = await self._run_stage(
            "analyze",
            self._analysis_engine.analyze(
                pages,
                vision_prompt,
                batch_size=self._settings.information_batch_size,
                progress=self._span(notify, "analyze", "Analyzed {done}/{total} pages", 20, 70),
            ),
            document_id,
            page_count,
        )

        notify("synthesize", "Generating flashcards from content", 70, 100)
        extraction = await self._run_stage(
            "synthesize",
            self._synthesis_task.synthesize_flashcards(analysis, context),
            document_id,
            page_count,
        )

        notify("save", "Saving flashcards", 80, 100)
        inserted = await self._run_stage(
            "save",
            self._saving_task.save_flashcards(
                document_id,
                extraction,
                progress=self._span(notify, "save", "Saved {done}/{total} concepts", 80, 100),
            ),
            document_id,
            page_count,
        )

        notify("complete", "Processing complete", 100, 100)
        return PipelineResult(
            document_id=document_id,
            pages=page_count,
            payload=extraction.model_dump(),
            message=f"Generated {inserted} flashcards across {len(extraction.concepts)} concepts",
            processing_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    async def _render(self, document_id: str, file_path: str, notify: ProgressCallback, percent: int):
        notify("convert", "Converting PDF to images", percent, 100)
        pages = await self._run_stage("convert", self._renderer.render(file_path), document_id, 0)
        if not pages:
            raise DocumentProcessingError(
                "no pages extracted from pdf",
                document_id=document_id,
                stage="convert",
            )

        await self._run_stage(
            "convert",
            self._saving_task.update_page_count(document_id, len(pages)),
            document_id,
            len(pages),
        )
        return pages

    @staticmethod
    def _span(
        notify: ProgressCallback,
        step: str,
        template: str,
        start: int,
        end: int,
    ) -> Callable[[int, int], None]:
        """Map (done, total) item progress onto the [start, end] percent range."""

        def report(done: int, total: int) -> None:
            current = start + (end - start) * done // total if total > 0 else end
            notify(step, template.format(done=done, total=total), current, 100)

        return report

    async def _run_stage(
        self,
        stage: str,
        awaitable: Awaitable[T],
        document_id: str,
        pages: int,
    ) -> T:
        try:
            return await awaitable
        except DocumentProcessingError:
            raise
        except FlashAIException as e:
            logger.warning(f"{__name__}:{stage} - {document_id} failed: {e}")
            raise DocumentProcessingError(
                e.message,
                document_id=document_id,
                stage=stage,
                pages=pages,
            ) from e
        except Exception as e:
            logger.exception(f"{__name__}:{stage} - Unexpected failure for {document_id}")
            raise DocumentProcessingError(
                f"{stage} failed: {e}",
                document_id=document_id,
                stage=stage,
                pages=pages,
            ) from e
