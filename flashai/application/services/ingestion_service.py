"""
Ingestion service orchestrator.

Accepts upload batches, registers them with the job tracker and runs one
asyncio task per file through the ingestion pipeline. A file failure is
recorded on its slot and never fails the job; the job only fails when the
job harness itself breaks.

Dependencies: flashai.core.job_tracker, flashai.core.document_processing,
    flashai.boundary.storage, flashai.observability
System role: Upload job orchestration
"""

import asyncio
import logging
from pathlib import Path

from flashai.boundary.storage.local_storage import LocalDocumentStorage
from flashai.configs.ingestion import IngestionSettings
from flashai.core.document_processing.entrypoint import IngestionPipeline, ProgressCallback
from flashai.core.document_processing.tasks import SavingTask
from flashai.core.exceptions import (
    AIUnavailableError,
    DocumentProcessingError,
    FlashAIException,
    ValidationError,
)
from flashai.core.job_tracker import JobTracker
from flashai.models.document import DocumentType, UploadedFile
from flashai.models.job import DocumentResult, UploadJob
from flashai.observability.correlation import set_correlation_id

logger = logging.getLogger(__name__)


class IngestionService:
    """
    Upload job orchestrator.

    Owns the background job tasks it starts; shutdown() cancels them.
    """

    def __init__(
        self,
        job_tracker: JobTracker,
        pipeline: IngestionPipeline | None,
        saving_task: SavingTask,
        storage: LocalDocumentStorage,
        settings: IngestionSettings | None = None,
    ) -> None:
        """
        Initialize ingestion service.

        Args:
            job_tracker: In-memory job registry
            pipeline: Ingestion pipeline, None when AI credentials are missing
            saving_task: Persistence task used to register stored uploads
            storage: Upload file storage
            settings: Ingestion settings (uses defaults if None)
        """
        self._tracker = job_tracker
        self._pipeline = pipeline
        self._saving_task = saving_task
        self._storage = storage
        self._settings = settings or IngestionSettings()
        self._tasks: set[asyncio.Task] = set()

    @property
    def available(self) -> bool:
        return self._pipeline is not None

    @property
    def active_jobs(self) -> int:
        return len(self._tasks)

    def validate_upload(self, files: list[UploadedFile], doc_type: str) -> DocumentType:
        """
        Check an upload batch before any work starts.

        Args:
            files: Uploaded files
            doc_type: Requested document type

        Returns:
            DocumentType: Parsed document type

        Raises:
            ValidationError: Unknown type, no files, bad extension or oversize file
        """
        try:
            document_type = DocumentType((doc_type or "").strip().lower())
        except ValueError as e:
            raise ValidationError(
                "docType must be 'information' or 'exam'",
                field="docType",
            ) from e

        if not files:
            raise ValidationError("no files uploaded", field="files")

        allowed = {ext.lower() for ext in self._settings.allowed_extensions}
        for file in files:
            extension = Path(file.name).suffix.lower()
            if allowed and extension not in allowed:
                raise ValidationError(
                    f"Invalid file type for {file.name}. Allowed: {', '.join(sorted(allowed))}",
                    field="files",
                )
            if file.size == 0:
                raise ValidationError(f"{file.name} is empty", field="files")
            if file.size > self._settings.max_file_size_bytes:
                raise ValidationError(
                    f"{file.name} exceeds {self._settings.max_file_size_mb}MB",
                    field="files",
                )

        return document_type

    def submit(self, files: list[UploadedFile], doc_type: str) -> UploadJob:
        """
        Create an upload job and start processing it in the background.

        Args:
            files: Uploaded files, in upload order
            doc_type: "information" or "exam"

        Returns:
            UploadJob: Snapshot of the new (pending) job

        Raises:
            AIUnavailableError: AI credentials missing; no job is created
            ValidationError: Invalid upload
        """
        self._ensure_available()
        document_type = self.validate_upload(files, doc_type)

        job_id, snapshot = self._tracker.create_job([file.name for file in files])
        task = asyncio.create_task(
            self.run_upload_job(job_id, files, document_type),
            name=f"upload-job-{job_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        logger.info(
            f"{__name__}:submit - Queued job {job_id}",
            extra={"doc_type": document_type.value, "files": len(files)},
        )
        return snapshot

    async def run_upload_job(
        self,
        job_id: str,
        files: list[UploadedFile],
        doc_type: DocumentType,
    ) -> None:
        """
        Process every file of a job concurrently and close the job.

        Args:
            job_id: Job ID from the tracker
            files: Files matching the job's slots by index
            doc_type: Document type shared by the batch
        """
        set_correlation_id(job_id)
        self._tracker.mark_processing(job_id)

        try:
            await asyncio.gather(
                *(self._run_file(job_id, index, file, doc_type) for index, file in enumerate(files))
            )
        except asyncio.CancelledError:
            self._tracker.mark_failed(job_id, "job cancelled")
            raise
        except Exception as e:
            logger.exception(f"{__name__}:run_upload_job - Job {job_id} harness failure")
            self._tracker.mark_failed(job_id, f"job failed: {e}")
            return

        self._tracker.mark_completed(job_id)
        logger.info(f"{__name__}:run_upload_job - Job {job_id} complete")

    async def process_document(
        self,
        file: UploadedFile,
        doc_type: DocumentType,
        progress: ProgressCallback | None = None,
    ) -> DocumentResult:
        """
        Store one upload and run it through the pipeline.

        Processing failures are returned as a result with status "error" and a
        human-readable message; they are not raised.

        Args:
            file: Uploaded file
            doc_type: Document type
            progress: Called as progress(step, message, current, total)

        Returns:
            DocumentResult: Outcome with document ID, page count and payload
        """
        self._ensure_available()
        result = DocumentResult(name=file.name, status="error")

        if progress is not None:
            progress("received", "Storing document", 0, 100)
        try:
            stored_path = await self._storage.save(file.name, file.content)
            document_id = await self._saving_task.register_document(
                original_name=file.name,
                stored_path=str(stored_path),
                doc_type=doc_type.value,
            )
        except FlashAIException as e:
            result.message = f"store document: {e.message}"
            return result

        result.document_id = document_id
        try:
            outcome = await self._pipeline.process(document_id, str(stored_path), doc_type, progress)
        except DocumentProcessingError as e:
            result.pages = e.pages
            result.message = e.message
            return result

        result.pages = outcome.pages
        result.status = "ok"
        result.message = outcome.message
        result.payload = outcome.payload
        return result

    async def process_now(self, files: list[UploadedFile], doc_type: str) -> list[DocumentResult]:
        """
        Process an upload batch inline, one file after another.

        Raises:
            AIUnavailableError: AI credentials missing
            ValidationError: Invalid upload
        """
        self._ensure_available()
        document_type = self.validate_upload(files, doc_type)
        return [await self.process_document(file, document_type) for file in files]

    async def run_reaper(self, ttl_seconds: int, interval_seconds: int) -> None:
        """Periodically drop finished jobs older than the TTL until cancelled."""
        while True:
            await asyncio.sleep(interval_seconds)
            self._tracker.purge_expired(ttl_seconds)

    async def shutdown(self) -> None:
        """Cancel all in-flight job tasks and wait for them to unwind."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info(f"{__name__}:shutdown - Cancelled {len(tasks)} jobs")

    async def _run_file(
        self,
        job_id: str,
        index: int,
        file: UploadedFile,
        doc_type: DocumentType,
    ) -> None:
        self._tracker.mark_file_started(job_id, index)

        def progress(step: str, message: str, current: int, total: int) -> None:
            self._tracker.update_file_progress(job_id, index, step, message, current, total)

        try:
            result = await self.process_document(file, doc_type, progress)
        except Exception as e:
            logger.exception(f"{__name__}:_run_file - Unexpected failure for {file.name}")
            self._tracker.mark_file_error(job_id, index, str(e))
            return

        if result.status == "ok":
            self._tracker.mark_file_complete(job_id, index, result)
        else:
            logger.warning(f"{__name__}:_run_file - {file.name} failed: {result.message}")
            self._tracker.mark_file_error(job_id, index, result.message, result)

    def _ensure_available(self) -> None:
        if self._pipeline is None:
            raise AIUnavailableError()
