"""
Job state management logic.

Tracks upload job progress, handles per-file failures, and manages the job
lifecycle. State lives in memory for the life of the process; every accessor
hands out a deep copy so callers can never observe or cause a torn update.

Dependencies: threading (stdlib), flashai.models.job
System role: Job tracking business logic
"""

import logging
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable

from flashai.models.job import DocumentResult, FileProgress, FileStatus, JobStatus, UploadJob

logger = logging.getLogger(__name__)

DEFAULT_FILE_ERROR = "processing error"


def compute_percent(current: int, total: int) -> int:
    """
    Convert a (current, total) pair into a percentage in [0, 100].

    A non-positive total means ``current`` already is a percentage.
    """
    if total <= 0:
        return max(0, min(100, current))
    if current <= 0:
        return 0
    if current >= total:
        return 100
    return max(0, min(100, round(current * 100 / total)))


class JobTracker:
    """
    In-memory registry of upload jobs.

    All mutations run under a single lock and bump ``updated_at``. Mutations
    on unknown job IDs or out-of-range file indices are silent no-ops.
    Terminal states (job complete/failed, file complete/error) are sticky.
    """

    def __init__(self) -> None:
        """Initialize an empty job registry."""
        self._jobs: dict[str, UploadJob] = {}
        self._lock = threading.Lock()

    @property
    def job_count(self) -> int:
        with self._lock:
            return len(self._jobs)

    def create_job(self, file_names: list[str]) -> tuple[str, UploadJob]:
        """
        Register a new pending job with one slot per file.

        Args:
            file_names: Original file names, in upload order

        Returns:
            tuple[str, UploadJob]: Job ID and a snapshot of the new job
        """
        job_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc)
        job = UploadJob(
            job_id=job_id,
            status=JobStatus.PENDING,
            created_at=now,
            updated_at=now,
            files=[FileProgress(index=i, name=name) for i, name in enumerate(file_names)],
        )

        with self._lock:
            self._jobs[job_id] = job
            snapshot = job.model_copy(deep=True)

        logger.info(f"{__name__}:create_job - Created job {job_id} with {len(file_names)} files")
        return job_id, snapshot

    def get_job(self, job_id: str) -> UploadJob | None:
        """
        Get a snapshot of a job.

        Args:
            job_id: Job ID

        Returns:
            UploadJob | None: Deep copy of the job, None if unknown
        """
        with self._lock:
            job = self._jobs.get(job_id)
            return job.model_copy(deep=True) if job is not None else None

    def mark_processing(self, job_id: str) -> None:
        def apply(job: UploadJob) -> bool:
            if job.status != JobStatus.PENDING:
                return False
            job.status = JobStatus.PROCESSING
            return True

        self._with_job(job_id, apply)

    def mark_completed(self, job_id: str) -> None:
        def apply(job: UploadJob) -> bool:
            if job.status.is_terminal:
                return False
            job.status = JobStatus.COMPLETE
            return True

        self._with_job(job_id, apply)

    def mark_failed(self, job_id: str, message: str) -> None:
        """
        Mark a job as failed because the job harness itself broke.

        Individual file failures never fail the job; use mark_file_error.
        """
        def apply(job: UploadJob) -> bool:
            if job.status.is_terminal:
                return False
            job.status = JobStatus.FAILED
            job.error = message.strip() or DEFAULT_FILE_ERROR
            return True

        self._with_job(job_id, apply)

    def mark_file_started(self, job_id: str, index: int) -> None:
        def apply(file: FileProgress) -> None:
            file.status = FileStatus.PROCESSING
            file.step = ""
            file.message = "Starting"
            file.current = 0
            file.total = 100
            file.percent = 0
            file.error = None

        self._with_file(job_id, index, apply)

    def update_file_progress(
        self,
        job_id: str,
        index: int,
        step: str,
        message: str,
        current: int,
        total: int,
    ) -> None:
        """
        Record a progress report for one file.

        The stored percent never goes backwards while the file is processing.

        Args:
            job_id: Job ID
            index: File slot index
            step: Pipeline stage name
            message: Human-readable progress message
            current: Progress numerator
            total: Progress denominator (<= 0 means current is a percentage)
        """
        def apply(file: FileProgress) -> None:
            file.status = FileStatus.PROCESSING
            file.step = step
            file.message = message
            file.current = current
            file.total = total
            file.percent = max(file.percent, compute_percent(current, total))

        self._with_file(job_id, index, apply)

    def mark_file_complete(self, job_id: str, index: int, result: DocumentResult) -> None:
        def apply(file: FileProgress, job: UploadJob) -> None:
            stored = result.model_copy(deep=True)
            file.status = FileStatus.COMPLETE
            file.step = "complete"
            file.message = "Processing complete"
            file.current = 100
            file.total = 100
            file.percent = 100
            file.result = stored
            file.error = None
            job.results.append(stored.model_copy(deep=True))

        self._with_file(job_id, index, apply, with_job=True)

    def mark_file_error(
        self,
        job_id: str,
        index: int,
        message: str,
        result: DocumentResult | None = None,
    ) -> None:
        """
        Mark one file as failed.

        Args:
            job_id: Job ID
            index: File slot index
            message: Failure description (defaults to "processing error" when blank)
            result: Partial result; its status is forced to "error"
        """
        message = (message or "").strip() or DEFAULT_FILE_ERROR

        def apply(file: FileProgress, job: UploadJob) -> None:
            if result is not None:
                stored = result.model_copy(deep=True)
            else:
                stored = DocumentResult(name=file.name)
            stored.status = "error"
            if not stored.message:
                stored.message = message

            file.status = FileStatus.ERROR
            file.step = "error"
            file.message = message
            file.error = message
            file.current = 100
            file.total = 100
            file.percent = 100
            file.result = stored
            job.results.append(stored.model_copy(deep=True))

        self._with_file(job_id, index, apply, with_job=True)

    def purge_expired(self, ttl_seconds: float, now: datetime | None = None) -> int:
        """
        Drop terminal jobs not updated within the TTL.

        Args:
            ttl_seconds: Retention window measured from the last update
            now: Reference time (defaults to current UTC time)

        Returns:
            int: Number of jobs removed
        """
        cutoff = (now or datetime.now(timezone.utc)) - timedelta(seconds=ttl_seconds)
        with self._lock:
            expired = [
                job_id
                for job_id, job in self._jobs.items()
                if job.status.is_terminal and job.updated_at < cutoff
            ]
            for job_id in expired:
                del self._jobs[job_id]

        if expired:
            logger.info(f"{__name__}:purge_expired - Removed {len(expired)} expired jobs")
        return len(expired)

    def _with_job(self, job_id: str, apply: Callable[[UploadJob], bool]) -> None:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return
            if apply(job):
                job.updated_at = datetime.now(timezone.utc)

    def _with_file(self, job_id: str, index: int, apply: Callable, with_job: bool = False) -> None:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None or index < 0 or index >= len(job.files):
                return
            file = job.files[index]
            if file.status.is_terminal:
                return
            if with_job:
                apply(file, job)
            else:
                apply(file)
            job.updated_at = datetime.now(timezone.utc)
