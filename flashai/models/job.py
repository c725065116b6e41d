"""
Upload job models.

Snapshot types returned by the job tracker and serialized to polling clients.
Fields serialize in camelCase (jobId, createdAt, ...) for the browser UI.

Dependencies: pydantic
System role: Job progress API contract
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class JobStatus(str, Enum):
    """Upload job lifecycle: pending -> processing -> complete | failed."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETE = "complete"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETE, JobStatus.FAILED)


class FileStatus(str, Enum):
    """Per-file lifecycle: pending -> processing -> complete | error."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (FileStatus.COMPLETE, FileStatus.ERROR)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DocumentResult(_CamelModel):
    """Outcome of processing one uploaded file."""

    document_id: str | None = Field(default=None, description="Stored document ID")
    name: str = Field(description="Original file name")
    pages: int = Field(default=0, description="Rendered page count")
    status: str = Field(default="error", description="ok | error")
    message: str = Field(default="")
    payload: dict[str, Any] | None = Field(
        default=None,
        description="Saved extraction (topics or flashcards)",
    )


class FileProgress(_CamelModel):
    """Progress slot for one file of an upload job."""

    index: int
    name: str
    status: FileStatus = FileStatus.PENDING
    step: str = ""
    message: str = ""
    current: int = 0
    total: int = 0
    percent: int = 0
    result: DocumentResult | None = None
    error: str | None = None


class UploadJob(_CamelModel):
    """A batch of uploaded files processed together."""

    job_id: str
    status: JobStatus = JobStatus.PENDING
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    files: list[FileProgress] = Field(default_factory=list)
    results: list[DocumentResult] = Field(default_factory=list)
    error: str | None = None
