"""
API and domain models shared across layers.
"""

from flashai.models.document import DocumentResultsResponse, DocumentType, UploadedFile
from flashai.models.job import DocumentResult, FileProgress, FileStatus, JobStatus, UploadJob

__all__ = [
    "DocumentResult",
    "DocumentResultsResponse",
    "DocumentType",
    "FileProgress",
    "FileStatus",
    "JobStatus",
    "UploadJob",
    "UploadedFile",
]
