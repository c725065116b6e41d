"""
Document request models.

Dependencies: pydantic
System role: Upload input types shared by API and application layers
"""

from enum import Enum

from pydantic import BaseModel, Field

from flashai.models.job import DocumentResult


class DocumentType(str, Enum):
    """
    Kind of uploaded document.

    INFORMATION: Study material; produces flashcards grouped by concept
    EXAM: Past exam; produces weighted exam topics
    """

    INFORMATION = "information"
    EXAM = "exam"


class UploadedFile(BaseModel):
    """Uploaded file held in memory until the job task stores it."""

    name: str = Field(description="Original file name")
    content: bytes = Field(repr=False)

    @property
    def size(self) -> int:
        return len(self.content)


class DocumentResultsResponse(BaseModel):
    """Response of the synchronous upload endpoint."""

    results: list[DocumentResult] = Field(default_factory=list)
