"""
Pipeline result model for document processing.

Represents the outcome of processing a document through the pipeline.

Dependencies: pydantic
System role: Return type for IngestionPipeline.process()
"""

from typing import Any

from pydantic import BaseModel, Field


class PipelineResult(BaseModel):
    """Result of ingestion pipeline execution."""

    document_id: str = Field(description="Stored document identifier")
    pages: int = Field(description="Number of rendered pages")
    payload: dict[str, Any] = Field(description="Saved extraction (topics or concepts)")
    message: str = Field(default="", description="Human-readable summary")
    processing_time_ms: float = Field(description="Total processing time in milliseconds")
