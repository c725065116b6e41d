"""
Document processing pipeline for ingestion.

Renders uploaded PDFs, analyzes page batches with a vision model, synthesizes
exam topics or flashcards, and persists them.

Dependencies: pypdf, httpx, langchain_core, sqlalchemy, pydantic
System role: Document ingestion pipeline entrypoint
"""

from .entrypoint import IngestionPipeline, ProgressCallback
from .models import ExamExtraction, FlashcardExtraction, PageImage, PipelineResult

__all__ = [
    "ExamExtraction",
    "FlashcardExtraction",
    "IngestionPipeline",
    "PageImage",
    "PipelineResult",
    "ProgressCallback",
]
