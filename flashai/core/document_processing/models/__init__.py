"""
Models for the ingestion pipeline.

Exports: PageImage, PageBatch, ExamExtraction, FlashcardExtraction, FlashcardPromptContext, PipelineResult
"""

from .extraction import (
    CardSummary,
    ConceptSummary,
    ExamExtraction,
    ExamTopic,
    FlashcardConcept,
    FlashcardDraft,
    FlashcardExtraction,
    FlashcardPromptContext,
)
from .page import PageBatch, PageImage
from .pipeline_result import PipelineResult

__all__ = [
    "CardSummary",
    "ConceptSummary",
    "ExamExtraction",
    "ExamTopic",
    "FlashcardConcept",
    "FlashcardDraft",
    "FlashcardExtraction",
    "FlashcardPromptContext",
    "PageBatch",
    "PageImage",
    "PipelineResult",
]
