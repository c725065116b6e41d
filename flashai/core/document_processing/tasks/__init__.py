"""
Task modules for the ingestion pipeline.

Exports: GhostscriptRenderer, BatchAnalysisEngine, SynthesisTask, SavingTask
"""

from .analysis_task import BatchAnalysisEngine, PageAnalyzer, format_batch_result, partition_pages
from .rendering_task import GhostscriptRenderer, PageRenderer, count_pages
from .saving_task import SavingTask
from .synthesis_task import SynthesisTask

__all__ = [
    "BatchAnalysisEngine",
    "GhostscriptRenderer",
    "PageAnalyzer",
    "PageRenderer",
    "SavingTask",
    "SynthesisTask",
    "count_pages",
    "format_batch_result",
    "partition_pages",
]
