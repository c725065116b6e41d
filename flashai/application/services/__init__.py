"""Service orchestrators."""

from .ingestion_service import IngestionService
from .knowledge_service import KnowledgeService

__all__ = ["IngestionService", "KnowledgeService"]
