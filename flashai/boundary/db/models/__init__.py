"""
Database models package.

Exports:
  - DocumentModel: Uploaded document metadata
  - ConceptModel: Weighted knowledge concept
  - CardModel, CardState: Flashcard with FSRS fields and its state enum
  - DocumentTopicModel: Per-exam topic frequency

Dependencies: sqlalchemy, flashai.boundary.db.base
System role: Database model definitions for domain entities
"""

from flashai.boundary.db.models.document_model import DocumentModel
from flashai.boundary.db.models.concept_model import ConceptModel
from flashai.boundary.db.models.card_model import CardModel, CardState
from flashai.boundary.db.models.document_topic_model import DocumentTopicModel

__all__ = [
    "CardModel",
    "CardState",
    "ConceptModel",
    "DocumentModel",
    "DocumentTopicModel",
]
