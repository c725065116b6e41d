"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(), init_models(): Connection management
  - DocumentModel, ConceptModel, CardModel, DocumentTopicModel: Domain entities
  - document_crud, concept_crud, card_crud: CRUD operation singletons

Dependencies: sqlalchemy, aiosqlite, flashai.configs
System role: Database adapter for documents, concepts and flashcards
"""

from flashai.boundary.db.base import Base, TimestampMixin, UUIDMixin
from flashai.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
    init_models,
)
from flashai.boundary.db.models import (
    CardModel,
    CardState,
    ConceptModel,
    DocumentModel,
    DocumentTopicModel,
)
from flashai.boundary.db.CRUD import (
    BaseCRUD,
    CardCRUD,
    ConceptCRUD,
    DocumentCRUD,
    card_crud,
    concept_crud,
    document_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "init_models",
    # Models
    "CardModel",
    "CardState",
    "ConceptModel",
    "DocumentModel",
    "DocumentTopicModel",
    # CRUD classes
    "BaseCRUD",
    "CardCRUD",
    "ConceptCRUD",
    "DocumentCRUD",
    # CRUD singletons
    "card_crud",
    "concept_crud",
    "document_crud",
]
