"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from flashai.boundary.db.CRUD import concept_crud, card_crud

    concepts = await concept_crud.list_by_weight(db, limit=12)
"""

from flashai.boundary.db.CRUD.base_crud import BaseCRUD
from flashai.boundary.db.CRUD.card_crud import CardCRUD, card_crud
from flashai.boundary.db.CRUD.concept_crud import ConceptCRUD, concept_crud
from flashai.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud

__all__ = [
    "BaseCRUD",
    "CardCRUD",
    "card_crud",
    "ConceptCRUD",
    "concept_crud",
    "DocumentCRUD",
    "document_crud",
]
