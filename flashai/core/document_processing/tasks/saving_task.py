"""
Knowledge persistence task.

Registers uploaded documents, loads the existing knowledge base for prompt
context, and saves synthesized exam topics and flashcards. Each save runs in
one transaction; a failure rolls back everything written for the document.

Dependencies: sqlalchemy, flashai.boundary.db
System role: Persistence stage of the ingestion pipeline
"""

import logging
import uuid
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from flashai.boundary.db.CRUD import card_crud, concept_crud, document_crud
from flashai.core.exceptions import PersistenceError

from ..models import CardSummary, ConceptSummary, ExamExtraction, FlashcardExtraction

logger = logging.getLogger(__name__)

ItemProgressCallback = Callable[[int, int], None]


class SavingTask:
    """Database reads and writes needed by the ingestion pipeline."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        """
        Initialize saving task.

        Args:
            session_factory: Async session factory; one session per operation
        """
        self._session_factory = session_factory

    async def register_document(self, original_name: str, stored_path: str, doc_type: str) -> str:
        """
        Insert the document row for a stored upload.

        Returns:
            str: New document ID
        """
        try:
            async with self._session_factory() as db:
                document = await document_crud.create_document(
                    db,
                    original_name=original_name,
                    stored_path=stored_path,
                    doc_type=doc_type,
                )
                await db.commit()
                return str(document.id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"create document: {e}", operation="register_document") from e

    async def update_page_count(self, document_id: str, page_count: int) -> None:
        try:
            async with self._session_factory() as db:
                await document_crud.update_page_count(db, uuid.UUID(document_id), page_count)
                await db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"update page count: {e}", operation="update_page_count") from e

    async def list_concepts(self, limit: int) -> list[ConceptSummary]:
        try:
            async with self._session_factory() as db:
                concepts = await concept_crud.list_by_weight(db, limit=limit)
        except SQLAlchemyError as e:
            raise PersistenceError(f"list concepts: {e}", operation="list_concepts") from e

        return [
            ConceptSummary(name=c.name, description=c.description, weight=c.weight)
            for c in concepts
        ]

    async def list_card_summaries(self, limit: int) -> list[CardSummary]:
        try:
            async with self._session_factory() as db:
                rows = await card_crud.list_summaries(db, limit=limit)
        except SQLAlchemyError as e:
            raise PersistenceError(f"list cards: {e}", operation="list_card_summaries") from e

        return [
            CardSummary(front=row.front, back=row.back, concept_name=row.concept_name or "")
            for row in rows
        ]

    async def save_exam_topics(
        self,
        document_id: str,
        extraction: ExamExtraction,
        progress: ItemProgressCallback | None = None,
    ) -> int:
        """
        Add each topic's frequency to its concept weight.

        Topics with blank names are skipped; non-positive frequencies count as 1.

        Args:
            document_id: Exam document ID
            extraction: Synthesized topics
            progress: Called as progress(topics_done, topic_count)

        Returns:
            int: Number of topics saved
        """
        doc_uuid = uuid.UUID(document_id)
        total = len(extraction.topics)
        saved = 0

        try:
            async with self._session_factory() as db:
                for i, topic in enumerate(extraction.topics):
                    name = topic.name.strip()
                    if name:
                        frequency = topic.frequency if topic.frequency > 0 else 1
                        await concept_crud.upsert_exam_topic(
                            db,
                            document_id=doc_uuid,
                            name=name,
                            description=topic.description.strip(),
                            frequency=frequency,
                        )
                        saved += 1
                    if progress is not None:
                        progress(i + 1, total)
                await db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"save topic: {e}", operation="save_exam_topics") from e

        logger.info(f"{__name__}:save_exam_topics - Saved {saved} topics for {document_id}")
        return saved

    async def save_flashcards(
        self,
        document_id: str,
        extraction: FlashcardExtraction,
        progress: ItemProgressCallback | None = None,
    ) -> int:
        """
        Create or refresh each concept and insert its new cards.

        Concepts with blank names or no cards are skipped.

        Args:
            document_id: Information document ID
            extraction: Synthesized concepts and cards
            progress: Called as progress(concepts_done, concept_count)

        Returns:
            int: Number of cards inserted
        """
        doc_uuid = uuid.UUID(document_id)
        total = len(extraction.concepts)
        inserted = 0

        try:
            async with self._session_factory() as db:
                for i, concept in enumerate(extraction.concepts):
                    name = concept.name.strip()
                    if name and concept.cards:
                        record = await concept_crud.touch(db, name, concept.description.strip())
                        inserted += await card_crud.bulk_create_new(
                            db,
                            concept_id=record.id,
                            source_document_id=doc_uuid,
                            cards=[(card.front, card.back) for card in concept.cards],
                        )
                    if progress is not None:
                        progress(i + 1, total)
                await db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"save flashcards: {e}", operation="save_flashcards") from e

        logger.info(f"{__name__}:save_flashcards - Inserted {inserted} cards for {document_id}")
        return inserted
