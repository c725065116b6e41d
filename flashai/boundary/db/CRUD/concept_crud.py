"""
Concept CRUD operations.

Weight bookkeeping for exam topics and lookup/creation of concepts that
flashcards attach to.

Dependencies: sqlalchemy, flashai.boundary.db.models
System role: Concept persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from flashai.boundary.db.CRUD.base_crud import BaseCRUD
from flashai.boundary.db.models.concept_model import ConceptModel
from flashai.boundary.db.models.document_topic_model import DocumentTopicModel


class ConceptCRUD(BaseCRUD[ConceptModel]):
    """
    CRUD operations for ConceptModel.

    Extends BaseCRUD with name lookups, weight ordering and the exam topic
    upsert that also records per-document topic frequencies.
    """

    def __init__(self) -> None:
        """Initialize ConceptCRUD with ConceptModel."""
        super().__init__(ConceptModel)

    async def get_by_name(self, session: AsyncSession, name: str) -> ConceptModel | None:
        stmt = select(ConceptModel).where(ConceptModel.name == name)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_weight(
        self,
        session: AsyncSession,
        limit: int = 50,
    ) -> Sequence[ConceptModel]:
        """
        List concepts, most exam-relevant first.

        Args:
            session: Async database session
            limit: Maximum number of concepts (<= 0 falls back to 50)

        Returns:
            Sequence of ConceptModels ordered by weight DESC, name ASC
        """
        if limit <= 0:
            limit = 50
        stmt = (
            select(ConceptModel)
            .order_by(ConceptModel.weight.desc(), ConceptModel.name.asc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def upsert_exam_topic(
        self,
        session: AsyncSession,
        document_id: UUID,
        name: str,
        description: str | None,
        frequency: int,
    ) -> ConceptModel:
        """
        Add an exam topic's frequency to its concept.

        Creates the concept with weight = frequency when new; otherwise adds the
        frequency to the existing weight, records the source document and
        refreshes the description. The (document, topic) frequency row is
        inserted or overwritten.

        Args:
            session: Async database session
            document_id: Exam document the topic came from
            name: Topic name
            description: Topic description (empty keeps the existing one)
            frequency: Occurrence count within the exam

        Returns:
            ConceptModel: Created or updated concept
        """
        doc_key = str(document_id)
        concept = await self.get_by_name(session, name)

        if concept is None:
            concept = await self.create(
                session,
                name=name,
                description=description or None,
                weight=float(frequency),
                source_exam_ids=[doc_key],
            )
        else:
            concept.weight = (concept.weight or 0.0) + float(frequency)
            source_ids = list(concept.source_exam_ids or [])
            if doc_key not in source_ids:
                source_ids.append(doc_key)
            # Reassign so the JSON column is flagged dirty
            concept.source_exam_ids = source_ids
            if description:
                concept.description = description
            await session.flush()

        topic_row = await session.get(DocumentTopicModel, (document_id, name))
        if topic_row is None:
            session.add(DocumentTopicModel(document_id=document_id, topic=name, frequency=frequency))
        else:
            topic_row.frequency = frequency
        await session.flush()

        return concept

    async def touch(
        self,
        session: AsyncSession,
        name: str,
        description: str | None = None,
    ) -> ConceptModel:
        """
        Get a concept by name, creating it with zero weight if missing.

        A non-empty description that differs from the stored one replaces it.
        """
        concept = await self.get_by_name(session, name)
        if concept is None:
            return await self.create(
                session,
                name=name,
                description=description or None,
                weight=0.0,
                source_exam_ids=[],
            )

        if description and description != concept.description:
            concept.description = description
            await session.flush()
        return concept


concept_crud = ConceptCRUD()
