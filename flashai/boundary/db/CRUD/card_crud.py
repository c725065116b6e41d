"""
Flashcard CRUD operations.

Dependencies: sqlalchemy, flashai.boundary.db.models
System role: Flashcard persistence operations
"""

from datetime import datetime, timezone
from typing import Sequence
from uuid import UUID

from sqlalchemy import Row, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from flashai.boundary.db.CRUD.base_crud import BaseCRUD
from flashai.boundary.db.models.card_model import CardModel, CardState
from flashai.boundary.db.models.concept_model import ConceptModel
from flashai.boundary.db.models.document_model import DocumentModel


class CardCRUD(BaseCRUD[CardModel]):
    """CRUD operations for CardModel."""

    def __init__(self) -> None:
        """Initialize CardCRUD with CardModel."""
        super().__init__(CardModel)

    async def bulk_create_new(
        self,
        session: AsyncSession,
        concept_id: UUID | None,
        source_document_id: UUID | None,
        cards: list[tuple[str, str]],
    ) -> int:
        """
        Insert unseen cards: state NEW, due now, zeroed FSRS counters.

        Faces are stripped; pairs with an empty front or back are skipped.

        Args:
            session: Async database session
            concept_id: Concept the cards belong to
            source_document_id: Document the cards were generated from
            cards: (front, back) pairs

        Returns:
            int: Number of cards inserted
        """
        now = datetime.now(timezone.utc)
        created = 0
        for front, back in cards:
            front, back = (front or "").strip(), (back or "").strip()
            if not front or not back:
                continue
            session.add(
                CardModel(
                    concept_id=concept_id,
                    source_document_id=source_document_id,
                    front=front,
                    back=back,
                    due=now,
                    stability=0.0,
                    difficulty=0.0,
                    elapsed_days=0,
                    scheduled_days=0,
                    reps=0,
                    lapses=0,
                    state=CardState.NEW.value,
                    last_review=None,
                )
            )
            created += 1

        if created:
            await session.flush()
        return created

    async def list_summaries(
        self,
        session: AsyncSession,
        limit: int = 50,
    ) -> Sequence[Row]:
        """
        List newest cards with their concept names.

        Args:
            session: Async database session
            limit: Maximum number of cards (<= 0 falls back to 50)

        Returns:
            Rows with front, back and concept_name ("" when unassigned)
        """
        if limit <= 0:
            limit = 50
        stmt = (
            select(
                CardModel.front,
                CardModel.back,
                ConceptModel.name.label("concept_name"),
            )
            .outerjoin(ConceptModel, CardModel.concept_id == ConceptModel.id)
            .order_by(CardModel.created_at.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.all()

    async def list_with_sources(
        self,
        session: AsyncSession,
        limit: int | None = None,
    ) -> Sequence[Row]:
        """
        List cards newest first with their concept and source document names.

        Args:
            session: Async database session
            limit: Maximum number of cards (None for all)

        Returns:
            Rows with CardModel, concept_name and source_name (None when unlinked)
        """
        stmt = (
            select(
                CardModel,
                ConceptModel.name.label("concept_name"),
                DocumentModel.original_name.label("source_name"),
            )
            .outerjoin(ConceptModel, CardModel.concept_id == ConceptModel.id)
            .outerjoin(DocumentModel, CardModel.source_document_id == DocumentModel.id)
            .order_by(CardModel.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.all()

    async def count(self, session: AsyncSession) -> int:
        result = await session.execute(select(func.count()).select_from(CardModel))
        return result.scalar_one()

    async def count_by_state(self, session: AsyncSession, now: datetime | None = None) -> dict[str, int]:
        """
        Count cards per FSRS state plus those already due.

        Args:
            session: Async database session
            now: Reference time for the due count (defaults to current UTC time)

        Returns:
            dict with total, due, new, learning, review and relearning counts
        """
        now = now or datetime.now(timezone.utc)
        stats = {"total": await self.count(session)}

        due = await session.execute(
            select(func.count())
            .select_from(CardModel)
            .where(CardModel.due <= now)
        )
        stats["due"] = due.scalar_one()

        by_state = dict(
            (
                await session.execute(
                    select(CardModel.state, func.count()).group_by(CardModel.state)
                )
            ).all()
        )
        for state in CardState:
            stats[state.name.lower()] = by_state.get(state.value, 0)
        return stats


card_crud = CardCRUD()
