"""
Knowledge service orchestrator.

Read access to the knowledge base built by ingestion: concepts ranked by exam
weight, every flashcard, and card counts per scheduling state.

Dependencies: flashai.boundary.db.CRUD, flashai.models.knowledge
System role: Topics and flashcards read orchestration
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from flashai.boundary.db.CRUD import card_crud, concept_crud
from flashai.core.exceptions import PersistenceError
from flashai.models.knowledge import (
    CardStatsResponse,
    FlashcardResponse,
    FlashcardsResponse,
    TopicResponse,
    TopicsResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_TOPIC_LIMIT = 50


class KnowledgeService:
    """Read-only view of concepts and flashcards."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize knowledge service.

        Args:
            db: AsyncSession for database operations
        """
        self.db = db

    async def list_topics(self, limit: int = DEFAULT_TOPIC_LIMIT) -> TopicsResponse:
        """
        List concepts, heaviest exam weight first.

        Raises:
            PersistenceError: Query failed
        """
        try:
            concepts = await concept_crud.list_by_weight(self.db, limit=limit)
        except SQLAlchemyError as e:
            raise PersistenceError(f"query concepts: {e}", operation="list_topics") from e

        return TopicsResponse(
            topics=[
                TopicResponse(
                    id=str(concept.id),
                    name=concept.name,
                    description=concept.description,
                    weight=concept.weight,
                )
                for concept in concepts
            ]
        )

    async def list_flashcards(self) -> FlashcardsResponse:
        """
        List every flashcard, newest first, with the total count.

        Raises:
            PersistenceError: Query failed
        """
        try:
            rows = await card_crud.list_with_sources(self.db)
            total = await card_crud.count(self.db)
        except SQLAlchemyError as e:
            raise PersistenceError(f"list flashcards: {e}", operation="list_flashcards") from e

        cards = [
            FlashcardResponse(
                id=str(card.id),
                front=card.front,
                back=card.back,
                due=card.due,
                concept=concept_name,
                source=source_name,
                state=card.state,
                stability=card.stability,
                created_at=card.created_at,
            )
            for card, concept_name, source_name in rows
        ]
        logger.debug(f"{__name__}:list_flashcards - Listed {len(cards)} of {total} cards")
        return FlashcardsResponse(flashcards=cards, total=total)

    async def card_stats(self) -> CardStatsResponse:
        """
        Count cards by state plus those due now.

        Raises:
            PersistenceError: Query failed
        """
        try:
            stats = await card_crud.count_by_state(self.db)
        except SQLAlchemyError as e:
            raise PersistenceError(f"get card stats: {e}", operation="card_stats") from e
        return CardStatsResponse(stats=stats)
