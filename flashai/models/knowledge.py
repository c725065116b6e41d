"""
Knowledge base response models.

Read-side shapes for the topics and flashcards the ingestion pipeline writes.

Dependencies: pydantic
System role: Topics and flashcards API contract
"""

from datetime import datetime

from pydantic import BaseModel, Field


class TopicResponse(BaseModel):
    """Concept with its accumulated exam weight."""

    id: str
    name: str
    description: str | None = None
    weight: float = 0.0


class TopicsResponse(BaseModel):
    topics: list[TopicResponse] = Field(default_factory=list)


class FlashcardResponse(BaseModel):
    """Flashcard with its concept and source document names."""

    id: str
    front: str
    back: str
    due: datetime | None = None
    concept: str | None = Field(default=None, description="Concept name")
    source: str | None = Field(default=None, description="Original name of the source document")
    state: int = Field(default=0, description="FSRS state: 0 new, 1 learning, 2 review, 3 relearning")
    stability: float = 0.0
    created_at: datetime


class FlashcardsResponse(BaseModel):
    flashcards: list[FlashcardResponse] = Field(default_factory=list)
    total: int = 0


class CardStatsResponse(BaseModel):
    """Card counts: total, due, new, learning, review, relearning."""

    stats: dict[str, int] = Field(default_factory=dict)
