"""
Flashcard ORM model.

Carries the FSRS scheduling fields. Ingestion only creates cards in the NEW
state, due immediately; scheduling math lives in the review client.

Dependencies: sqlalchemy, flashai.boundary.db.base
System role: Spaced repetition card storage
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from flashai.boundary.db.base import Base, TimestampMixin, UUIDMixin, utcnow


class CardState(int, enum.Enum):
    """FSRS card states."""

    NEW = 0
    LEARNING = 1
    REVIEW = 2
    RELEARNING = 3


class CardModel(Base, UUIDMixin, TimestampMixin):
    """
    Flashcard with FSRS memory state.

    Attributes:
        concept_id: Owning concept (nullable; cards survive concept deletion)
        source_document_id: Document the card was generated from
        front: Question side
        back: Answer side
        due: Next review time
        stability, difficulty: FSRS memory parameters
        elapsed_days, scheduled_days, reps, lapses: FSRS counters
        state: CardState value
        last_review: Time of the most recent review, None for new cards
    """

    __tablename__ = "cards"

    concept_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("concepts.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    source_document_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id", ondelete="SET NULL"),
        nullable=True,
    )
    front: Mapped[str] = mapped_column(Text, nullable=False)
    back: Mapped[str] = mapped_column(Text, nullable=False)

    due: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    stability: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    difficulty: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    elapsed_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    scheduled_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reps: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    lapses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    state: Mapped[int] = mapped_column(Integer, nullable=False, default=CardState.NEW.value)
    last_review: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
