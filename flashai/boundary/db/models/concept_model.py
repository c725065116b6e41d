"""
Concept ORM model.

A named unit of knowledge. Exam uploads raise a concept's weight; information
uploads attach flashcards to it.

Dependencies: sqlalchemy, flashai.boundary.db.base
System role: Knowledge graph node for topics and flashcards
"""

from sqlalchemy import JSON, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from flashai.boundary.db.base import Base, TimestampMixin, UUIDMixin


class ConceptModel(Base, UUIDMixin, TimestampMixin):
    """
    Concept (topic) shared between exams and flashcards.

    Attributes:
        name: Unique concept name
        description: Latest description seen for this concept
        weight: Accumulated exam frequency; higher means more exam-relevant
        source_exam_ids: IDs of exam documents that mentioned the concept
    """

    __tablename__ = "concepts"

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    weight: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    source_exam_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
