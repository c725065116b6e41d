"""
Document topic ORM model.

Per-exam topic frequencies, keyed by (document, topic).

Dependencies: sqlalchemy, flashai.boundary.db.base
System role: Exam topic provenance
"""

import uuid

from sqlalchemy import ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from flashai.boundary.db.base import Base


class DocumentTopicModel(Base):
    """Topic frequency observed in one exam document."""

    __tablename__ = "document_topics"

    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        primary_key=True,
    )
    topic: Mapped[str] = mapped_column(String(255), primary_key=True)
    frequency: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
