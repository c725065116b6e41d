"""
Document ORM model.

Stores metadata of uploaded PDFs. The file itself lives in the upload
directory; stored_path points at it.

Dependencies: sqlalchemy, flashai.boundary.db.base
System role: Uploaded document registry
"""

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from flashai.boundary.db.base import Base, TimestampMixin, UUIDMixin


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Uploaded document.

    Attributes:
        id: UUID primary key (auto-generated)
        original_name: File name as uploaded by the user
        stored_path: Path of the stored copy (unique)
        doc_type: "information" or "exam"
        page_count: Rendered page count, 0 until rendering succeeds
        created_at: Upload timestamp (UTC)
        updated_at: Last modification timestamp (UTC)
    """

    __tablename__ = "documents"
    __table_args__ = (
        CheckConstraint("doc_type IN ('information', 'exam')", name="ck_documents_doc_type"),
    )

    original_name: Mapped[str] = mapped_column(String(512), nullable=False)
    stored_path: Mapped[str] = mapped_column(String(1024), nullable=False, unique=True)
    doc_type: Mapped[str] = mapped_column(String(32), nullable=False)
    page_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
