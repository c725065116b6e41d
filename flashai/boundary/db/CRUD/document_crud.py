"""
Document CRUD operations.

Dependencies: sqlalchemy, flashai.boundary.db.models.document_model
System role: Document persistence operations
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from flashai.boundary.db.CRUD.base_crud import BaseCRUD
from flashai.boundary.db.models.document_model import DocumentModel


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """CRUD operations for DocumentModel."""

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    async def create_document(
        self,
        session: AsyncSession,
        original_name: str,
        stored_path: str,
        doc_type: str,
    ) -> DocumentModel:
        """
        Register a freshly stored upload with zero pages.

        Args:
            session: Async database session
            original_name: File name as uploaded
            stored_path: Path of the stored copy
            doc_type: "information" or "exam"

        Returns:
            DocumentModel: Created document
        """
        return await self.create(
            session,
            original_name=original_name,
            stored_path=stored_path,
            doc_type=doc_type,
            page_count=0,
        )

    async def update_page_count(
        self,
        session: AsyncSession,
        id: UUID,
        page_count: int,
    ) -> DocumentModel | None:
        return await self.update_by_id(session, id, page_count=page_count)


document_crud = DocumentCRUD()
