"""
Document upload API endpoints.

Routes: POST /documents/jobs, POST /documents

Dependencies: flashai.application.services.ingestion_service, flashai.models
System role: Document upload HTTP API
"""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from flashai.api.deps import get_ingestion_service
from flashai.application.services.ingestion_service import IngestionService
from flashai.core.exceptions import AIUnavailableError, ValidationError
from flashai.models.document import DocumentResultsResponse, UploadedFile
from flashai.models.job import UploadJob

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


async def read_uploads(files: list[UploadFile] | None) -> list[UploadedFile]:
    """
    Read multipart uploads into memory.

    Files must be read before the response is sent; the request closes them.

    Args:
        files: Multipart file parts (None when the field is absent)

    Returns:
        list[UploadedFile]: Name and content of each part, in order
    """
    uploads = []
    for file in files or []:
        content = await file.read()
        uploads.append(UploadedFile(name=file.filename or "document.pdf", content=content))
    return uploads


def _to_http_error(error: AIUnavailableError | ValidationError) -> HTTPException:
    if isinstance(error, AIUnavailableError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=error.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message)


@router.post("/jobs", status_code=status.HTTP_202_ACCEPTED, response_model=UploadJob)
async def create_upload_job(
    doc_type: str = Form(default="", alias="docType"),
    files: list[UploadFile] | None = File(default=None),
    service: IngestionService = Depends(get_ingestion_service),
) -> UploadJob:
    """
    Upload PDFs for background processing (non-blocking).

    Creates a job with one progress slot per file and returns it immediately.
    Poll GET /documents/jobs/{job_id} until every file is complete or error.

    Args:
        doc_type: "information" (flashcards) or "exam" (topic weights)
        files: PDF files (multipart form)
        service: Injected IngestionService

    Returns:
        UploadJob: Pending job snapshot

    Raises:
        HTTPException(400): Invalid docType, no files, bad extension or size
        HTTPException(503): AI credentials not configured
    """
    uploads = await read_uploads(files)
    logger.info(
        "Upload job request received",
        extra={"doc_type": doc_type, "files": [u.name for u in uploads]},
    )

    try:
        return service.submit(uploads, doc_type)
    except (AIUnavailableError, ValidationError) as e:
        logger.warning("Upload job rejected", extra={"reason": e.message})
        raise _to_http_error(e) from e


@router.post("", response_model=DocumentResultsResponse)
async def upload_documents(
    doc_type: str = Form(default="", alias="docType"),
    files: list[UploadFile] | None = File(default=None),
    service: IngestionService = Depends(get_ingestion_service),
) -> DocumentResultsResponse:
    """
    Upload PDFs and process them before responding.

    Per-file failures are reported in the results with status "error".

    Returns:
        DocumentResultsResponse: One result per uploaded file, in upload order

    Raises:
        HTTPException(400): Invalid upload
        HTTPException(503): AI credentials not configured
    """
    uploads = await read_uploads(files)

    try:
        results = await service.process_now(uploads, doc_type)
    except (AIUnavailableError, ValidationError) as e:
        raise _to_http_error(e) from e

    return DocumentResultsResponse(results=results)
