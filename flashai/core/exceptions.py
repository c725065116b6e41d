"""
Exception hierarchy for the Flash-AI ingestion backend.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class FlashAIException(Exception):
    """Base exception for all Flash-AI application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(FlashAIException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class ConfigurationError(FlashAIException):
    """Raised when required configuration is missing or invalid."""

    pass


class AIUnavailableError(ConfigurationError):
    """Raised when AI credentials are not configured; no job is created."""

    def __init__(self, message: str = "ai service unavailable: credentials are not configured") -> None:
        super().__init__(message)


class RemoteServiceError(FlashAIException):
    """
    Raised when a call to a remote model service fails.

    Attributes:
        category: Machine-readable error category (bad_request, rate_limited, ...)
        status_code: HTTP status of the failed response, None for transport errors
        transient: True if a retry may succeed
    """

    def __init__(
        self,
        message: str,
        category: str = "unknown",
        status_code: int | None = None,
        transient: bool = True,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["category"] = category
        if status_code is not None:
            details["status_code"] = status_code
        self.category = category
        self.status_code = status_code
        self.transient = transient
        super().__init__(message, details)


class VisionAPIError(RemoteServiceError):
    """Raised when the vision (page analysis) API call fails."""

    pass


class SynthesisError(FlashAIException):
    """Raised when the synthesis model call fails or returns unusable output."""

    pass


class AnalysisError(FlashAIException):
    """Raised when batch page analysis fails."""

    def __init__(
        self,
        message: str,
        start_page: int | None = None,
        end_page: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if start_page is not None:
            details["pages"] = f"{start_page}-{end_page}"
        super().__init__(message, details)


class RenderError(FlashAIException):
    """Raised when a PDF cannot be rasterized into page images."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if file_path:
            details["file_path"] = file_path
        super().__init__(message, details)


class PersistenceError(FlashAIException):
    """Raised when storing documents, concepts or cards fails."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class DocumentProcessingError(FlashAIException):
    """
    Raised when a document fails at any ingestion stage.

    Attributes:
        document_id: Stored document ID, None when the failure happened before storage
        stage: Pipeline stage that failed (received, convert, analyze, synthesize, save)
        pages: Page count known at the time of failure
    """

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        stage: str | None = None,
        pages: int = 0,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            document_id: ID of the document that failed
            stage: Stage that failed
            pages: Number of pages rendered before the failure
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        if stage:
            details["stage"] = stage
        self.document_id = document_id
        self.stage = stage
        self.pages = pages
        super().__init__(message, details)
