"""API-specific dependencies."""

from .dependencies import (
    ServiceCache,
    get_ingestion_service,
    get_job_tracker,
    get_knowledge_service,
    get_service_cache,
    get_settings_dependency,
)

__all__ = [
    "ServiceCache",
    "get_ingestion_service",
    "get_job_tracker",
    "get_knowledge_service",
    "get_service_cache",
    "get_settings_dependency",
]
