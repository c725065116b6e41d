"""
Knowledge base API endpoints.

Routes: GET /topics, GET /cards/all, GET /cards/stats

Dependencies: flashai.application.services.knowledge_service, flashai.models.knowledge
System role: Topics and flashcards HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from flashai.api.deps import get_knowledge_service
from flashai.application.services.knowledge_service import DEFAULT_TOPIC_LIMIT, KnowledgeService
from flashai.core.exceptions import PersistenceError
from flashai.models.knowledge import CardStatsResponse, FlashcardsResponse, TopicsResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["knowledge"])


def _storage_error(error: PersistenceError) -> HTTPException:
    logger.error(f"{__name__} - Knowledge query failed: {error}")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error.message)


@router.get("/topics", response_model=TopicsResponse)
async def list_topics(
    limit: int = Query(default=DEFAULT_TOPIC_LIMIT, ge=1, le=500),
    service: KnowledgeService = Depends(get_knowledge_service),
) -> TopicsResponse:
    """
    List exam topics ranked by accumulated weight.

    Args:
        limit: Maximum number of topics
        service: Injected KnowledgeService

    Returns:
        TopicsResponse: Concepts ordered by weight DESC, name ASC
    """
    try:
        return await service.list_topics(limit)
    except PersistenceError as e:
        raise _storage_error(e) from e


@router.get("/cards/all", response_model=FlashcardsResponse)
async def list_flashcards(
    service: KnowledgeService = Depends(get_knowledge_service),
) -> FlashcardsResponse:
    """List every flashcard, newest first, with its concept and source document."""
    try:
        return await service.list_flashcards()
    except PersistenceError as e:
        raise _storage_error(e) from e


@router.get("/cards/stats", response_model=CardStatsResponse)
async def card_stats(
    service: KnowledgeService = Depends(get_knowledge_service),
) -> CardStatsResponse:
    """Card counts: total, due, new, learning, review, relearning."""
    try:
        return await service.card_stats()
    except PersistenceError as e:
        raise _storage_error(e) from e
