"""
Test suite for concept, card and document CRUD operations.

Covers exam topic weight accumulation, per-document topic frequencies,
concept lookup/creation for flashcards and card summaries.

System role: Verification of knowledge base persistence
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from flashai.boundary.db.connection import DEFAULT_CONCEPT_NAME
from flashai.boundary.db.CRUD import card_crud, concept_crud, document_crud
from flashai.boundary.db.models import CardModel, CardState, DocumentTopicModel


async def make_document(session: AsyncSession, doc_type: str = "exam") -> uuid.UUID:
    document = await document_crud.create_document(
        session,
        original_name=f"{doc_type}.pdf",
        stored_path=f"/uploads/{uuid.uuid4()}.pdf",
        doc_type=doc_type,
    )
    return document.id


class TestSeed:
    """Test schema bootstrap."""

    @pytest.mark.asyncio
    async def test_default_concept_is_seeded(self, test_async_db: AsyncSession) -> None:
        """Should create the General concept with zero weight."""
        concept = await concept_crud.get_by_name(test_async_db, DEFAULT_CONCEPT_NAME)

        assert concept is not None
        assert concept.weight == 0.0


class TestDocumentCRUD:
    """Test document registration."""

    @pytest.mark.asyncio
    async def test_create_then_update_page_count(self, test_async_db: AsyncSession) -> None:
        """Should start at zero pages and accept the rendered count."""
        document_id = await make_document(test_async_db)

        updated = await document_crud.update_page_count(test_async_db, document_id, 7)

        assert updated is not None
        assert updated.page_count == 7
        assert updated.doc_type == "exam"


class TestUpsertExamTopic:
    """Test ConceptCRUD.upsert_exam_topic."""

    @pytest.mark.asyncio
    async def test_new_topic_gets_frequency_as_weight(self, test_async_db: AsyncSession) -> None:
        """Should create the concept with weight equal to the frequency."""
        document_id = await make_document(test_async_db)

        concept = await concept_crud.upsert_exam_topic(
            test_async_db, document_id, "Eigenvalues", "Spectral", 3
        )

        assert concept.weight == 3.0
        assert concept.description == "Spectral"
        assert concept.source_exam_ids == [str(document_id)]

    @pytest.mark.asyncio
    async def test_weights_accumulate_across_exams(self, test_async_db: AsyncSession) -> None:
        """Should add frequencies and record each source exam once."""
        first = await make_document(test_async_db)
        second = await make_document(test_async_db)

        await concept_crud.upsert_exam_topic(test_async_db, first, "Eigenvalues", "Spectral", 3)
        await concept_crud.upsert_exam_topic(test_async_db, second, "Eigenvalues", "", 2)
        concept = await concept_crud.upsert_exam_topic(test_async_db, second, "Eigenvalues", "", 1)

        assert concept.weight == 6.0
        assert concept.description == "Spectral"
        assert concept.source_exam_ids == [str(first), str(second)]

    @pytest.mark.asyncio
    async def test_document_topic_frequency_is_overwritten(self, test_async_db: AsyncSession) -> None:
        """Should keep one row per (document, topic) holding the latest frequency."""
        document_id = await make_document(test_async_db)

        await concept_crud.upsert_exam_topic(test_async_db, document_id, "Limits", None, 2)
        await concept_crud.upsert_exam_topic(test_async_db, document_id, "Limits", None, 5)

        rows = (
            await test_async_db.execute(
                select(DocumentTopicModel).where(DocumentTopicModel.document_id == document_id)
            )
        ).scalars().all()
        assert [(row.topic, row.frequency) for row in rows] == [("Limits", 5)]


class TestTouchAndListing:
    """Test ConceptCRUD.touch and list_by_weight."""

    @pytest.mark.asyncio
    async def test_touch_creates_with_zero_weight(self, test_async_db: AsyncSession) -> None:
        """Should create a missing concept without weight."""
        concept = await concept_crud.touch(test_async_db, "Mitosis", "Cell division")

        assert concept.weight == 0.0
        assert concept.description == "Cell division"

    @pytest.mark.asyncio
    async def test_touch_keeps_weight_and_refreshes_description(self, test_async_db: AsyncSession) -> None:
        """Should return the existing concept, replacing a changed description."""
        document_id = await make_document(test_async_db)
        existing = await concept_crud.upsert_exam_topic(test_async_db, document_id, "Mitosis", "old", 4)

        touched = await concept_crud.touch(test_async_db, "Mitosis", "new")

        assert touched.id == existing.id
        assert touched.weight == 4.0
        assert touched.description == "new"

    @pytest.mark.asyncio
    async def test_list_by_weight_orders_by_weight_then_name(self, test_async_db: AsyncSession) -> None:
        """Should return heaviest first with ties broken alphabetically."""
        document_id = await make_document(test_async_db)
        await concept_crud.upsert_exam_topic(test_async_db, document_id, "Beta", None, 2)
        await concept_crud.upsert_exam_topic(test_async_db, document_id, "Alpha", None, 2)
        await concept_crud.upsert_exam_topic(test_async_db, document_id, "Gamma", None, 5)

        concepts = await concept_crud.list_by_weight(test_async_db, limit=3)

        assert [c.name for c in concepts] == ["Gamma", "Alpha", "Beta"]


class TestCardCRUD:
    """Test CardCRUD."""

    @pytest.mark.asyncio
    async def test_bulk_create_new_skips_empty_faces(self, test_async_db: AsyncSession) -> None:
        """Should insert only complete cards, all in the NEW state."""
        document_id = await make_document(test_async_db, "information")
        concept = await concept_crud.touch(test_async_db, "Osmosis")

        created = await card_crud.bulk_create_new(
            test_async_db,
            concept_id=concept.id,
            source_document_id=document_id,
            cards=[(" What moves? ", " Water "), ("", "orphan back"), ("orphan front", "  ")],
        )

        assert created == 1
        cards = (await test_async_db.execute(select(CardModel))).scalars().all()
        assert len(cards) == 1
        assert cards[0].front == "What moves?"
        assert cards[0].back == "Water"
        assert cards[0].state == CardState.NEW.value
        assert cards[0].reps == 0
        assert await card_crud.count(test_async_db) == 1

    @pytest.mark.asyncio
    async def test_list_summaries_includes_concept_names(self, test_async_db: AsyncSession) -> None:
        """Should join concept names and leave unassigned cards empty."""
        concept = await concept_crud.touch(test_async_db, "Osmosis")
        await card_crud.bulk_create_new(test_async_db, concept.id, None, [("Q1", "A1")])
        await card_crud.bulk_create_new(test_async_db, None, None, [("Q2", "A2")])

        rows = await card_crud.list_summaries(test_async_db, limit=10)

        by_front = {row.front: row.concept_name for row in rows}
        assert by_front == {"Q1": "Osmosis", "Q2": None}

    @pytest.mark.asyncio
    async def test_list_with_sources_joins_concept_and_document(
        self, test_async_db: AsyncSession
    ) -> None:
        """Should attach concept and source document names, None when unlinked."""
        document_id = await make_document(test_async_db, "information")
        concept = await concept_crud.touch(test_async_db, "Osmosis")
        await card_crud.bulk_create_new(test_async_db, concept.id, document_id, [("Q1", "A1")])
        await card_crud.bulk_create_new(test_async_db, None, None, [("Q2", "A2")])

        rows = await card_crud.list_with_sources(test_async_db)

        by_front = {card.front: (concept_name, source_name) for card, concept_name, source_name in rows}
        assert by_front == {"Q1": ("Osmosis", "information.pdf"), "Q2": (None, None)}
        assert await card_crud.count(test_async_db) == 2

    @pytest.mark.asyncio
    async def test_count_by_state_reports_every_state(self, test_async_db: AsyncSession) -> None:
        """Should count total, due and each state, with zero for unused states."""
        await card_crud.bulk_create_new(test_async_db, None, None, [("Q1", "A1"), ("Q2", "A2")])
        review_card = (await test_async_db.execute(select(CardModel).limit(1))).scalar_one()
        review_card.state = CardState.REVIEW.value
        review_card.due = datetime.now(timezone.utc) + timedelta(days=3)
        await test_async_db.flush()

        stats = await card_crud.count_by_state(test_async_db)

        assert stats == {
            "total": 2,
            "due": 1,
            "new": 1,
            "learning": 0,
            "review": 1,
            "relearning": 0,
        }
