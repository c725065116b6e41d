"""
Synthesis task.

Builds the document-type specific synthesis prompt and turns the combined
page analysis into exam topics or flashcards.

Dependencies: flashai.boundary.ai.synthesis_client, prompts
System role: Synthesis stage of the ingestion pipeline
"""

import logging

from flashai.boundary.ai.synthesis_client import SynthesisClient

from ..models import ExamExtraction, FlashcardExtraction, FlashcardPromptContext
from ..prompts import (
    EXAM_SYNTHESIS_INSTRUCTION,
    FLASHCARD_SYNTHESIS_INSTRUCTION,
    build_existing_knowledge_prompt,
    build_focus_prompt,
)

logger = logging.getLogger(__name__)


class SynthesisTask:
    """Synthesize typed extractions from page analyses."""

    def __init__(self, exam_client: SynthesisClient, flashcard_client: SynthesisClient) -> None:
        """
        Initialize synthesis task.

        Args:
            exam_client: Client configured for exam topic synthesis
            flashcard_client: Client configured for flashcard generation
        """
        self._exam_client = exam_client
        self._flashcard_client = flashcard_client

    async def synthesize_exam_topics(self, analysis_text: str) -> ExamExtraction:
        extraction = await self._exam_client.synthesize(
            analysis_text,
            hints=[],
            instruction=EXAM_SYNTHESIS_INSTRUCTION,
            schema=ExamExtraction,
        )
        logger.info(f"{__name__}:synthesize_exam_topics - Extracted {len(extraction.topics)} topics")
        return extraction

    async def synthesize_flashcards(
        self,
        analysis_text: str,
        context: FlashcardPromptContext,
    ) -> FlashcardExtraction:
        """
        Generate flashcards, steering away from what the collection already has.

        Args:
            analysis_text: Ordered, page-marked analysis text
            context: Focus concepts plus existing concepts and cards

        Returns:
            FlashcardExtraction: Concepts with their generated cards
        """
        focus_prompt = build_focus_prompt(context.focus_concepts)
        existing_prompt = build_existing_knowledge_prompt(
            context.existing_concepts,
            context.existing_cards,
        )
        extraction = await self._flashcard_client.synthesize(
            analysis_text,
            hints=[focus_prompt, "Existing knowledge context:\n" + existing_prompt],
            instruction=FLASHCARD_SYNTHESIS_INSTRUCTION,
            schema=FlashcardExtraction,
        )
        logger.info(
            f"{__name__}:synthesize_flashcards - Generated {len(extraction.concepts)} concepts"
        )
        return extraction
