"""
Synthesis output models.

Typed shapes of the JSON the synthesis model returns for exam and
information documents, plus the knowledge context fed into flashcard prompts.

Dependencies: pydantic
System role: Contract between synthesis and persistence
"""

from typing import Any

from pydantic import BaseModel, Field


class ExamTopic(BaseModel):
    """A topic tested by an exam, weighted by how often it appears."""

    name: str = ""
    description: str = ""
    frequency: int = 0
    references: list[Any] = Field(default_factory=list)


class ExamExtraction(BaseModel):
    topics: list[ExamTopic] = Field(default_factory=list)
    notes: str = ""


class FlashcardDraft(BaseModel):
    front: str = ""
    back: str = ""


class FlashcardConcept(BaseModel):
    """A concept and the cards generated for it."""

    name: str = ""
    description: str = ""
    cards: list[FlashcardDraft] = Field(default_factory=list)


class FlashcardExtraction(BaseModel):
    concepts: list[FlashcardConcept] = Field(default_factory=list)
    notes: str = ""


class ConceptSummary(BaseModel):
    """Existing concept as seen by prompt builders."""

    name: str
    description: str | None = None
    weight: float = 0.0


class CardSummary(BaseModel):
    """Existing flashcard as seen by prompt builders."""

    front: str
    back: str
    concept_name: str = ""


class FlashcardPromptContext(BaseModel):
    """Knowledge already in the collection, used to steer flashcard generation."""

    focus_concepts: list[ConceptSummary] = Field(default_factory=list)
    existing_concepts: list[ConceptSummary] = Field(default_factory=list)
    existing_cards: list[CardSummary] = Field(default_factory=list)
