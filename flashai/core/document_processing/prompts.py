"""
Prompt templates and prompt-context builders.

Vision instructions for page analysis, synthesis instructions for exam topics
and flashcards, and helpers that render the existing knowledge base into
bounded prompt text.

Dependencies: flashai.core.document_processing.models
System role: Prompt engineering for the ingestion pipeline
"""

import re

from .models import CardSummary, ConceptSummary

MAX_CONTEXT_CONCEPTS = 30
MAX_CONTEXT_CARDS = 80

EXAM_VISION_PROMPT = """Analyze these exam pages and identify key concepts, skills, or knowledge points being tested.
For each page shown, extract the topics and estimate their importance based on question complexity and frequency.
Return your analysis as text describing the concepts found across all pages shown."""

INFORMATION_VISION_PROMPT = """Analyze these pages and extract key educational content, facts, concepts, and information.
Focus on material that would be suitable for creating flashcards for spaced repetition learning.
Return your analysis as detailed text describing all important learnable content across all pages shown."""

EXAM_SYSTEM_PROMPT = (
    "You are an analyst who synthesizes exam topics from detailed page analyses "
    "to drive spaced repetition planning."
)

EXAM_SYNTHESIS_INSTRUCTION = """Based on the following analysis of exam pages, extract and synthesize the key topics.

Strictly respond with a JSON object {"topics":[{"name":"","description":"","frequency":0,"references":[]}], "notes":""}.
Frequency is an integer representing how many times the concept/skill appears across pages (1-10 scale).
Include at most 12 topics, sorted by frequency descending."""

FLASHCARD_SYSTEM_PROMPT = (
    "You are an expert educator who designs spaced repetition flashcards using the FSRS algorithm."
)

FLASHCARD_SYNTHESIS_INSTRUCTION = """Based on the following analysis of document pages, generate spaced repetition flashcards. Only make flashcards of information that is relevant to a potential exam.

Respond with JSON {"concepts":[{"name":"","description":"","cards":[{"front":"","back":""}]}], "notes":""}.
Each concept must contain 2-4 cards. Ensure flashcards are atomic, unambiguous, and use active recall.
Avoid repeating existing flashcards or concepts provided in the context below.
Use Markdown sparingly in answers (only for essential formatting)."""

_WHITESPACE = re.compile(r"\s+")


def sanitize_for_prompt(text: str | None, limit: int) -> str:
    """
    Collapse whitespace and truncate text for inclusion in a prompt.

    Args:
        text: Raw text (None is treated as empty)
        limit: Maximum length in characters; <= 0 disables truncation

    Returns:
        str: Single-line text, ending in "..." when truncated
    """
    collapsed = _WHITESPACE.sub(" ", (text or "").strip())
    if limit <= 0 or len(collapsed) <= limit:
        return collapsed
    if limit > 3:
        return collapsed[: limit - 3] + "..."
    return collapsed[:limit]


def build_focus_prompt(concepts: list[ConceptSummary]) -> str:
    """List the highest-weighted exam concepts the analysis should favour."""
    if not concepts:
        return "No exam data is available. Choose the most instructionally important concepts."

    lines = ["Focus on these high-priority exam concepts (name:weight):"]
    for concept in concepts:
        name = sanitize_for_prompt(concept.name, 120)
        if not name:
            continue
        lines.append(f"- {name} (weight {concept.weight:.2f})")
    return "\n".join(lines) + "\n"


def build_existing_knowledge_prompt(
    concepts: list[ConceptSummary],
    cards: list[CardSummary],
) -> str:
    """
    Describe concepts and flashcards already in the collection.

    Caps output at MAX_CONTEXT_CONCEPTS concepts and MAX_CONTEXT_CARDS cards so
    the prompt stays bounded regardless of collection size.
    """
    if not concepts and not cards:
        return "Existing knowledge base is empty. Create foundational coverage without duplicating content."

    lines = ["Existing knowledge base:"]

    if not concepts:
        lines.append("- No concepts recorded yet.")
    else:
        lines.append("Concepts already covered:")
        for i, concept in enumerate(concepts):
            if i >= MAX_CONTEXT_CONCEPTS:
                lines.append("- (additional concepts omitted)")
                break
            name = sanitize_for_prompt(concept.name, 120) or "Unnamed concept"
            description = sanitize_for_prompt(concept.description, 180)
            lines.append(f"- {name}: {description}" if description else f"- {name}")

    if not cards:
        lines.append("")
        lines.append("No flashcards exist yet.")
        return "\n".join(lines) + "\n"

    lines.append("")
    lines.append("Flashcards already in the collection (avoid duplicating these):")
    written = 0
    for card in cards:
        if written >= MAX_CONTEXT_CARDS:
            lines.append("- (additional cards omitted)")
            break
        front = sanitize_for_prompt(card.front, 200)
        back = sanitize_for_prompt(card.back, 200)
        if not front or not back:
            continue
        concept = sanitize_for_prompt(card.concept_name, 120) or "Unassigned"
        lines.append(f"- [{concept}] Q: {front} | A: {back}")
        written += 1

    return "\n".join(lines) + "\n"


def build_information_vision_prompt(focus_prompt: str) -> str:
    return f"{INFORMATION_VISION_PROMPT}\n\n{focus_prompt}\n"
