"""
Synthesis client for structured extraction from page analyses.

Wraps a LangChain chat model (Gemini by default) and turns the combined
vision analysis into a typed extraction. Model output is tolerated when the
JSON is wrapped in code fences or surrounded by prose. Failures are terminal:
synthesis is not retried.

Dependencies: langchain_core, langchain_google_genai, pydantic, flashai.core.exceptions
System role: Boundary adapter for the remote text-generation model
"""

import asyncio
import logging
from typing import Any, TypeVar

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import BaseModel, ValidationError

from flashai.core.exceptions import SynthesisError

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def extract_json(text: str) -> str:
    """
    Pull the JSON object out of a model response.

    Strips a surrounding ``` fence (and its language tag line), then keeps the
    substring from the first "{" to the last "}".

    Args:
        text: Raw model output

    Returns:
        str: Candidate JSON text (unchanged if no braces are found)
    """
    text = text.strip()
    if text.startswith("```"):
        newline = text.find("\n")
        text = text[newline + 1:] if newline != -1 else text[3:]
        fence = text.rfind("```")
        if fence != -1:
            text = text[:fence]
        text = text.strip()

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        return text[start:end + 1]
    return text


def _message_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type", "text") == "text":
                parts.append(str(part.get("text", "")))
        return "".join(parts)
    return ""


class SynthesisClient:
    """Single-shot structured synthesis over a LangChain chat model."""

    def __init__(
        self,
        chat_model: BaseChatModel,
        system_prompt: str,
        timeout_seconds: float = 120.0,
    ) -> None:
        """
        Initialize synthesis client.

        Args:
            chat_model: LangChain chat model (temperature set at construction)
            system_prompt: System message sent with every request
            timeout_seconds: Deadline for one synthesis call
        """
        self._model = chat_model
        self._system_prompt = system_prompt
        self._timeout = timeout_seconds

    @classmethod
    def for_gemini(
        cls,
        api_key: str,
        model_id: str,
        system_prompt: str,
        temperature: float,
        max_output_tokens: int = 4096,
        timeout_seconds: float = 120.0,
    ) -> "SynthesisClient":
        """Build a client backed by ChatGoogleGenerativeAI."""
        from langchain_google_genai import ChatGoogleGenerativeAI

        chat_model = ChatGoogleGenerativeAI(
            model=model_id,
            google_api_key=api_key,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )
        return cls(chat_model, system_prompt=system_prompt, timeout_seconds=timeout_seconds)

    async def synthesize(
        self,
        analysis_text: str,
        hints: list[str],
        instruction: str,
        schema: type[SchemaT],
    ) -> SchemaT:
        """
        Synthesize a typed extraction from combined page analyses.

        Args:
            analysis_text: Ordered, page-marked analysis text
            hints: Extra prompt sections placed between instruction and analyses
            instruction: Task instruction describing the expected JSON shape
            schema: Pydantic model the JSON must validate against

        Returns:
            SchemaT: Validated extraction

        Raises:
            SynthesisError: Call failed, timed out, or returned unusable output
        """
        sections = [instruction.strip()]
        sections.extend(hint.strip() for hint in hints if hint and hint.strip())
        sections.append("Page Analyses:\n" + analysis_text)
        prompt = "\n\n".join(sections)

        messages = [SystemMessage(content=self._system_prompt), HumanMessage(content=prompt)]

        try:
            response = await asyncio.wait_for(self._model.ainvoke(messages), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise SynthesisError(
                f"synthesis timed out after {self._timeout:.0f}s",
                {"schema": schema.__name__},
            ) from e
        except Exception as e:
            raise SynthesisError(f"synthesis call failed: {e}", {"schema": schema.__name__}) from e

        text = _message_text(response.content).strip()
        if not text:
            raise SynthesisError("synthesis returned empty content", {"schema": schema.__name__})

        try:
            return schema.model_validate_json(extract_json(text))
        except ValidationError as e:
            logger.warning(
                f"{__name__}:synthesize - Unparseable synthesis output",
                extra={"schema": schema.__name__, "raw": text[:500]},
            )
            raise SynthesisError(
                f"parse synthesis response: {e.errors()[0].get('msg', 'invalid json')}",
                {"schema": schema.__name__},
            ) from e
