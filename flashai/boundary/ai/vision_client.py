"""
Vision API client for multi-page image analysis.

Sends rendered PDF pages to an OpenAI-compatible chat completions endpoint
(Z.AI GLM vision models by default) and returns the model's textual analysis.
Retries transient failures with linear backoff; client errors (4xx) fail fast.

Dependencies: httpx, tenacity, flashai.configs, flashai.core.exceptions
System role: Boundary adapter for the remote vision model
"""

import logging
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception,
    stop_after_attempt,
    wait_incrementing,
)

from flashai.configs.ai import VisionSettings
from flashai.core.exceptions import RemoteServiceError, VisionAPIError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://open.bigmodel.cn/api/paas/v4/"
DEFAULT_MODEL = "glm-4.5v"

STATUS_CATEGORIES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    429: "rate_limited",
    500: "server_error",
    502: "bad_gateway",
    503: "unavailable",
}


def classify_status(status_code: int) -> str:
    """
    Map an HTTP status code to an error category.

    Args:
        status_code: HTTP response status

    Returns:
        str: Category name (unmapped 4xx -> bad_request, other codes -> server_error)
    """
    if status_code in STATUS_CATEGORIES:
        return STATUS_CATEGORIES[status_code]
    if 400 <= status_code < 500:
        return "bad_request"
    return "server_error"


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, RemoteServiceError) and exc.transient


def _error_body(response: httpx.Response) -> tuple[str | None, str]:
    """Extract (error_code, message) from an error response body."""
    try:
        body = response.json()
    except ValueError:
        return None, response.text.strip()[:500]

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        code = error.get("code")
        return (str(code) if code is not None else None), str(error.get("message") or "")
    return None, response.text.strip()[:500]


class VisionClient:
    """
    Async client for the vision chat completions API.

    Safe for concurrent use; the only shared state is the underlying
    httpx.AsyncClient connection pool.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 300.0,
        max_retries: int = 2,
        retry_delay_seconds: float = 2.0,
        title: str = "Flash-AI Vision",
        accept_language: str = "en-US,en",
    ) -> None:
        """
        Initialize vision client.

        Args:
            api_key: Bearer token
            base_url: API base URL; a trailing slash is enforced
            model: Multimodal model ID
            http_client: Shared AsyncClient (created and owned here if None)
            timeout_seconds: Deadline for each individual call
            max_retries: Extra attempts after the first for transient failures
            retry_delay_seconds: Backoff unit; retry N waits N * delay
            title: X-Title header value
            accept_language: Accept-Language header value
        """
        base_url = (base_url or DEFAULT_BASE_URL).strip()
        if not base_url.endswith("/"):
            base_url += "/"

        self._endpoint = f"{base_url}chat/completions"
        self._model = model or DEFAULT_MODEL
        self._timeout = timeout_seconds
        self._max_retries = max(0, max_retries)
        self._retry_delay = max(0.0, retry_delay_seconds)
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "X-Title": title,
            "Accept-Language": accept_language,
        }
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout_seconds)

    @classmethod
    def from_settings(
        cls,
        settings: VisionSettings,
        http_client: httpx.AsyncClient | None = None,
    ) -> "VisionClient":
        return cls(
            api_key=settings.api_key,
            base_url=settings.base_url,
            model=settings.model,
            http_client=http_client,
            timeout_seconds=settings.timeout_seconds,
            max_retries=settings.max_retries,
            retry_delay_seconds=settings.retry_delay_seconds,
            title=settings.title,
            accept_language=settings.accept_language,
        )

    @property
    def max_attempts(self) -> int:
        return self._max_retries + 1

    async def analyze(self, images: list[str], instruction: str) -> str:
        """
        Analyze one or more page images with a single instruction.

        Args:
            images: Image URLs or data URIs, in page order
            instruction: Text prompt appended after the images

        Returns:
            str: Non-empty analysis text

        Raises:
            VisionAPIError: Terminal client error, or retries exhausted
        """
        payload = self._build_payload(images, instruction)
        attempts = self.max_attempts

        retrying = AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=wait_incrementing(start=self._retry_delay, increment=self._retry_delay),
            retry=retry_if_exception(_is_transient),
            before_sleep=self._log_retry,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    return await self._call_once(payload)
        except RetryError as e:
            last = e.last_attempt.exception()
            cause = last.message if isinstance(last, RemoteServiceError) else str(last)
            logger.error(
                f"{__name__}:analyze - Vision API failed after {attempts} attempts",
                extra={"error": cause, "images": len(images)},
            )
            raise VisionAPIError(
                f"vision api failed after {attempts} attempts: {cause}",
                category=getattr(last, "category", "unknown"),
                status_code=getattr(last, "status_code", None),
                transient=False,
            ) from last

        # Unreachable: AsyncRetrying either returns, raises or raises RetryError
        raise VisionAPIError("vision api returned no result", transient=False)

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    def _build_payload(self, images: list[str], instruction: str) -> dict[str, Any]:
        content: list[dict[str, Any]] = [
            {"type": "image_url", "image_url": {"url": image}} for image in images
        ]
        content.append({"type": "text", "text": instruction})

        return {
            "model": self._model,
            "messages": [{"role": "user", "content": content}],
            "thinking": {"type": "enabled"},
            "stream": False,
            "temperature": 0.8,
            "top_p": 0.6,
            "max_tokens": 16384,
        }

    async def _call_once(self, payload: dict[str, Any]) -> str:
        try:
            response = await self._http.post(
                self._endpoint,
                json=payload,
                headers=self._headers,
                timeout=self._timeout,
            )
        except httpx.TimeoutException as e:
            raise VisionAPIError(f"request timed out: {e}", category="timeout") from e
        except httpx.HTTPError as e:
            raise VisionAPIError(f"send request: {e}", category="network") from e

        if response.status_code != 200:
            status = response.status_code
            error_code, detail = _error_body(response)
            details = {"error_code": error_code} if error_code else None
            raise VisionAPIError(
                f"api error (status {status}): {detail or response.reason_phrase}",
                category=classify_status(status),
                status_code=status,
                transient=not 400 <= status < 500,
                details=details,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise VisionAPIError(f"decode response: {e}", category="invalid_response") from e

        choices = body.get("choices") if isinstance(body, dict) else None
        if not isinstance(choices, list) or not choices:
            raise VisionAPIError("no choices in response", category="invalid_response")

        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if not isinstance(message, dict):
            raise VisionAPIError("malformed choice in response", category="invalid_response")

        content = message.get("content")
        if isinstance(content, list):
            content = "".join(
                str(part.get("text", "")) for part in content if isinstance(part, dict)
            )
        content = content.strip() if isinstance(content, str) else ""
        if not content:
            raise VisionAPIError("empty content in response", category="empty_response")

        return content

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            f"{__name__}:analyze - Retry {retry_state.attempt_number}/{self._max_retries} "
            f"after error: {exc}"
        )
