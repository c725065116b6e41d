"""Tests for the vision API client: request shape, retry policy and error classification."""

import json

import httpx
import pytest

from flashai.boundary.ai.vision_client import VisionClient, classify_status
from flashai.configs.ai import VisionSettings
from flashai.core.exceptions import VisionAPIError


def ok_response(content: str = "page analysis") -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


class ScriptedTransport:
    """Mock transport handler returning queued responses and recording requests."""

    def __init__(self, responses: list) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def make_client(handler: ScriptedTransport, **kwargs) -> VisionClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return VisionClient(
        api_key="test-key",
        base_url="https://vision.test/api/v4",
        http_client=http_client,
        retry_delay_seconds=0,
        **kwargs,
    )


class TestRequestShape:
    """Test the outgoing request."""

    @pytest.mark.asyncio
    async def test_posts_images_then_instruction(self) -> None:
        """Should send image parts followed by one trailing text part."""
        handler = ScriptedTransport([ok_response("done")])
        client = make_client(handler)

        result = await client.analyze(["data:image/png;base64,AAA", "data:image/png;base64,BBB"], "Describe")

        assert result == "done"
        request = handler.requests[0]
        assert str(request.url) == "https://vision.test/api/v4/chat/completions"
        assert request.headers["Authorization"] == "Bearer test-key"
        assert request.headers["X-Title"] == "Flash-AI Vision"

        body = json.loads(request.content)
        content = body["messages"][0]["content"]
        assert [part["type"] for part in content] == ["image_url", "image_url", "text"]
        assert content[0]["image_url"]["url"].endswith("AAA")
        assert content[-1]["text"] == "Describe"
        assert body["model"] == "glm-4.5v"
        assert body["stream"] is False
        assert body["thinking"] == {"type": "enabled"}
        assert body["max_tokens"] == 16384

    def test_from_settings_enforces_trailing_slash(self) -> None:
        """Should normalize the base URL from settings."""
        settings = VisionSettings(api_key="k", base_url="https://x.test/v1", retry_delay_seconds=0)
        assert settings.base_url == "https://x.test/v1/"
        client = VisionClient.from_settings(settings, http_client=httpx.AsyncClient())
        assert client.max_attempts == 3


class TestRetryPolicy:
    """Test transient vs terminal handling."""

    @pytest.mark.asyncio
    async def test_recovers_after_two_server_errors(self) -> None:
        """Should retry 500, 500 and succeed on the third call."""
        handler = ScriptedTransport(
            [httpx.Response(500, text="oops"), httpx.Response(500, text="oops"), ok_response("third time")]
        )
        client = make_client(handler)

        assert await client.analyze(["img"], "Describe") == "third time"
        assert len(handler.requests) == 3

    @pytest.mark.asyncio
    async def test_unauthorized_is_terminal(self) -> None:
        """Should fail after exactly one call on 401."""
        handler = ScriptedTransport(
            [httpx.Response(401, json={"error": {"code": "1001", "message": "bad token"}}), ok_response()]
        )
        client = make_client(handler)

        with pytest.raises(VisionAPIError) as exc_info:
            await client.analyze(["img"], "Describe")

        assert len(handler.requests) == 1
        assert exc_info.value.category == "unauthorized"
        assert exc_info.value.status_code == 401
        assert exc_info.value.transient is False
        assert exc_info.value.details["error_code"] == "1001"
        assert "bad token" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_rate_limit_is_terminal(self) -> None:
        """Should not retry 4xx responses, including 429."""
        handler = ScriptedTransport([httpx.Response(429, text="slow down")])
        client = make_client(handler)

        with pytest.raises(VisionAPIError) as exc_info:
            await client.analyze(["img"], "Describe")

        assert exc_info.value.category == "rate_limited"
        assert len(handler.requests) == 1

    @pytest.mark.asyncio
    async def test_empty_content_exhausts_retries(self) -> None:
        """Should retry empty content and report the attempt count."""
        handler = ScriptedTransport([ok_response("  "), ok_response(""), ok_response("\n")])
        client = make_client(handler)

        with pytest.raises(VisionAPIError) as exc_info:
            await client.analyze(["img"], "Describe")

        assert len(handler.requests) == 3
        assert exc_info.value.message.startswith("vision api failed after 3 attempts:")
        assert "empty content" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_network_errors_and_bad_payloads_are_transient(self) -> None:
        """Should retry transport errors, missing choices and malformed JSON."""
        handler = ScriptedTransport(
            [
                httpx.ConnectError("refused"),
                httpx.Response(200, json={"choices": []}),
                httpx.Response(200, text="not json"),
                ok_response("finally"),
            ]
        )
        client = make_client(handler, max_retries=3)

        assert await client.analyze(["img"], "Describe") == "finally"
        assert len(handler.requests) == 4

    @pytest.mark.asyncio
    async def test_malformed_choices_are_transient(self) -> None:
        """Should retry choices that are not objects or carry a non-object message."""
        handler = ScriptedTransport(
            [
                httpx.Response(200, json={"choices": ["oops"]}),
                httpx.Response(200, json={"choices": [{"message": "oops"}]}),
                httpx.Response(200, json={"choices": {"message": {"content": "x"}}}),
                ok_response("finally"),
            ]
        )
        client = make_client(handler, max_retries=3)

        assert await client.analyze(["img"], "Describe") == "finally"
        assert len(handler.requests) == 4

    @pytest.mark.asyncio
    async def test_malformed_choices_exhaust_as_invalid_response(self) -> None:
        """Should report the malformed payload once retries run out."""
        handler = ScriptedTransport(
            [httpx.Response(200, json={"choices": [{"message": "oops"}]}) for _ in range(3)]
        )
        client = make_client(handler)

        with pytest.raises(VisionAPIError) as exc_info:
            await client.analyze(["img"], "Describe")

        assert exc_info.value.category == "invalid_response"
        assert "malformed choice" in exc_info.value.message
        assert len(handler.requests) == 3

    @pytest.mark.asyncio
    async def test_no_retries_configured(self) -> None:
        """Should make a single attempt when max_retries is 0."""
        handler = ScriptedTransport([httpx.Response(503, text="down")])
        client = make_client(handler, max_retries=0)

        with pytest.raises(VisionAPIError) as exc_info:
            await client.analyze(["img"], "Describe")

        assert len(handler.requests) == 1
        assert exc_info.value.category == "unavailable"
        assert "after 1 attempts" in exc_info.value.message


class TestClassifyStatus:
    """Test HTTP status to category mapping."""

    @pytest.mark.parametrize(
        ("status", "category"),
        [
            (400, "bad_request"),
            (401, "unauthorized"),
            (403, "forbidden"),
            (404, "bad_request"),
            (429, "rate_limited"),
            (500, "server_error"),
            (502, "bad_gateway"),
            (503, "unavailable"),
            (504, "server_error"),
        ],
    )
    def test_mapping(self, status: int, category: str) -> None:
        """Should map known codes and fall back by class."""
        assert classify_status(status) == category
