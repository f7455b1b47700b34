"""Tests for ClassificationClient — request shape, parsing, fail-safe default."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from pydantic import SecretStr

from vendor_watch.classify.client import (
    ClassificationClient,
    extract_content,
    parse_classification,
)
from vendor_watch.classify.exceptions import (
    ClassificationConnectionError,
    ClassificationParseError,
)
from vendor_watch.classify.prompts import SYSTEM_PROMPT, build_messages
from vendor_watch.core.config import ClassifierConfig
from vendor_watch.core.types import AnnouncementType, Impact

_SAFE_DEFAULT = {"isVendorAnnouncement": False, "summary": ""}

# ── Helpers ─────────────────────────────────────────────────────


def _cfg(**overrides: object) -> ClassifierConfig:
    defaults: dict[str, object] = {
        "base_url": "https://test.groq.com/openai/v1",
        "api_key": SecretStr("gsk_fake"),
    }
    defaults.update(overrides)
    return ClassifierConfig(**defaults)  # type: ignore[arg-type]


def _completion(content: str | None) -> dict[str, Any]:
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


def _response(body: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code=status_code,
        json=body,
        request=httpx.Request("POST", "https://test.groq.com/openai/v1/chat/completions"),
    )


_POSITIVE_ANSWER = json.dumps({
    "isVendorAnnouncement": True,
    "summary": "GitHub Actions maintenance Saturday",
    "vendor": "GitHub",
    "type": "maintenance",
    "impact": "medium",
})


# ── Prompt construction ─────────────────────────────────────────


class TestPrompts:
    def test_system_and_user_roles(self) -> None:
        messages = build_messages("Stripe is deprecating v1 charges")
        assert [m["role"] for m in messages] == ["system", "user"]
        assert messages[0]["content"] == SYSTEM_PROMPT
        assert 'Message: "Stripe is deprecating v1 charges"' in messages[1]["content"]
        assert "isVendorAnnouncement" in messages[1]["content"]

    def test_braces_in_message_preserved(self) -> None:
        messages = build_messages("payload {\"a\": 1}")
        assert 'payload {"a": 1}' in messages[1]["content"]

    def test_request_payload(self) -> None:
        client = ClassificationClient(_cfg())
        payload = client.build_request("hello")
        assert payload["model"] == "llama-3.1-8b-instant"
        assert payload["temperature"] == 0.1
        assert payload["max_tokens"] == 200
        assert len(payload["messages"]) == 2


# ── Parsing ─────────────────────────────────────────────────────


class TestParsing:
    def test_parse_positive(self) -> None:
        c = parse_classification(_POSITIVE_ANSWER)
        assert c.is_vendor_announcement is True
        assert c.vendor == "GitHub"
        assert c.type == AnnouncementType.MAINTENANCE
        assert c.impact == Impact.MEDIUM

    def test_parse_code_fenced(self) -> None:
        c = parse_classification(f"```json\n{_POSITIVE_ANSWER}\n```")
        assert c.is_vendor_announcement is True

    def test_parse_bare_fence(self) -> None:
        c = parse_classification(f"```\n{_POSITIVE_ANSWER}\n```")
        assert c.summary == "GitHub Actions maintenance Saturday"

    @pytest.mark.parametrize(
        "content",
        [
            "not json at all",
            "[true]",
            '{"isVendorAnnouncement": "yes", "summary": ""}',
            '{"summary": "missing flag"}',
            '{"isVendorAnnouncement": true}',
        ],
    )
    def test_parse_rejects_bad_shapes(self, content: str) -> None:
        with pytest.raises(ClassificationParseError):
            parse_classification(content)

    @pytest.mark.parametrize(
        "body",
        [
            [],
            {},
            {"choices": []},
            {"choices": ["x"]},
            {"choices": [{"message": {}}]},
            _completion(None),
            _completion("   "),
        ],
    )
    def test_extract_content_rejects(self, body: Any) -> None:
        with pytest.raises(ClassificationParseError):
            extract_content(body)


# ── End-to-end against a patched HTTP client ────────────────────


class TestClassify:
    async def test_positive_classification(self) -> None:
        client = ClassificationClient(_cfg())
        await client.connect()
        try:
            with patch.object(client._http, "post", new_callable=AsyncMock) as mock_post:  # type: ignore[union-attr]
                mock_post.return_value = _response(_completion(_POSITIVE_ANSWER))
                result = await client.classify("GitHub Actions maintenance Saturday 10:00 UTC")

            assert result.is_vendor_announcement is True
            args, kwargs = mock_post.call_args
            assert args[0] == "https://test.groq.com/openai/v1/chat/completions"
            assert kwargs["headers"]["Authorization"] == "Bearer gsk_fake"
            assert kwargs["json"]["temperature"] == 0.1
        finally:
            await client.close()

    async def test_negative_classification(self) -> None:
        client = ClassificationClient(_cfg())
        await client.connect()
        try:
            with patch.object(client._http, "post", new_callable=AsyncMock) as mock_post:  # type: ignore[union-attr]
                mock_post.return_value = _response(
                    _completion('{"isVendorAnnouncement": false, "summary": ""}')
                )
                result = await client.classify("lunch?")
            assert result.to_wire() == _SAFE_DEFAULT
        finally:
            await client.close()

    async def test_http_error_returns_safe_default(self) -> None:
        client = ClassificationClient(_cfg())
        await client.connect()
        try:
            with patch.object(client._http, "post", new_callable=AsyncMock) as mock_post:  # type: ignore[union-attr]
                mock_post.return_value = _response({"error": "rate limit"}, status_code=429)
                result = await client.classify("text")
            assert result.to_wire() == _SAFE_DEFAULT
        finally:
            await client.close()

    async def test_transport_error_returns_safe_default(self) -> None:
        client = ClassificationClient(_cfg())
        await client.connect()
        try:
            with patch.object(client._http, "post", new_callable=AsyncMock) as mock_post:  # type: ignore[union-attr]
                mock_post.side_effect = httpx.ReadTimeout("slow")
                result = await client.classify("text")
            assert result.to_wire() == _SAFE_DEFAULT
        finally:
            await client.close()

    async def test_non_boolean_flag_returns_safe_default(self) -> None:
        client = ClassificationClient(_cfg())
        await client.connect()
        try:
            with patch.object(client._http, "post", new_callable=AsyncMock) as mock_post:  # type: ignore[union-attr]
                mock_post.return_value = _response(
                    _completion('{"isVendorAnnouncement": "true", "summary": "x"}')
                )
                result = await client.classify("text")
            assert result.to_wire() == _SAFE_DEFAULT
        finally:
            await client.close()

    async def test_non_json_body_returns_safe_default(self) -> None:
        client = ClassificationClient(_cfg())
        await client.connect()
        try:
            with patch.object(client._http, "post", new_callable=AsyncMock) as mock_post:  # type: ignore[union-attr]
                mock_post.return_value = httpx.Response(
                    502,
                    content=b"Bad Gateway",
                    request=httpx.Request("POST", "https://test.groq.com/"),
                )
                result = await client.classify("text")
            assert result.to_wire() == _SAFE_DEFAULT
        finally:
            await client.close()

    async def test_not_connected_returns_safe_default(self) -> None:
        client = ClassificationClient(_cfg())
        result = await client.classify("text")
        assert result.to_wire() == _SAFE_DEFAULT

    async def test_request_classification_raises(self) -> None:
        client = ClassificationClient(_cfg())
        with pytest.raises(ClassificationConnectionError):
            await client.request_classification("text")
