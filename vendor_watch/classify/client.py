"""LLM announcement classifier over an OpenAI-compatible chat-completions API."""

from __future__ import annotations

import json
import re
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from vendor_watch.classify.exceptions import (
    ClassificationConnectionError,
    ClassificationError,
    ClassificationParseError,
)
from vendor_watch.classify.prompts import build_messages
from vendor_watch.core.config import ClassifierConfig
from vendor_watch.core.types import AnnouncementClassification

logger = structlog.get_logger(__name__)

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


def _strip_code_fence(content: str) -> str:
    stripped = content.strip()
    match = _CODE_FENCE_RE.match(stripped)
    return match.group(1) if match else stripped


def extract_content(body: Any) -> str:
    """Pull ``choices[0].message.content`` out of a completions response."""
    if not isinstance(body, dict):
        raise ClassificationParseError("completion body is not an object")
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        raise ClassificationParseError("no choices in completion")
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str) or not content.strip():
        raise ClassificationParseError("no content in completion")
    return content


def parse_classification(content: str) -> AnnouncementClassification:
    """Validate the model's JSON answer.

    Raises:
        ClassificationParseError: Not JSON, not an object, or
            ``isVendorAnnouncement`` is not a boolean.
    """
    try:
        data = json.loads(_strip_code_fence(content))
    except ValueError as exc:
        raise ClassificationParseError("answer is not valid JSON") from exc

    if not isinstance(data, dict):
        raise ClassificationParseError("answer is not a JSON object")

    try:
        return AnnouncementClassification.model_validate(data)
    except ValidationError as exc:
        raise ClassificationParseError(
            f"answer has invalid shape: {exc.error_count()} error(s)"
        ) from exc


class ClassificationClient:
    """Sends message text to the completions endpoint and validates the verdict.

    :meth:`classify` never raises: any failure yields
    :meth:`AnnouncementClassification.negative`, so a flaky model can only
    cause a missed alert, never a false one.
    """

    def __init__(self, config: ClassifierConfig) -> None:
        self._config = config
        self._url = f"{config.base_url.rstrip('/')}/chat/completions"
        self._api_key = config.api_key.get_secret_value()
        self._http: httpx.AsyncClient | None = None

    @property
    def connected(self) -> bool:
        """Whether the HTTP client is active."""
        return self._http is not None and not self._http.is_closed

    async def connect(self) -> None:
        """Create the httpx async client."""
        if self.connected:
            return
        self._http = httpx.AsyncClient(
            timeout=httpx.Timeout(self._config.http_timeout_secs),
        )

    async def close(self) -> None:
        """Close the httpx async client."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    def build_request(self, text: str) -> dict[str, Any]:
        """JSON payload for one completion request."""
        return {
            "model": self._config.model,
            "messages": build_messages(text),
            "temperature": self._config.temperature,
            "max_tokens": self._config.max_tokens,
        }

    async def request_classification(self, text: str) -> AnnouncementClassification:
        """Call the endpoint and parse the answer, raising on any failure."""
        if self._http is None:
            raise ClassificationConnectionError("HTTP client not connected")

        try:
            response = await self._http.post(
                self._url,
                json=self.build_request(text),
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
        except httpx.HTTPError as exc:
            raise ClassificationConnectionError(f"completion request failed: {exc}") from exc

        if not response.is_success:
            raise ClassificationConnectionError(
                f"completion API returned HTTP {response.status_code}"
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise ClassificationParseError("completion body is not JSON") from exc

        return parse_classification(extract_content(body))

    async def classify(self, text: str) -> AnnouncementClassification:
        try:
            result = await self.request_classification(text)
        except ClassificationError as exc:
            logger.warning(
                "classification_failed",
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return AnnouncementClassification.negative()

        logger.info("classification_result", **result.to_wire())
        return result
