"""Minimal async Slack Web API client — conversations.info and chat.postMessage."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from vendor_watch.core.config import SlackConfig
from vendor_watch.slack.exceptions import (
    SlackConnectionError,
    SlackRateLimitError,
    SlackResponseError,
)

logger = structlog.get_logger(__name__)


class SlackWebClient:
    """Thin wrapper over the two Web API methods the pipeline needs.

    Every failure is raised as a :class:`SlackApiError` subclass; callers
    decide the fallback.

    Usage::

        client = SlackWebClient(settings.slack)
        await client.connect()
        name = await client.conversation_name("C0123")
        await client.close()
    """

    def __init__(self, config: SlackConfig) -> None:
        self._config = config
        self._base_url = config.api_base_url.rstrip("/")
        self._token = config.bot_token.get_secret_value()
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

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"}

    def _require_http(self) -> httpx.AsyncClient:
        if self._http is None:
            raise SlackConnectionError("HTTP client not connected")
        return self._http

    async def conversation_name(self, channel_id: str) -> str:
        """Resolve a channel id to its display name (without ``#``)."""
        http = self._require_http()
        method = "conversations.info"
        try:
            response = await http.get(
                f"{self._base_url}/{method}",
                params={"channel": channel_id},
                headers=self._headers(),
            )
        except httpx.HTTPError as exc:
            raise SlackConnectionError(f"{method} request failed: {exc}") from exc

        data = self._decode(method, response)
        channel = data.get("channel")
        name = channel.get("name") if isinstance(channel, dict) else None
        if not isinstance(name, str) or not name:
            raise SlackResponseError(method, "channel_name_missing")
        return name

    async def post_message(
        self,
        channel: str,
        text: str,
        thread_ts: str | None = None,
        *,
        mrkdwn: bool = True,
        unfurl_links: bool = False,
        unfurl_media: bool = False,
    ) -> dict[str, Any]:
        """Post *text* to *channel*, as a thread reply when *thread_ts* is set."""
        http = self._require_http()
        method = "chat.postMessage"
        payload: dict[str, Any] = {
            "channel": channel,
            "text": text,
            "mrkdwn": mrkdwn,
            "unfurl_links": unfurl_links,
            "unfurl_media": unfurl_media,
        }
        if thread_ts:
            payload["thread_ts"] = thread_ts

        try:
            response = await http.post(
                f"{self._base_url}/{method}",
                json=payload,
                headers=self._headers(),
            )
        except httpx.HTTPError as exc:
            raise SlackConnectionError(f"{method} request failed: {exc}") from exc

        return self._decode(method, response)

    @staticmethod
    def _decode(method: str, response: httpx.Response) -> dict[str, Any]:
        if response.status_code == 429:
            raise SlackRateLimitError(
                f"{method} rate limited (retry-after={response.headers.get('Retry-After', '?')})"
            )
        if not response.is_success:
            raise SlackConnectionError(f"{method} returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise SlackResponseError(method, "invalid_json") from exc

        if not isinstance(data, dict):
            raise SlackResponseError(method, "non_object_body")
        if not data.get("ok"):
            raise SlackResponseError(method, str(data.get("error") or "unknown_error"))
        return data
