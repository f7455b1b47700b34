"""Threaded alert delivery back to the source conversation."""

from __future__ import annotations

import structlog

from vendor_watch.core.types import AnnouncementClassification, MessageEvent
from vendor_watch.slack.client import SlackWebClient
from vendor_watch.slack.exceptions import SlackApiError
from vendor_watch.slack.formatters import format_alert_text

logger = structlog.get_logger(__name__)


class AlertPublisher:
    """Posts the alert as a reply under the original message.

    Delivery is best-effort: failures are logged and reported through the
    return value, never raised.
    """

    def __init__(self, client: SlackWebClient, mention: str | None = None) -> None:
        self._client = client
        self._mention = mention or None

    async def publish(
        self,
        classification: AnnouncementClassification,
        event: MessageEvent,
        permalink: str | None,
    ) -> bool:
        """Send the alert. Returns True on success."""
        if not event.channel:
            logger.warning("alert_skipped", reason="missing_channel")
            return False

        text = format_alert_text(classification, permalink, mention=self._mention)
        try:
            await self._client.post_message(
                event.channel,
                text,
                thread_ts=event.ts,
                mrkdwn=True,
                unfurl_links=False,
                unfurl_media=False,
            )
        except SlackApiError as exc:
            logger.error(
                "alert_post_failed",
                channel=event.channel,
                thread_ts=event.ts,
                error=str(exc),
            )
            return False

        logger.info(
            "alert_posted",
            channel=event.channel,
            thread_ts=event.ts,
            vendor=classification.vendor,
            type=classification.type,
        )
        return True
