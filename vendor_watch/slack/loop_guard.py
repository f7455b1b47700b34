"""Detect machine-generated messages so our own alerts are never re-processed.

Slack marks app/bot output inconsistently across API versions, so every
known marker is consulted and any single hit suppresses the event.
"""

from __future__ import annotations

import structlog

from vendor_watch.core.types import MessageEvent
from vendor_watch.slack.formatters import ALERT_SIGNATURE

logger = structlog.get_logger(__name__)

BOT_MESSAGE_SUBTYPE = "bot_message"


def bot_marker(event: MessageEvent) -> str | None:
    """Name of the first bot marker found on *event*, or None for humans."""
    if event.bot_id:
        return "bot_id"
    if event.bot_profile is not None:
        return "bot_profile"
    if event.text and ALERT_SIGNATURE in event.text:
        return "content_signature"
    if event.subtype == BOT_MESSAGE_SUBTYPE:
        return "subtype"
    return None


def is_bot_message(event: MessageEvent) -> bool:
    """Return True if *event* should be ignored as machine-generated."""
    marker = bot_marker(event)
    if marker is None:
        return False
    logger.info(
        "bot_message_detected",
        marker=marker,
        bot_id=event.bot_id,
        bot_name=event.bot_profile.name if event.bot_profile else None,
        channel=event.channel,
    )
    return True
