"""Deep links to Slack messages."""

from __future__ import annotations

import structlog

logger = structlog.get_logger(__name__)

SLACK_HOST = "slack.com"


def build_permalink(
    channel: str | None,
    ts: str | None,
    workspace_domain: str | None,
) -> str | None:
    """Return ``https://{domain}.slack.com/archives/{channel}/p{id}`` or None.

    The message id is the timestamp with its separator removed, so
    ``1699999999.000100`` becomes ``p1699999999000100``. None means the link
    should simply be omitted.
    """
    if not workspace_domain:
        logger.debug("permalink_skipped", reason="no_workspace_domain")
        return None
    if not channel or not ts:
        logger.debug("permalink_skipped", reason="missing_channel_or_ts")
        return None

    message_id = ts.replace(".", "", 1)
    return f"https://{workspace_domain}.{SLACK_HOST}/archives/{channel}/p{message_id}"
