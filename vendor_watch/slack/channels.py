"""Channel allow-list check backed by a Slack name lookup."""

from __future__ import annotations

import structlog

from vendor_watch.core.types import ChannelAllowList
from vendor_watch.slack.client import SlackWebClient
from vendor_watch.slack.exceptions import SlackApiError

logger = structlog.get_logger(__name__)


class ChannelResolver:
    """Decides whether a channel id belongs to a monitored channel.

    The allow-list holds display names while events carry ids, so each check
    costs one ``conversations.info`` call. Nothing is cached between requests.
    Missing configuration and lookup failures both deny.
    """

    def __init__(self, client: SlackWebClient, allow_list: ChannelAllowList) -> None:
        self._client = client
        self._allow_list = allow_list

    @property
    def allow_list(self) -> ChannelAllowList:
        return self._allow_list

    async def channel_name(self, channel_id: str) -> str | None:
        """Display name for *channel_id*, or None if it cannot be resolved."""
        try:
            return await self._client.conversation_name(channel_id)
        except SlackApiError as exc:
            logger.warning("channel_name_lookup_failed", channel=channel_id, error=str(exc))
            return None

    async def is_monitored(self, channel_id: str) -> bool:
        if self._allow_list.empty:
            logger.warning("no_monitored_channels_configured", channel=channel_id)
            return False

        name = await self.channel_name(channel_id)
        if not name:
            logger.info("channel_unresolved", channel=channel_id)
            return False

        monitored = name in self._allow_list
        logger.info(
            "channel_checked",
            channel=channel_id,
            channel_name=name,
            monitored=monitored,
            allow_list=sorted(self._allow_list.names),
        )
        return monitored
