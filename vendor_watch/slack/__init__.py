"""Slack integration — request signing, loop guard, lookups and alert delivery."""

from vendor_watch.slack.channels import ChannelResolver
from vendor_watch.slack.client import SlackWebClient
from vendor_watch.slack.exceptions import (
    SlackApiError,
    SlackConnectionError,
    SlackRateLimitError,
    SlackResponseError,
)
from vendor_watch.slack.formatters import ALERT_SIGNATURE, format_alert_text
from vendor_watch.slack.loop_guard import is_bot_message
from vendor_watch.slack.permalink import build_permalink
from vendor_watch.slack.publisher import AlertPublisher
from vendor_watch.slack.signature import (
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
    compute_slack_signature,
    verify_slack_signature,
)

__all__ = [
    "ALERT_SIGNATURE",
    "AlertPublisher",
    "ChannelResolver",
    "SIGNATURE_HEADER",
    "SlackApiError",
    "SlackConnectionError",
    "SlackRateLimitError",
    "SlackResponseError",
    "SlackWebClient",
    "TIMESTAMP_HEADER",
    "build_permalink",
    "compute_slack_signature",
    "format_alert_text",
    "is_bot_message",
    "verify_slack_signature",
]
