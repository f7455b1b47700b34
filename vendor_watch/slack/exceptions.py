"""Exception hierarchy for the Slack Web API client."""

from __future__ import annotations


class SlackApiError(Exception):
    """Base exception for all Slack Web API errors."""


class SlackConnectionError(SlackApiError):
    """Failed to reach the Slack API or got a non-success HTTP status."""


class SlackRateLimitError(SlackApiError):
    """Rate limited by the Slack API (HTTP 429)."""


class SlackResponseError(SlackApiError):
    """Slack answered ``ok: false`` or returned an unusable body."""

    def __init__(self, method: str, error: str) -> None:
        super().__init__(f"{method} failed: {error}")
        self.method = method
        self.error = error
