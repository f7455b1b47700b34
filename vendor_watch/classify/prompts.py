"""Prompt text for the announcement classifier."""

from __future__ import annotations

SYSTEM_PROMPT = (
    "You are a specialized assistant that detects vendor maintenance announcements, "
    "breaking changes, and service disruptions. Respond only in valid JSON format."
)

_USER_PROMPT_TEMPLATE = """Analyze this message and determine if it's a vendor maintenance or breaking change announcement.

Message: "{message}"

Respond in JSON format with:
{{
  "isVendorAnnouncement": boolean,
  "summary": "brief summary if true, empty if false",
  "vendor": "vendor name if identifiable",
  "type": "maintenance" or "breaking_change" or "outage" if applicable,
  "impact": "high/medium/low" if applicable
}}"""


def build_user_prompt(message: str) -> str:
    return _USER_PROMPT_TEMPLATE.format(message=message)


def build_messages(message: str) -> list[dict[str, str]]:
    """Chat messages (system + user) for one classification request."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_prompt(message)},
    ]
