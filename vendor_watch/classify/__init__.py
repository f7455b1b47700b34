"""Announcement classification via an LLM completions endpoint."""

from vendor_watch.classify.client import (
    ClassificationClient,
    extract_content,
    parse_classification,
)
from vendor_watch.classify.exceptions import (
    ClassificationConnectionError,
    ClassificationError,
    ClassificationParseError,
)
from vendor_watch.classify.prompts import SYSTEM_PROMPT, build_messages

__all__ = [
    "ClassificationClient",
    "ClassificationConnectionError",
    "ClassificationError",
    "ClassificationParseError",
    "SYSTEM_PROMPT",
    "build_messages",
    "extract_content",
    "parse_classification",
]
