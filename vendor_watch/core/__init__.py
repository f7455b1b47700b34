"""Core module — config, types, logging."""

from vendor_watch.core.config import (
    ClassifierConfig,
    LoggingConfig,
    ServerConfig,
    Settings,
    SlackConfig,
    load_settings,
)
from vendor_watch.core.logging import setup_logging
from vendor_watch.core.types import (
    AnnouncementClassification,
    AnnouncementType,
    BotProfile,
    ChannelAllowList,
    EventCallback,
    Impact,
    MessageEvent,
    Outcome,
    UrlVerification,
    WebhookResponse,
)

__all__ = [
    "AnnouncementClassification",
    "AnnouncementType",
    "BotProfile",
    "ChannelAllowList",
    "ClassifierConfig",
    "EventCallback",
    "Impact",
    "LoggingConfig",
    "MessageEvent",
    "Outcome",
    "ServerConfig",
    "Settings",
    "SlackConfig",
    "UrlVerification",
    "WebhookResponse",
    "load_settings",
    "setup_logging",
]
