"""Pydantic settings loaded from YAML configuration and the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, SecretStr

from vendor_watch.core.types import ChannelAllowList

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")

# Environment variable → (section, key).
_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "GROQ_API_KEY": ("classifier", "api_key"),
    "SLACK_BOT_TOKEN": ("slack", "bot_token"),
    "SLACK_SIGNING_SECRET": ("slack", "signing_secret"),
    "SLACK_WORKSPACE_DOMAIN": ("slack", "workspace_domain"),
    "MONITORED_CHANNELS": ("slack", "monitored_channels"),
    "ALERT_MENTION": ("slack", "alert_mention"),
    "REQUIRE_SIGNATURE": ("slack", "require_signature"),
    "LOG_LEVEL": ("logging", "level"),
}


class SlackConfig(BaseModel):
    """Slack Web API credentials and monitoring policy."""

    model_config = ConfigDict(frozen=True)

    api_base_url: str = "https://slack.com/api"
    bot_token: SecretStr = SecretStr("")
    signing_secret: SecretStr = SecretStr("")
    require_signature: bool = False
    workspace_domain: str = ""
    monitored_channels: str = ""
    alert_mention: str = ""
    http_timeout_secs: float = 10.0


class ClassifierConfig(BaseModel):
    """Chat-completions endpoint used for classification (Groq by default)."""

    model_config = ConfigDict(frozen=True)

    base_url: str = "https://api.groq.com/openai/v1"
    api_key: SecretStr = SecretStr("")
    model: str = "llama-3.1-8b-instant"
    temperature: float = 0.1
    max_tokens: int = 200
    http_timeout_secs: float = 10.0


class ServerConfig(BaseModel):
    """Inbound webhook listener."""

    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = 8080
    events_path: str = "/slack/events"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    format: str = "json"


class Settings(BaseModel):
    """Root settings container, built once at startup and never mutated."""

    model_config = ConfigDict(frozen=True)

    slack: SlackConfig = SlackConfig()
    classifier: ClassifierConfig = ClassifierConfig()
    server: ServerConfig = ServerConfig()
    logging: LoggingConfig = LoggingConfig()

    def allow_list(self) -> ChannelAllowList:
        """Monitored channel names parsed from ``slack.monitored_channels``."""
        return ChannelAllowList.from_csv(self.slack.monitored_channels)


def _apply_env(data: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    for var, (section, key) in _ENV_OVERRIDES.items():
        value = environ.get(var)
        if value is None or value == "":
            continue
        block = data.get(section)
        if not isinstance(block, dict):
            block = {}
        data[section] = {**block, key: value}
    return data


def load_settings(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings from a YAML file, then apply environment overrides.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml; a missing
            file is not an error.
        environ: Environment mapping. Defaults to ``os.environ``.

    Returns:
        Parsed, immutable Settings instance.
    """
    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
            if isinstance(raw, dict):
                data = raw

    data = _apply_env(data, os.environ if environ is None else environ)
    return Settings(**data)
