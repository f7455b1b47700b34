"""Domain types for Slack event intake and announcement classification."""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)


# ── Slack event payloads ─────────────────────────────────────────


class BotProfile(BaseModel):
    """Descriptor Slack attaches to messages posted by an app."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    name: str = ""
    app_id: str = ""


class MessageEvent(BaseModel):
    """The ``event`` object of an ``event_callback`` envelope.

    ``ts`` is both the message identity and the thread anchor for replies.
    """

    model_config = ConfigDict(extra="ignore")

    type: str = ""
    channel: str | None = None
    user: str | None = None
    text: str | None = None
    ts: str | None = None
    username: str | None = None
    bot_id: str | None = None
    bot_profile: BotProfile | None = None
    subtype: str | None = None


class UrlVerification(BaseModel):
    """Handshake sent by Slack when the request URL is registered."""

    model_config = ConfigDict(extra="ignore")

    type: Literal["url_verification"]
    challenge: Any = None


class EventCallback(BaseModel):
    """Event notification wrapping a single event."""

    model_config = ConfigDict(extra="ignore")

    type: Literal["event_callback"]
    # Decoded into MessageEvent only when its type is "message".
    event: dict[str, Any] | None = None
    team_id: str | None = None


Envelope = Annotated[UrlVerification | EventCallback, Field(discriminator="type")]

ENVELOPE_ADAPTER: TypeAdapter[UrlVerification | EventCallback] = TypeAdapter(Envelope)

HANDSHAKE_TYPE = "url_verification"
EVENT_CALLBACK_TYPE = "event_callback"
MESSAGE_EVENT_TYPE = "message"


# ── Monitoring configuration ─────────────────────────────────────


class ChannelAllowList(BaseModel):
    """Lowercase channel display names that are monitored.

    An empty list means no channel is monitored.
    """

    model_config = ConfigDict(frozen=True)

    names: frozenset[str] = frozenset()

    @classmethod
    def from_csv(cls, raw: str | None) -> ChannelAllowList:
        """Build from a comma-separated list such as ``"vendors, Ops-Alerts"``."""
        if not raw:
            return cls()
        names = {part.strip().lower() for part in raw.split(",")}
        names.discard("")
        return cls(names=frozenset(names))

    @property
    def empty(self) -> bool:
        return not self.names

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self.names


# ── Classification ───────────────────────────────────────────────


class AnnouncementType(StrEnum):
    """Kind of vendor announcement."""

    MAINTENANCE = "maintenance"
    BREAKING_CHANGE = "breaking_change"
    OUTAGE = "outage"


class Impact(StrEnum):
    """Estimated impact of the announcement."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AnnouncementClassification(BaseModel):
    """Validated verdict from the classification model.

    When ``is_vendor_announcement`` is false none of the other fields may be
    used for alerting.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    is_vendor_announcement: bool = Field(alias="isVendorAnnouncement", strict=True)
    summary: str = ""
    vendor: str | None = None
    type: AnnouncementType | None = None
    impact: Impact | None = None

    @model_validator(mode="before")
    @classmethod
    def _require_summary_when_positive(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        flag = data.get("isVendorAnnouncement", data.get("is_vendor_announcement"))
        if flag is True and data.get("summary") is None:
            raise ValueError("summary is required for a positive classification")
        return data

    @field_validator("summary", mode="before")
    @classmethod
    def _summary_or_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("vendor", mode="before")
    @classmethod
    def _blank_vendor_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("type", mode="before")
    @classmethod
    def _normalise_type(cls, value: Any) -> AnnouncementType | None:
        return _coerce_enum(AnnouncementType, value)

    @field_validator("impact", mode="before")
    @classmethod
    def _normalise_impact(cls, value: Any) -> Impact | None:
        return _coerce_enum(Impact, value)

    @classmethod
    def negative(cls) -> AnnouncementClassification:
        """Safe default used whenever classification cannot be trusted."""
        return cls(is_vendor_announcement=False, summary="")

    def to_wire(self) -> dict[str, Any]:
        """Camel-case dict without unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _coerce_enum(enum_cls: type[StrEnum], value: Any) -> Any:
    # Unknown labels from the model are treated as "not stated".
    if value is None or isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        normalised = value.strip().lower().replace(" ", "_").replace("-", "_")
        try:
            return enum_cls(normalised)
        except ValueError:
            return None
    return None


# ── Pipeline results ─────────────────────────────────────────────


class Outcome(StrEnum):
    """Terminal state of one pipeline run."""

    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    INVALID_PAYLOAD = "INVALID_PAYLOAD"
    HANDSHAKE = "HANDSHAKE"
    UNAUTHORIZED = "UNAUTHORIZED"
    UNHANDLED_TYPE = "UNHANDLED_TYPE"
    NOT_A_MESSAGE = "NOT_A_MESSAGE"
    LOOP_SUPPRESSED = "LOOP_SUPPRESSED"
    MISSING_FIELDS = "MISSING_FIELDS"
    UNMONITORED_CHANNEL = "UNMONITORED_CHANNEL"
    NOT_ANNOUNCEMENT = "NOT_ANNOUNCEMENT"
    ALERTED = "ALERTED"
    ERROR = "ERROR"


class WebhookResponse(BaseModel):
    """Framework-independent acknowledgement for one inbound request."""

    status: int = 200
    body: str | dict[str, Any] = "OK"
    outcome: Outcome = Outcome.UNHANDLED_TYPE
