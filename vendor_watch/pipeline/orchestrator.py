"""Per-request pipeline: handshake → auth → loop guard → allow-list → classify → alert."""

from __future__ import annotations

import json
import time
from collections.abc import Callable, Mapping
from typing import Any

import structlog
from multidict import CIMultiDict, CIMultiDictProxy
from pydantic import ValidationError

from vendor_watch.classify.client import ClassificationClient
from vendor_watch.core.types import (
    ENVELOPE_ADAPTER,
    EVENT_CALLBACK_TYPE,
    HANDSHAKE_TYPE,
    MESSAGE_EVENT_TYPE,
    EventCallback,
    MessageEvent,
    Outcome,
    UrlVerification,
    WebhookResponse,
)
from vendor_watch.slack.channels import ChannelResolver
from vendor_watch.slack.loop_guard import is_bot_message
from vendor_watch.slack.permalink import build_permalink
from vendor_watch.slack.publisher import AlertPublisher
from vendor_watch.slack.signature import (
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
    verify_slack_signature,
)

logger = structlog.get_logger(__name__)

Clock = Callable[[], float]
Headers = CIMultiDictProxy[str] | CIMultiDict[str] | Mapping[str, str]


def _ack(outcome: Outcome, status: int = 200, body: str | dict[str, Any] = "OK") -> WebhookResponse:
    return WebhookResponse(status=status, body=body, outcome=outcome)


class EventOrchestrator:
    """Runs one inbound webhook request through the whole pipeline.

    - Handshakes are answered before authentication.
    - Guard failures (bad signature, bot message, unmonitored channel,
      missing fields) end the run without touching later stages.
    - Collaborator failures are absorbed by the collaborators themselves.
    - Anything unexpected becomes a 500 at the outermost boundary.

    Nothing is kept between calls to :meth:`handle`.
    """

    def __init__(
        self,
        resolver: ChannelResolver,
        classifier: ClassificationClient,
        publisher: AlertPublisher,
        signing_secret: str = "",
        require_signature: bool = False,
        workspace_domain: str | None = None,
        clock: Clock = time.time,
    ) -> None:
        self._resolver = resolver
        self._classifier = classifier
        self._publisher = publisher
        self._signing_secret = signing_secret
        self._require_signature = require_signature
        self._workspace_domain = workspace_domain or None
        self._clock = clock

    # ── Entry point ─────────────────────────────────────────────

    async def handle(
        self,
        method: str,
        body: str | bytes,
        headers: Headers,
    ) -> WebhookResponse:
        """Process one request and return the acknowledgement to send."""
        if not isinstance(headers, (CIMultiDict, CIMultiDictProxy)):
            headers = CIMultiDict(headers)
        try:
            response = await self._process(method, body, headers)
        except Exception as exc:
            logger.exception("pipeline_error")
            response = _ack(Outcome.ERROR, status=500, body=f"Error: {exc}")

        logger.info(
            "event_processed",
            outcome=response.outcome.value,
            status=response.status,
        )
        return response

    # ── Stages ──────────────────────────────────────────────────

    async def _process(
        self,
        method: str,
        body: str | bytes,
        headers: CIMultiDict[str] | CIMultiDictProxy[str],
    ) -> WebhookResponse:
        if method.upper() != "POST":
            return _ack(Outcome.METHOD_NOT_ALLOWED, status=405, body="Method not allowed")

        try:
            raw = body.decode("utf-8") if isinstance(body, bytes) else body
            payload = json.loads(raw)
        except ValueError:
            logger.warning("invalid_json_payload")
            return _ack(Outcome.INVALID_PAYLOAD, status=400, body="Invalid JSON")

        if not isinstance(payload, dict):
            logger.warning("payload_not_an_object")
            return _ack(Outcome.INVALID_PAYLOAD, status=400, body="Invalid payload")

        payload_type = payload.get("type")
        logger.debug("payload_received", payload_type=payload_type)

        if payload_type == HANDSHAKE_TYPE:
            return self._handshake(payload)

        if not self._authenticate(raw, headers):
            return _ack(Outcome.UNAUTHORIZED, status=401, body="Unauthorized")

        if payload_type != EVENT_CALLBACK_TYPE:
            logger.info("unhandled_payload_type", payload_type=payload_type)
            return _ack(Outcome.UNHANDLED_TYPE)

        try:
            envelope = ENVELOPE_ADAPTER.validate_python(payload)
        except ValidationError as exc:
            logger.warning("invalid_event_envelope", errors=exc.error_count())
            return _ack(Outcome.INVALID_PAYLOAD, status=400, body="Invalid payload")

        if not isinstance(envelope, EventCallback):
            return _ack(Outcome.UNHANDLED_TYPE)

        event_type = envelope.event.get("type") if envelope.event else None
        if event_type != MESSAGE_EVENT_TYPE:
            logger.info("not_a_message_event", event_type=event_type)
            return _ack(Outcome.NOT_A_MESSAGE)

        try:
            event = MessageEvent.model_validate(envelope.event)
        except ValidationError as exc:
            logger.warning("malformed_message_event", errors=exc.error_count())
            return _ack(Outcome.MISSING_FIELDS)
        return await self._process_event(event)

    def _handshake(self, payload: dict[str, Any]) -> WebhookResponse:
        handshake = UrlVerification.model_validate(payload)
        logger.info("url_verification_received", has_challenge=handshake.challenge is not None)
        return _ack(Outcome.HANDSHAKE, body={"challenge": handshake.challenge})

    def _authenticate(
        self,
        raw_body: str,
        headers: CIMultiDict[str] | CIMultiDictProxy[str],
    ) -> bool:
        if not self._signing_secret:
            if self._require_signature:
                logger.error("signing_secret_missing_rejecting")
                return False
            logger.warning("signature_verification_skipped", reason="no_signing_secret")
            return True

        verified = verify_slack_signature(
            raw_body,
            headers.get(TIMESTAMP_HEADER),
            headers.get(SIGNATURE_HEADER),
            self._signing_secret,
            now=self._clock(),
        )
        if not verified:
            logger.warning("signature_rejected")
        return verified

    async def _process_event(self, event: MessageEvent) -> WebhookResponse:
        with structlog.contextvars.bound_contextvars(channel=event.channel, ts=event.ts):
            if is_bot_message(event):
                return _ack(Outcome.LOOP_SUPPRESSED)

            if not event.text or not event.channel:
                logger.info(
                    "message_fields_missing",
                    has_text=bool(event.text),
                    has_channel=bool(event.channel),
                )
                return _ack(Outcome.MISSING_FIELDS)

            if not await self._resolver.is_monitored(event.channel):
                return _ack(Outcome.UNMONITORED_CHANNEL)

            classification = await self._classifier.classify(event.text)
            if not classification.is_vendor_announcement:
                logger.info("no_vendor_announcement")
                return _ack(Outcome.NOT_ANNOUNCEMENT)

            permalink = build_permalink(event.channel, event.ts, self._workspace_domain)
            delivered = await self._publisher.publish(classification, event, permalink)
            logger.info(
                "vendor_announcement_detected",
                vendor=classification.vendor,
                type=classification.type,
                impact=classification.impact,
                permalink=permalink,
                delivered=delivered,
            )
            return _ack(Outcome.ALERTED)
