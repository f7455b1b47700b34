"""Slack request signing (HMAC-SHA256, ``v0`` scheme)."""

from __future__ import annotations

import hashlib
import hmac
import time

import structlog

logger = structlog.get_logger(__name__)

TIMESTAMP_HEADER = "X-Slack-Request-Timestamp"
SIGNATURE_HEADER = "X-Slack-Signature"
SIGNATURE_VERSION = "v0"

# Requests older or newer than this are rejected as replays.
REPLAY_WINDOW_SECS = 300


def _as_text(body: str | bytes) -> str:
    return body.decode("utf-8") if isinstance(body, bytes) else body


def compute_slack_signature(body: str | bytes, timestamp: str, signing_secret: str) -> str:
    """Return the ``v0=<hex>`` signature Slack would send for *body*."""
    base = f"{SIGNATURE_VERSION}:{timestamp}:{_as_text(body)}"
    digest = hmac.new(
        signing_secret.encode("utf-8"),
        base.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return f"{SIGNATURE_VERSION}={digest}"


def verify_slack_signature(
    body: str | bytes,
    timestamp: str | None,
    signature: str | None,
    signing_secret: str,
    now: float | None = None,
) -> bool:
    """Check a request against its signing headers.

    Args:
        body: Raw request body exactly as received.
        timestamp: Value of the ``X-Slack-Request-Timestamp`` header.
        signature: Value of the ``X-Slack-Signature`` header.
        signing_secret: Shared app signing secret.
        now: Current unix time. Defaults to the wall clock.

    Returns:
        True only when the headers are present, fresh and match. Every
        failure, including malformed input, returns False.
    """
    if not timestamp or not signature:
        logger.info("signature_headers_missing")
        return False

    try:
        request_ts = int(timestamp)
    except ValueError:
        logger.info("signature_timestamp_invalid", timestamp=timestamp[:32])
        return False

    current = time.time() if now is None else now
    if abs(int(current) - request_ts) > REPLAY_WINDOW_SECS:
        logger.info("signature_timestamp_stale", skew_secs=int(current) - request_ts)
        return False

    try:
        expected = compute_slack_signature(body, timestamp, signing_secret)
        return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))
    except (UnicodeError, TypeError):
        logger.exception("signature_verification_error")
        return False
