#!/usr/bin/env python3
"""Webhook entrypoint — serves the Slack Events API endpoint.

Usage::

    # Run with default config (config/settings.yaml + environment)
    python scripts/run.py

    # Custom config file and port
    python scripts/run.py --config config/settings.yaml --port 3000

    # Override log level
    python scripts/run.py --log-level DEBUG
"""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys

import structlog

from vendor_watch.core.config import load_settings
from vendor_watch.core.logging import setup_logging
from vendor_watch.server.app import start_server

logger = structlog.get_logger(__name__)


async def run(args: argparse.Namespace) -> int:
    """Start the server and run until interrupted."""
    settings = load_settings(args.config)
    setup_logging(level=args.log_level, config=settings.logging)

    if not settings.classifier.api_key.get_secret_value():
        logger.error("classifier_api_key_missing")
        print("GROQ_API_KEY (classifier.api_key) is required.", file=sys.stderr)
        return 1
    if not settings.slack.bot_token.get_secret_value():
        logger.error("slack_bot_token_missing")
        print("SLACK_BOT_TOKEN (slack.bot_token) is required.", file=sys.stderr)
        return 1

    allow_list = settings.allow_list()
    if allow_list.empty:
        logger.warning("no_monitored_channels", detail="every channel will be skipped")
    if not settings.slack.signing_secret.get_secret_value():
        logger.warning(
            "signing_secret_missing",
            require_signature=settings.slack.require_signature,
        )

    runner = await start_server(settings, host=args.host, port=args.port)
    logger.info(
        "server_running",
        host=args.host or settings.server.host,
        port=args.port or settings.server.port,
        path=settings.server.events_path,
        monitored_channels=sorted(allow_list.names),
    )

    # ── Wait for shutdown signal ─────────────────────────────────
    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("shutdown_signal_received")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            # Windows: signal handlers not supported on ProactorEventLoop
            pass

    try:
        await stop_event.wait()
    except KeyboardInterrupt:
        logger.info("keyboard_interrupt")

    logger.info("server_shutting_down")
    await runner.cleanup()
    logger.info("server_stopped")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run the vendor announcement watcher webhook.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override: DEBUG, INFO, WARNING, ERROR",
    )
    parser.add_argument("--host", default=None, help="Bind address override")
    parser.add_argument("--port", type=int, default=None, help="Port override")
    args = parser.parse_args()

    code = asyncio.run(run(args))
    sys.exit(code)


if __name__ == "__main__":
    main()
