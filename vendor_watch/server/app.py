"""aiohttp front end for the Slack Events API webhook.

Exposes:
- ``POST /slack/events`` → the event pipeline (other methods get 405)
- ``GET /health``        → liveness probe
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import structlog
from aiohttp import web

from vendor_watch.core.config import Settings
from vendor_watch.core.types import WebhookResponse
from vendor_watch.pipeline.factory import Pipeline, create_pipeline
from vendor_watch.pipeline.orchestrator import EventOrchestrator

logger = structlog.get_logger(__name__)

PIPELINE_KEY: web.AppKey[Pipeline] = web.AppKey("pipeline", Pipeline)
ORCHESTRATOR_KEY: web.AppKey[EventOrchestrator] = web.AppKey("orchestrator", EventOrchestrator)


def to_http_response(result: WebhookResponse) -> web.Response:
    """Render a pipeline result as an aiohttp response."""
    if isinstance(result.body, dict):
        return web.json_response(result.body, status=result.status)
    return web.Response(text=result.body, status=result.status)


async def _handle_events(request: web.Request) -> web.Response:
    orchestrator = request.app[ORCHESTRATOR_KEY]
    body = await request.read()
    result = await orchestrator.handle(request.method, body, request.headers)
    return to_http_response(result)


async def _handle_health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok", "service": "vendor-watch"})


async def _pipeline_ctx(app: web.Application) -> AsyncIterator[None]:
    pipeline = app.get(PIPELINE_KEY)
    if pipeline is None:
        yield
        return
    await pipeline.connect()
    logger.info("pipeline_connected")
    try:
        yield
    finally:
        await pipeline.close()
        logger.info("pipeline_closed")


def create_web_app(
    orchestrator: EventOrchestrator,
    events_path: str = "/slack/events",
    pipeline: Pipeline | None = None,
) -> web.Application:
    """Create the aiohttp web application.

    When *pipeline* is given its HTTP clients are opened on startup and
    closed on cleanup.
    """
    app = web.Application()
    app[ORCHESTRATOR_KEY] = orchestrator
    if pipeline is not None:
        app[PIPELINE_KEY] = pipeline
    app.cleanup_ctx.append(_pipeline_ctx)
    app.router.add_route("*", events_path, _handle_events)
    app.router.add_get("/health", _handle_health)
    return app


def create_app_from_settings(settings: Settings) -> web.Application:
    pipeline = create_pipeline(settings)
    return create_web_app(
        pipeline.orchestrator,
        events_path=settings.server.events_path,
        pipeline=pipeline,
    )


async def start_server(
    settings: Settings,
    host: str | None = None,
    port: int | None = None,
) -> web.AppRunner:
    """Start the webhook server. Returns the runner for cleanup."""
    app = create_app_from_settings(settings)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host or settings.server.host, port or settings.server.port)
    await site.start()
    return runner
