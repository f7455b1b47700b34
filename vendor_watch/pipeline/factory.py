"""Convenience factory for wiring the pipeline from settings."""

from __future__ import annotations

import time
from dataclasses import dataclass

from vendor_watch.classify.client import ClassificationClient
from vendor_watch.core.config import Settings
from vendor_watch.pipeline.orchestrator import Clock, EventOrchestrator
from vendor_watch.slack.channels import ChannelResolver
from vendor_watch.slack.client import SlackWebClient
from vendor_watch.slack.publisher import AlertPublisher


@dataclass
class Pipeline:
    """Orchestrator plus the HTTP clients whose lifecycle it depends on."""

    orchestrator: EventOrchestrator
    slack: SlackWebClient
    classifier: ClassificationClient

    async def connect(self) -> None:
        await self.slack.connect()
        await self.classifier.connect()

    async def close(self) -> None:
        await self.classifier.close()
        await self.slack.close()


def create_pipeline(settings: Settings, clock: Clock | None = None) -> Pipeline:
    """Build every component from one immutable Settings value."""
    slack = SlackWebClient(settings.slack)
    classifier = ClassificationClient(settings.classifier)
    resolver = ChannelResolver(slack, settings.allow_list())
    publisher = AlertPublisher(slack, mention=settings.slack.alert_mention)

    orchestrator = EventOrchestrator(
        resolver=resolver,
        classifier=classifier,
        publisher=publisher,
        signing_secret=settings.slack.signing_secret.get_secret_value(),
        require_signature=settings.slack.require_signature,
        workspace_domain=settings.slack.workspace_domain,
        clock=clock or time.time,
    )
    return Pipeline(orchestrator=orchestrator, slack=slack, classifier=classifier)
