"""Event intake and decision pipeline."""

from vendor_watch.pipeline.factory import Pipeline, create_pipeline
from vendor_watch.pipeline.orchestrator import EventOrchestrator

__all__ = [
    "EventOrchestrator",
    "Pipeline",
    "create_pipeline",
]
