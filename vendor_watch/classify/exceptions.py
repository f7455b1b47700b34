"""Exception hierarchy for the classification client."""

from __future__ import annotations


class ClassificationError(Exception):
    """Base exception for all classification errors."""


class ClassificationConnectionError(ClassificationError):
    """Failed to reach the completions API or got a non-success status."""


class ClassificationParseError(ClassificationError):
    """The model answer was missing, not JSON, or had the wrong shape."""
