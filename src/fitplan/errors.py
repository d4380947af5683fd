"""
fitplan.errors — pipeline error taxonomy

Every stage raises one of these; the submission boundary (wizard, CLI)
catches ``FitplanError`` and turns it into a single user notification.
"""

from __future__ import annotations


class FitplanError(Exception):
    """Base class for all pipeline failures."""


class ConfigurationError(FitplanError):
    """Service credential missing. Raised before any network attempt."""


class UpstreamError(FitplanError):
    """Transport or provider failure.

    ``str()`` is a generic message; ``detail`` keeps the provider's message.
    """

    def __init__(self, detail: str, message: str = "Failed to generate plan"):
        super().__init__(message)
        self.detail = detail


class ExtractionError(FitplanError):
    """Model text could not be turned into a plan."""


class NoStructuredContentError(ExtractionError):
    """No ``{ ... }`` region in the model text."""


class MalformedContentError(ExtractionError):
    """The bracketed region is not a valid JSON object."""


class PlanValidationError(MalformedContentError):
    """Parsed JSON does not satisfy the plan invariants."""


class PersistenceReadError(FitplanError):
    """Saved plan is unreadable. Callers treat it as "no saved plan"."""
