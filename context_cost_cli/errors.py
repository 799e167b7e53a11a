"""Exception taxonomy for context cost operations.

All errors are surfaced at the command boundary. None of them leave the
live context, the cost cache or the persisted document partially updated.
"""

from __future__ import annotations

from pathlib import Path


class ContextCostError(Exception):
    """Base class for user-facing context cost errors."""


class PricingUnavailableError(ContextCostError):
    """The selected model has no registered rates."""

    def __init__(self, model: str | None):
        self.model = model
        if model is None:
            super().__init__("No model selected; cost cannot be computed")
        else:
            super().__init__(f"No pricing registered for model '{model}'")


class UnsupportedDocumentError(ContextCostError):
    """Persistence was requested on a document type with no registered encoding."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Cannot persist context in '{path.name}': unsupported document type")


class CorruptPersistedContextError(ContextCostError):
    """The stored context blob could not be parsed."""

    def __init__(self, path: Path, blob: str, reason: str = ""):
        self.path = path
        self.blob = blob
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Saved context in '{path.name}' is corrupt{detail}: {blob!r}")


class UserDeclinedConfirmationError(ContextCostError):
    """An overwrite/replace confirmation was declined."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Declined: {action}")
