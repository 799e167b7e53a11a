"""Mutation event schemas for the context cost event system."""

from typing import Literal

from pydantic import BaseModel
from pydantic import Field


class ContextEntryAdded(BaseModel):
    """A file or buffer was attached to the context."""

    type: Literal["context_entry_added"] = "context_entry_added"
    identity: str = Field(description="Path or buffer name of the added entry")
    kind: Literal["file", "buffer"] = Field(description="Entry kind")


class ContextEntryRemoved(BaseModel):
    """A file or buffer was detached from the context."""

    type: Literal["context_entry_removed"] = "context_entry_removed"
    identity: str = Field(description="Path or buffer name of the removed entry")
    kind: Literal["file", "buffer"] = Field(description="Entry kind")


class ContextCleared(BaseModel):
    """All context entries were removed."""

    type: Literal["context_cleared"] = "context_cleared"
    count: int = Field(description="Number of entries removed")


class ModelChanged(BaseModel):
    """The active model selection changed."""

    type: Literal["model_changed"] = "model_changed"
    model: str | None = Field(description="Newly selected model identifier")


class BackendChanged(BaseModel):
    """The active backend selection changed."""

    type: Literal["backend_changed"] = "backend_changed"
    backend: str | None = Field(description="Newly selected backend identifier")


ContextEvent = ContextEntryAdded | ContextEntryRemoved | ContextCleared | ModelChanged | BackendChanged
