"""Context entries: the live entry set and the file registry view."""

from context_cost_cli.context.entries import ContextEntrySet
from context_cost_cli.context.models import BufferEntry
from context_cost_cli.context.models import ContextEntry
from context_cost_cli.context.models import DisplayRow
from context_cost_cli.context.models import FileEntry
from context_cost_cli.context.registry import ContextFileRegistry

__all__ = [
    "BufferEntry",
    "ContextEntry",
    "ContextEntrySet",
    "ContextFileRegistry",
    "DisplayRow",
    "FileEntry",
]
