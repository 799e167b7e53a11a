"""Data models for context entries and registry rows."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..document.host import Document


@dataclass(frozen=True)
class FileEntry:
    """A file attached to the context. Identity is the absolute path."""

    path: Path

    kind = "file"

    @property
    def identity(self) -> str:
        return str(self.path)


@dataclass(frozen=True, eq=False)
class BufferEntry:
    """An open document attached to the context. Identity is the handle itself."""

    handle: Document

    kind = "buffer"

    @property
    def identity(self) -> Document:
        return self.handle

    def __eq__(self, other: object) -> bool:
        return isinstance(other, BufferEntry) and other.handle is self.handle

    def __hash__(self) -> int:
        return id(self.handle)


ContextEntry = FileEntry | BufferEntry


@dataclass(frozen=True)
class DisplayRow:
    """A file entry joined with its size and flag state, for listing."""

    entry: FileEntry
    size: int
    flagged: bool = False

    @property
    def path(self) -> Path:
        return self.entry.path
