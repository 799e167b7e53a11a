"""The live, ordered set of context entries attached to a conversation."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from ..document.host import Document
from ..events.bus import EventBus
from ..events.schemas import ContextCleared
from ..events.schemas import ContextEntryAdded
from ..events.schemas import ContextEntryRemoved
from .models import BufferEntry
from .models import ContextEntry
from .models import FileEntry

logger = logging.getLogger(__name__)


def _event_identity(entry: ContextEntry) -> str:
    if isinstance(entry, BufferEntry):
        return entry.handle.name
    return entry.identity


class ContextEntrySet:
    """Ordered set of context entries that raises mutation events.

    No two entries share an identity; insertion order is kept for display.
    Every successful mutation publishes an event on the bus before the
    mutating call returns, so subscribers (the cost cache) are never stale.
    """

    def __init__(self, bus: EventBus):
        self._bus = bus
        self._entries: dict[object, ContextEntry] = {}

    def __iter__(self) -> Iterator[ContextEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, identity: object) -> bool:
        return self._key(identity) in self._entries

    @staticmethod
    def _key(identity: object) -> object:
        if isinstance(identity, Path):
            return str(identity.expanduser().absolute())
        return identity

    def files(self) -> list[FileEntry]:
        return [entry for entry in self._entries.values() if isinstance(entry, FileEntry)]

    def add_file(self, path: Path | str) -> bool:
        """Attach a file by absolute path.

        Returns:
            True if added, False if the path was already present
        """
        entry = FileEntry(Path(path).expanduser().absolute())
        return self._add(entry)

    def add_buffer(self, document: Document) -> bool:
        """Attach an open document.

        Returns:
            True if added, False if the document was already present
        """
        return self._add(BufferEntry(document))

    def _add(self, entry: ContextEntry) -> bool:
        if entry.identity in self._entries:
            logger.debug(f"Context entry already present: {_event_identity(entry)}")
            return False
        self._entries[entry.identity] = entry
        self._bus.publish(ContextEntryAdded(identity=_event_identity(entry), kind=entry.kind))
        return True

    def remove(self, identity: object) -> bool:
        """Detach an entry by path or buffer handle. Absent identities are a no-op.

        Returns:
            True if an entry was removed
        """
        entry = self._entries.pop(self._key(identity), None)
        if entry is None:
            return False
        self._bus.publish(ContextEntryRemoved(identity=_event_identity(entry), kind=entry.kind))
        return True

    def remove_all(self) -> int:
        """Detach every entry.

        Returns:
            Number of entries removed
        """
        count = len(self._entries)
        self._entries.clear()
        self._bus.publish(ContextCleared(count=count))
        return count
