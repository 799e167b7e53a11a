"""Size-sorted view over context files with flag-and-remove editing."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from ..display.formatters import abbreviate_home
from ..document.host import file_size
from .entries import ContextEntrySet
from .models import DisplayRow

logger = logging.getLogger(__name__)


class ContextFileRegistry:
    """Listing view of the file entries in a context.

    Rows are sorted by size, largest first; equal sizes keep their context
    order. Flags live in this view only and are reset on every refresh.
    Removing flagged rows mutates the live entry set, whose removal events
    make the cost cache recompute.
    """

    def __init__(self, entries: ContextEntrySet, size_of: Callable[[Path], int] = file_size):
        """Initialize and build the first listing.

        Args:
            entries: Live context entry set
            size_of: File size lookup in bytes
        """
        self._entries = entries
        self._size_of = size_of
        self._rows: list[DisplayRow] = []
        self._flags: dict[str, bool] = {}
        self.refresh()

    def refresh(self) -> list[DisplayRow]:
        """Rebuild rows from the live entry set, clearing all flags."""
        sized = []
        for entry in self._entries.files():
            try:
                size = self._size_of(entry.path)
            except OSError as e:
                logger.warning(f"Cannot stat context file {entry.path}: {e}")
                size = 0
            sized.append((entry, size))

        # sorted() is stable, so equal sizes keep their original order
        sized.sort(key=lambda item: item[1], reverse=True)
        self._rows = [DisplayRow(entry=entry, size=size) for entry, size in sized]
        self._flags = {row.entry.identity: False for row in self._rows}
        return self.rows()

    def rows(self) -> list[DisplayRow]:
        return [
            DisplayRow(entry=row.entry, size=row.size, flagged=self._flags[row.entry.identity]) for row in self._rows
        ]

    def is_flagged(self, row_id: str | Path) -> bool:
        return self._flags.get(self._row_key(row_id), False)

    def toggle(self, row_id: str | Path) -> bool:
        """Flip a row's flag.

        Args:
            row_id: Full path of the row's file

        Returns:
            The new flag value

        Raises:
            KeyError: If no row has that path
        """
        key = self._row_key(row_id)
        if key not in self._flags:
            raise KeyError(f"No context file listed for '{row_id}'")
        self._flags[key] = not self._flags[key]
        return self._flags[key]

    def flagged(self) -> list[str]:
        return [row.entry.identity for row in self._rows if self._flags[row.entry.identity]]

    def commit_removal(self) -> list[str]:
        """Remove every flagged file from the live context.

        Returns:
            Paths actually removed, in display order; empty if none were
        """
        flagged = self.flagged()
        if not flagged:
            logger.info("No context files flagged for removal")
            return []

        # Entries removed elsewhere since the last refresh are skipped
        removed = [identity for identity in flagged if self._entries.remove(identity)]

        logger.info(f"Removed {len(removed)} context file(s)")
        self.refresh()
        return removed

    @staticmethod
    def display_path(row: DisplayRow) -> str:
        return abbreviate_home(row.path)

    @staticmethod
    def _row_key(row_id: str | Path) -> str:
        if isinstance(row_id, Path):
            return str(row_id.expanduser().absolute())
        return row_id
