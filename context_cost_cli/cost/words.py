"""Word counting over document ranges and context entries."""

import logging
from collections.abc import Callable
from collections.abc import Iterable
from contextlib import AbstractContextManager
from pathlib import Path

from ..context.models import BufferEntry
from ..context.models import ContextEntry
from ..document.host import Document
from ..document.host import count_words
from ..document.host import is_binary
from ..document.host import open_text

logger = logging.getLogger(__name__)


class WordCounter:
    """Counts words in a document range, in files and in context entries.

    Binary files contribute zero words and are skipped, not treated as errors.
    """

    def __init__(
        self,
        binary_check: Callable[[Path], bool] = is_binary,
        opener: Callable[[Path], AbstractContextManager[str]] = open_text,
    ):
        """Initialize with host collaborators.

        Args:
            binary_check: Predicate deciding whether a file is binary
            opener: Scoped reader yielding a file's text
        """
        self._is_binary = binary_check
        self._open = opener

    def count_range(self, document: Document, start: int | None = None, end: int | None = None) -> int:
        return document.count_words_in_range(start, end)

    def count_file(self, path: Path) -> int:
        """Count words in a file, or 0 if it is binary.

        Raises:
            OSError: If the file cannot be read
        """
        if self._is_binary(path):
            logger.debug(f"Skipping binary file {path}")
            return 0
        with self._open(path) as text:
            return count_words(text)

    def count_entry(self, entry: ContextEntry) -> int:
        if isinstance(entry, BufferEntry):
            return count_words(entry.handle.text)
        return self.count_file(entry.path)

    def count_entries(self, entries: Iterable[ContextEntry]) -> int:
        return sum(self.count_entry(entry) for entry in entries)
