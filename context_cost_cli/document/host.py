"""
Document host over plain text files.

Provides the document-level services the cost and persistence layers
consume: word counting in a range, file attribute lookup, scoped reading
of external files, and atomic writes of the document text.
"""

import contextlib
import logging
import os
import tempfile
from collections.abc import Iterator
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

# Bytes sniffed when deciding whether a file is binary
BINARY_SNIFF_BYTES = 8192


class DocumentKind(str, Enum):
    """Persistence capability of a document, derived from its type."""

    STRUCTURED_PROPERTY = "structured_property"
    LOCAL_VARIABLE = "local_variable"
    OTHER = "other"


_KIND_BY_SUFFIX = {
    ".org": DocumentKind.STRUCTURED_PROPERTY,
    ".md": DocumentKind.LOCAL_VARIABLE,
    ".markdown": DocumentKind.LOCAL_VARIABLE,
}


def count_words(text: str) -> int:
    """Count whitespace-delimited tokens."""
    return len(text.split())


def is_binary(path: Path) -> bool:
    """Return True if the file looks binary (NUL byte or undecodable prefix)."""
    with open(path, "rb") as f:
        chunk = f.read(BINARY_SNIFF_BYTES)
    if b"\x00" in chunk:
        return True
    try:
        chunk.decode("utf-8")
    except UnicodeDecodeError as e:
        # A multi-byte character cut at the sniff boundary is still text
        truncated = len(chunk) == BINARY_SNIFF_BYTES and e.start >= len(chunk) - 3
        return not truncated
    return False


def file_size(path: Path) -> int:
    """Return the file size in bytes."""
    return os.stat(path).st_size


@contextlib.contextmanager
def open_text(path: Path) -> Iterator[str]:
    """Read a file's content for the duration of the block.

    The file handle is held only inside the block and is closed on every
    exit path, including when the caller raises.
    """
    with open(path, encoding="utf-8", errors="replace") as f:
        yield f.read()


class Document:
    """A chat document backed by a text file.

    Contract:
    - Inputs: path to a .org, .md or other text file (may not exist yet)
    - Outputs: text, kind, word counts
    - Side Effects: write_text() replaces the file atomically
    - Errors: OSError when the file cannot be read or written
    """

    def __init__(self, path: Path, text: str | None = None):
        """Initialize a document.

        Args:
            path: Backing file path
            text: Initial text; if None, the file is read on first access
        """
        self.path = Path(path).expanduser().absolute()
        self._text = text

    def __repr__(self) -> str:
        return f"Document({str(self.path)!r})"

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def kind(self) -> DocumentKind:
        return _KIND_BY_SUFFIX.get(self.path.suffix.lower(), DocumentKind.OTHER)

    @property
    def text(self) -> str:
        if self._text is None:
            self._text = self.path.read_text(encoding="utf-8") if self.path.exists() else ""
        return self._text

    def count_words_in_range(self, start: int | None = None, end: int | None = None) -> int:
        """Count words in text[start:end]; None bounds mean the document edges."""
        return count_words(self.text[start:end])

    def write_text(self, text: str) -> None:
        """Replace the document text and persist it with an atomic write.

        Raises:
            OSError: If unable to write the file
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Write to temp file first (atomic write pattern)
        with tempfile.NamedTemporaryFile(
            mode="w", dir=self.path.parent, prefix=f".{self.path.name}_", suffix=".tmp", delete=False, encoding="utf-8"
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            try:
                tmp_file.write(text)
                tmp_file.flush()

                # Atomic rename
                temp_path.replace(self.path)

            except Exception as e:
                # Clean up temp file on failure
                with contextlib.suppress(Exception):
                    temp_path.unlink()
                raise OSError(f"Failed to write {self.path}: {e}") from e

        self._text = text
        logger.debug(f"Wrote document {self.path}")
