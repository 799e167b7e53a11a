"""
Context persistence inside chat documents.

The file paths of a context are stored in the document itself as a JSON
array, using the encoding registered for the document's kind:

- Org documents keep it in the top-level property drawer::

    :PROPERTIES:
    :CHAT_CONTEXT: ["/home/me/notes.txt", "/home/me/src/app.py"]
    :END:

- Markdown documents keep it in a trailing local variables section::

    <!-- Local Variables: -->
    <!-- chat-context: ["/home/me/notes.txt"] -->
    <!-- End: -->

Buffer entries are never persisted; they have no stable identity once the
session ends.
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC
from abc import abstractmethod
from collections.abc import Callable
from collections.abc import Iterable

from ..context.entries import ContextEntrySet
from ..context.models import ContextEntry
from ..context.models import FileEntry
from ..errors import CorruptPersistedContextError
from ..errors import UnsupportedDocumentError
from ..errors import UserDeclinedConfirmationError
from .host import Document
from .host import DocumentKind

logger = logging.getLogger(__name__)

PROPERTY_KEY = "CHAT_CONTEXT"
LOCAL_VARIABLE_NAME = "chat-context"


def serialize_paths(paths: list[str]) -> str:
    return json.dumps(paths, ensure_ascii=False)


def parse_paths(blob: str) -> list[str]:
    """Parse a stored blob back into a path list.

    Raises:
        ValueError: If the blob is not a JSON array of strings
    """
    value = json.loads(blob)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError("expected a list of paths")
    return value


class ContextEncoding(ABC):
    """Reads and writes the stored blob within a document's text."""

    @abstractmethod
    def read_blob(self, text: str) -> str | None:
        """Return the stored blob, or None if the document holds none."""

    @abstractmethod
    def write_blob(self, text: str, blob: str) -> str:
        """Return the document text with the blob stored, replacing any previous one."""


class PropertyDrawerEncoding(ContextEncoding):
    """Stores the blob under a fixed key in the document's top property drawer."""

    DRAWER_START = ":PROPERTIES:"
    DRAWER_END = ":END:"

    def __init__(self, key: str = PROPERTY_KEY):
        self.key = key
        self._key_re = re.compile(rf"^\s*:{re.escape(key)}:(?:\s+(.*?))?\s*$", re.IGNORECASE)

    def _find_drawer(self, lines: list[str]) -> tuple[int, int] | None:
        """Locate the (start, end) line indexes of a drawer at the top of the document."""
        index = 0
        while index < len(lines) and not lines[index].strip():
            index += 1
        if index >= len(lines) or lines[index].strip().upper() != self.DRAWER_START:
            return None
        for end in range(index + 1, len(lines)):
            if lines[end].strip().upper() == self.DRAWER_END:
                return index, end
        return None

    @staticmethod
    def _split_lines(text: str) -> list[str]:
        # Only "\n" ends a line; str.splitlines() would also break on U+2028 and friends inside paths
        return text.split("\n")

    def read_blob(self, text: str) -> str | None:
        lines = [line.rstrip("\r") for line in self._split_lines(text)]
        drawer = self._find_drawer(lines)
        if drawer is None:
            return None
        start, end = drawer
        for line in lines[start + 1 : end]:
            match = self._key_re.match(line)
            if match:
                return match.group(1) or ""
        return None

    def write_blob(self, text: str, blob: str) -> str:
        lines = self._split_lines(text)
        property_line = f":{self.key}: {blob}"
        drawer = self._find_drawer([line.rstrip("\r") for line in lines])

        if drawer is None:
            return f"{self.DRAWER_START}\n{property_line}\n{self.DRAWER_END}\n" + text

        start, end = drawer
        for index in range(start + 1, end):
            if self._key_re.match(lines[index].rstrip("\r")):
                lines[index] = property_line
                return "\n".join(lines)

        lines.insert(end, property_line)
        return "\n".join(lines)


class LocalVariablesEncoding(ContextEncoding):
    """Stores the blob as a variable in a trailing local variables section.

    Any existing section is removed in full, with its surrounding blank
    lines, before the new one is appended, so repeated saves never leave
    two sections behind.
    """

    SECTION_START = "<!-- Local Variables: -->"
    SECTION_END = "<!-- End: -->"

    _SECTION_RE = re.compile(
        r"\n*^[ \t]*<!--\s*Local Variables:\s*-->[ \t]*$.*?^[ \t]*<!--\s*End:\s*-->[ \t]*$\n*",
        re.MULTILINE | re.DOTALL | re.IGNORECASE,
    )

    def __init__(self, name: str = LOCAL_VARIABLE_NAME):
        self.name = name
        self._variable_re = re.compile(rf"^[ \t]*<!--\s*{re.escape(name)}:\s*(.*?)\s*-->[ \t]*$", re.MULTILINE)

    def read_blob(self, text: str) -> str | None:
        sections = list(self._SECTION_RE.finditer(text))
        if not sections:
            return None
        # Only the last section is in effect
        match = self._variable_re.search(sections[-1].group(0))
        if match is None:
            return None
        return match.group(1)

    def remove_section(self, text: str) -> str:
        return self._SECTION_RE.sub("\n", text).rstrip("\n")

    def write_blob(self, text: str, blob: str) -> str:
        body = self.remove_section(text)
        section = f"{self.SECTION_START}\n<!-- {self.name}: {blob} -->\n{self.SECTION_END}\n"
        if not body:
            return section
        return f"{body}\n\n{section}"


DEFAULT_ENCODINGS: dict[DocumentKind, ContextEncoding] = {
    DocumentKind.STRUCTURED_PROPERTY: PropertyDrawerEncoding(),
    DocumentKind.LOCAL_VARIABLE: LocalVariablesEncoding(),
}


class ContextPersistenceStore:
    """
    Saves and restores context file paths inside documents.

    Contract:
    - Inputs: a Document and the live ContextEntrySet
    - Outputs: persisted path lists, restore outcomes
    - Side Effects: rewrites the document text on save; replaces the live
      entries on restore
    - Errors: UnsupportedDocumentError, CorruptPersistedContextError,
      UserDeclinedConfirmationError; none leaves a partial change behind
    """

    def __init__(
        self,
        confirm: Callable[[str], bool],
        encodings: dict[DocumentKind, ContextEncoding] | None = None,
    ):
        """Initialize with a confirmation prompt and encodings.

        Args:
            confirm: Blocking yes/no prompt
            encodings: Encoding per document kind (defaults to org and markdown)
        """
        self._confirm = confirm
        self._encodings = DEFAULT_ENCODINGS if encodings is None else encodings

    def encoding_for(self, document: Document) -> ContextEncoding:
        encoding = self._encodings.get(document.kind)
        if encoding is None:
            raise UnsupportedDocumentError(document.path)
        return encoding

    def load(self, document: Document) -> list[str] | None:
        """Read the persisted path list.

        Returns:
            Stored paths, or None if the document holds no saved context

        Raises:
            UnsupportedDocumentError: If the document kind has no encoding
            CorruptPersistedContextError: If the stored value cannot be parsed
        """
        blob = self.encoding_for(document).read_blob(document.text)
        if blob is None:
            return None
        try:
            return parse_paths(blob)
        except ValueError as e:
            raise CorruptPersistedContextError(document.path, blob, str(e)) from e

    def save(self, document: Document, entries: Iterable[ContextEntry], *, force: bool = False) -> list[str]:
        """Persist the file entries of a context into the document.

        An existing non-empty saved context is only overwritten after
        confirmation, unless force is set.

        Returns:
            The saved paths

        Raises:
            UnsupportedDocumentError: If the document kind has no encoding
            UserDeclinedConfirmationError: If overwriting was declined
            OSError: If the document cannot be written
        """
        encoding = self.encoding_for(document)
        paths = [entry.identity for entry in entries if isinstance(entry, FileEntry)]

        try:
            existing = self.load(document)
        except CorruptPersistedContextError:
            logger.warning(f"Overwriting corrupt saved context in {document.path}")
            existing = ["<corrupt>"]

        if existing and not force:
            if not self._confirm(f"Overwrite saved context in {document.name}?"):
                raise UserDeclinedConfirmationError(f"overwrite saved context in {document.name}")

        document.write_text(encoding.write_blob(document.text, serialize_paths(paths)))
        logger.info(f"Saved {len(paths)} context file(s) to {document.path}")
        return paths

    def restore(
        self,
        document: Document,
        entries: ContextEntrySet,
        *,
        add_file: Callable[[str], object] | None = None,
        force: bool = False,
    ) -> bool:
        """Replace the live context with the document's saved context.

        Args:
            document: Document to read from
            entries: Live context entry set
            add_file: Collaborator that attaches one file (defaults to entries.add_file)
            force: Skip the replace confirmation

        Returns:
            True if anything was restored, False if nothing was saved

        Raises:
            UnsupportedDocumentError: If the document kind has no encoding
            CorruptPersistedContextError: If the stored value cannot be parsed
            UserDeclinedConfirmationError: If replacing the live context was declined
        """
        paths = self.load(document)
        if not paths:
            logger.info(f"No saved context in {document.path}")
            return False

        if len(entries) and not force:
            if not self._confirm(f"Replace the current context with {len(paths)} saved file(s)?"):
                raise UserDeclinedConfirmationError("replace current context")

        add = add_file or entries.add_file
        entries.remove_all()
        for path in paths:
            add(path)

        logger.info(f"Restored {len(paths)} context file(s) from {document.path}")
        return True
