"""Tests for WordCounter."""

import contextlib
from unittest.mock import Mock

import pytest
from context_cost_cli.context.models import BufferEntry
from context_cost_cli.context.models import FileEntry
from context_cost_cli.cost.words import WordCounter
from context_cost_cli.document.host import Document


class TestWordCounter:
    """Test counting over ranges, files and entries."""

    def test_count_range(self, tmp_path):
        doc = Document(tmp_path / "chat.md", text="one two  three\nfour")
        counter = WordCounter()
        assert counter.count_range(doc) == 4
        assert counter.count_range(doc, 0, 7) == 2
        assert counter.count_range(doc, 8) == 2

    def test_count_file(self, make_file):
        path = make_file("a.txt", 500)
        assert WordCounter().count_file(path) == 500

    def test_binary_file_counts_zero(self, tmp_path):
        path = tmp_path / "image.bin"
        path.write_bytes(b"\x89PNG\x00\x01 some words here")
        assert WordCounter().count_file(path) == 0

    def test_binary_file_is_not_opened(self, tmp_path):
        opener = Mock()
        counter = WordCounter(binary_check=lambda p: True, opener=opener)
        assert counter.count_file(tmp_path / "x") == 0
        opener.assert_not_called()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            WordCounter().count_file(tmp_path / "missing.txt")

    def test_scoped_reader_released_on_error(self, tmp_path):
        """The temporary content is released even when counting fails."""
        released = []

        @contextlib.contextmanager
        def opener(path):
            try:
                yield 12345  # not text, so counting raises
            finally:
                released.append(path)

        counter = WordCounter(binary_check=lambda p: False, opener=opener)
        with pytest.raises(AttributeError):
            counter.count_file(tmp_path / "x.txt")
        assert released == [tmp_path / "x.txt"]

    def test_count_buffer_entry_uses_whole_document(self, tmp_path):
        doc = Document(tmp_path / "notes.org", text="alpha beta gamma")
        assert WordCounter().count_entry(BufferEntry(doc)) == 3

    def test_count_entries(self, make_file, tmp_path):
        entries = [
            FileEntry(make_file("a.txt", 10)),
            FileEntry(make_file("b.txt", 5)),
            BufferEntry(Document(tmp_path / "c.md", text="x y")),
        ]
        assert WordCounter().count_entries(entries) == 17
