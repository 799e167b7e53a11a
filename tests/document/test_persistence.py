"""Tests for context persistence encodings and the persistence store."""

from unittest.mock import Mock

import pytest
from context_cost_cli.context.entries import ContextEntrySet
from context_cost_cli.document.host import Document
from context_cost_cli.document.persistence import ContextPersistenceStore
from context_cost_cli.document.persistence import LocalVariablesEncoding
from context_cost_cli.document.persistence import PropertyDrawerEncoding
from context_cost_cli.errors import CorruptPersistedContextError
from context_cost_cli.errors import UnsupportedDocumentError
from context_cost_cli.errors import UserDeclinedConfirmationError
from context_cost_cli.events.bus import EventBus

PATH_SETS = [
    [],
    ["/home/me/a.txt"],
    ["/home/me/a.txt", "/srv/data/b with spaces.py", '/tmp/quote"d.md', "/tmp/ünï.txt"],
    ["/tmp/line\u2028sep.txt", "/tmp/next\x85line.txt", "/tmp/para\u2029sep.txt", "/tmp/form\x0cfeed.txt"],
]


def live_set(*paths):
    entries = ContextEntrySet(EventBus())
    for path in paths:
        entries.add_file(path)
    return entries


class TestPropertyDrawerEncoding:
    """Test the org property drawer encoding."""

    def test_adds_drawer_to_top(self):
        text = PropertyDrawerEncoding().write_blob("* Chat\nhello\n", '["/a"]')
        assert text == ':PROPERTIES:\n:CHAT_CONTEXT: ["/a"]\n:END:\n* Chat\nhello\n'

    def test_replaces_existing_key(self):
        original = ':PROPERTIES:\n:ID: 42\n:CHAT_CONTEXT: ["/old"]\n:END:\n* Chat\n'
        text = PropertyDrawerEncoding().write_blob(original, '["/new"]')
        assert text == ':PROPERTIES:\n:ID: 42\n:CHAT_CONTEXT: ["/new"]\n:END:\n* Chat\n'

    def test_inserts_into_existing_drawer(self):
        original = ":PROPERTIES:\n:ID: 42\n:END:\n* Chat\n"
        text = PropertyDrawerEncoding().write_blob(original, "[]")
        assert text == ":PROPERTIES:\n:ID: 42\n:CHAT_CONTEXT: []\n:END:\n* Chat\n"

    def test_read_absent(self):
        assert PropertyDrawerEncoding().read_blob("* Chat\n:PROPERTIES:\n:CHAT_CONTEXT: []\n:END:\n") is None

    def test_read_key_case_insensitive(self):
        text = ':properties:\n:chat_context: ["/a"]\n:end:\n'
        assert PropertyDrawerEncoding().read_blob(text) == '["/a"]'

    def test_unicode_line_separator_stays_in_value(self):
        blob = '["/tmp/a\u2028b.txt", "/tmp/c\x85d.txt"]'
        encoding = PropertyDrawerEncoding()

        text = encoding.write_blob("* Chat\n", blob)

        assert encoding.read_blob(text) == blob
        assert encoding.read_blob(encoding.write_blob(text, blob)) == blob

    def test_crlf_document(self):
        original = ":PROPERTIES:\r\n:CHAT_CONTEXT: [\"/old\"]\r\n:END:\r\n* Chat\r\n"
        text = PropertyDrawerEncoding().write_blob(original, '["/new"]')
        assert PropertyDrawerEncoding().read_blob(text) == '["/new"]'
        assert text.endswith(":END:\r\n* Chat\r\n")

    def test_unterminated_drawer_is_not_a_drawer(self):
        assert PropertyDrawerEncoding().read_blob(':PROPERTIES:\n:CHAT_CONTEXT: ["/a"]\n') is None


class TestLocalVariablesEncoding:
    """Test the markdown local variables encoding."""

    def test_appends_section(self):
        text = LocalVariablesEncoding().write_blob("# Chat\n\nhello\n", '["/a"]')
        assert text == '# Chat\n\nhello\n\n<!-- Local Variables: -->\n<!-- chat-context: ["/a"] -->\n<!-- End: -->\n'

    def test_empty_document(self):
        text = LocalVariablesEncoding().write_blob("", "[]")
        assert text == "<!-- Local Variables: -->\n<!-- chat-context: [] -->\n<!-- End: -->\n"

    def test_existing_section_removed_before_write(self):
        encoding = LocalVariablesEncoding()
        once = encoding.write_blob("# Chat\n", '["/a"]')
        twice = encoding.write_blob(once, '["/b"]')
        assert twice.count("Local Variables:") == 1
        assert twice.count("End:") == 1
        assert encoding.read_blob(twice) == '["/b"]'
        assert twice.startswith("# Chat\n\n<!--")

    def test_section_with_other_variables_removed_in_full(self):
        original = "# Chat\n\n\n<!-- Local Variables: -->\n<!-- other-var: 1 -->\n<!-- End: -->\n\n\n"
        text = LocalVariablesEncoding().write_blob(original, "[]")
        assert "other-var" not in text
        assert text == "# Chat\n\n<!-- Local Variables: -->\n<!-- chat-context: [] -->\n<!-- End: -->\n"

    def test_read_absent(self):
        assert LocalVariablesEncoding().read_blob("# Chat\n") is None

    def test_section_without_variable(self):
        text = "<!-- Local Variables: -->\n<!-- other: 1 -->\n<!-- End: -->\n"
        assert LocalVariablesEncoding().read_blob(text) is None


class TestContextPersistenceStore:
    """Test save, load and restore."""

    @pytest.mark.parametrize("suffix", [".org", ".md"])
    @pytest.mark.parametrize("paths", PATH_SETS)
    def test_round_trip(self, tmp_path, suffix, paths):
        document = Document(tmp_path / f"chat{suffix}", text="intro text\n")
        store = ContextPersistenceStore(confirm=Mock(return_value=True))

        store.save(document, live_set(*paths))

        reloaded = Document(document.path)
        assert set(store.load(reloaded)) == set(paths)
        assert "intro text" in reloaded.text

    def test_buffers_not_persisted(self, tmp_path):
        document = Document(tmp_path / "chat.md", text="")
        entries = live_set("/a.txt")
        entries.add_buffer(Document(tmp_path / "other.md", text="x"))

        saved = ContextPersistenceStore(confirm=Mock()).save(document, entries)

        assert saved == ["/a.txt"]

    def test_unsupported_document(self, tmp_path):
        document = Document(tmp_path / "chat.txt", text="unchanged")
        store = ContextPersistenceStore(confirm=Mock(return_value=True))
        with pytest.raises(UnsupportedDocumentError):
            store.save(document, live_set("/a"))
        with pytest.raises(UnsupportedDocumentError):
            store.load(document)
        assert not document.path.exists()

    def test_load_absent_is_none(self, tmp_path):
        store = ContextPersistenceStore(confirm=Mock())
        assert store.load(Document(tmp_path / "chat.org", text="* Chat\n")) is None

    def test_load_corrupt(self, tmp_path):
        document = Document(tmp_path / "chat.org", text=":PROPERTIES:\n:CHAT_CONTEXT: (\"/a\"\n:END:\n")
        with pytest.raises(CorruptPersistedContextError):
            ContextPersistenceStore(confirm=Mock()).load(document)

    def test_load_wrong_shape_is_corrupt(self, tmp_path):
        document = Document(tmp_path / "chat.md", text='<!-- Local Variables: -->\n<!-- chat-context: {"a": 1} -->\n<!-- End: -->\n')
        with pytest.raises(CorruptPersistedContextError):
            ContextPersistenceStore(confirm=Mock()).load(document)

    def test_first_save_needs_no_confirmation(self, tmp_path):
        confirm = Mock(return_value=False)
        document = Document(tmp_path / "chat.org", text="")
        ContextPersistenceStore(confirm).save(document, live_set("/a"))
        confirm.assert_not_called()

    def test_overwrite_with_confirmation(self, tmp_path):
        """Scenario E: a confirmed second save overwrites the first."""
        confirm = Mock(return_value=True)
        document = Document(tmp_path / "chat.md", text="")
        store = ContextPersistenceStore(confirm)
        store.save(document, live_set("/a"))
        store.save(document, live_set("/b", "/c"))

        confirm.assert_called_once()
        assert store.load(Document(document.path)) == ["/b", "/c"]
        assert document.path.read_text(encoding="utf-8").count("Local Variables:") == 1

    def test_overwrite_declined_leaves_document_unchanged(self, tmp_path):
        document = Document(tmp_path / "chat.org", text="")
        store = ContextPersistenceStore(Mock(return_value=False))
        store.save(document, live_set("/a"))
        before = document.path.read_text(encoding="utf-8")

        with pytest.raises(UserDeclinedConfirmationError):
            store.save(document, live_set("/b"))

        assert document.path.read_text(encoding="utf-8") == before

    def test_saved_empty_context_overwritten_without_confirmation(self, tmp_path):
        confirm = Mock(return_value=False)
        document = Document(tmp_path / "chat.org", text="")
        store = ContextPersistenceStore(confirm)
        store.save(document, live_set())
        store.save(document, live_set("/a"))
        confirm.assert_not_called()
        assert store.load(document) == ["/a"]

    def test_force_skips_confirmation(self, tmp_path):
        confirm = Mock(return_value=False)
        document = Document(tmp_path / "chat.org", text="")
        store = ContextPersistenceStore(confirm)
        store.save(document, live_set("/a"))
        store.save(document, live_set("/b"), force=True)
        confirm.assert_not_called()
        assert store.load(document) == ["/b"]

    def test_corrupt_saved_context_requires_confirmation(self, tmp_path):
        confirm = Mock(return_value=True)
        document = Document(tmp_path / "chat.org", text=":PROPERTIES:\n:CHAT_CONTEXT: nonsense\n:END:\n")
        store = ContextPersistenceStore(confirm)
        store.save(document, live_set("/a"))
        confirm.assert_called_once()
        assert store.load(document) == ["/a"]


class TestRestore:
    """Test restoring into the live context."""

    def saved_document(self, tmp_path, paths):
        document = Document(tmp_path / "chat.org", text="")
        ContextPersistenceStore(Mock(return_value=True)).save(document, live_set(*paths))
        return document

    def test_restore_into_empty_context(self, tmp_path):
        document = self.saved_document(tmp_path, ["/a", "/b"])
        confirm = Mock()
        entries = live_set()

        assert ContextPersistenceStore(confirm).restore(document, entries) is True

        assert [e.identity for e in entries] == ["/a", "/b"]
        confirm.assert_not_called()

    def test_restore_nothing_saved(self, tmp_path):
        """Scenario D: nothing saved leaves the live context unchanged."""
        document = Document(tmp_path / "chat.org", text="* Chat\n")
        entries = live_set("/keep")
        assert ContextPersistenceStore(Mock()).restore(document, entries) is False
        assert [e.identity for e in entries] == ["/keep"]

    def test_restore_replaces_after_confirmation(self, tmp_path):
        document = self.saved_document(tmp_path, ["/a"])
        entries = live_set("/old1", "/old2")

        assert ContextPersistenceStore(Mock(return_value=True)).restore(document, entries) is True

        assert [e.identity for e in entries] == ["/a"]

    def test_restore_declined_leaves_context_unchanged(self, tmp_path):
        document = self.saved_document(tmp_path, ["/a"])
        entries = live_set("/old")

        with pytest.raises(UserDeclinedConfirmationError):
            ContextPersistenceStore(Mock(return_value=False)).restore(document, entries)

        assert [e.identity for e in entries] == ["/old"]

    def test_restore_corrupt_leaves_context_unchanged(self, tmp_path):
        document = Document(tmp_path / "chat.org", text=":PROPERTIES:\n:CHAT_CONTEXT: [1, 2]\n:END:\n")
        entries = live_set("/old")
        with pytest.raises(CorruptPersistedContextError):
            ContextPersistenceStore(Mock(return_value=True)).restore(document, entries)
        assert [e.identity for e in entries] == ["/old"]

    def test_restore_delegates_to_add_file(self, tmp_path):
        document = self.saved_document(tmp_path, ["/a", "/b"])
        add_file = Mock()
        ContextPersistenceStore(Mock()).restore(document, live_set(), add_file=add_file)
        assert [call.args[0] for call in add_file.call_args_list] == ["/a", "/b"]
