"""Tests for resolving default applications to desktop entries."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from xdglaunch.core.errors import (
    DetectEditorError,
    EntryLookupFailed,
    EntryNotFound,
    EntryParseError,
    ExecFieldMissing,
    NoDefaultEditorSet,
)
from xdglaunch.platform.resolver import ApplicationResolver

try:
    import gi

    from gi.repository import GLib  # noqa: F401

    HAVE_GLIB = not isinstance(gi, MagicMock)
except Exception:
    HAVE_GLIB = False

needs_glib = pytest.mark.skipif(not HAVE_GLIB, reason="PyGObject not installed")


def oracle(answers):
    """Fake MIME association query recording its calls."""
    calls = []

    def _query(mime_type):
        calls.append(mime_type)
        return answers.get(mime_type)

    _query.calls = calls
    return _query


def make_resolver(dirs, answers, load_entry):
    return ApplicationResolver(data_dirs=dirs, query_default=oracle(answers), load_entry=load_entry)


class TestQueryAssociation:
    def test_prefers_rust_editor(self, load_entry):
        # Given
        query = oracle({"text/rust": "rust.desktop", "text/plain": "plain.desktop"})
        resolver = ApplicationResolver(data_dirs=[], query_default=query, load_entry=load_entry)
        # When
        desktop_id = resolver.query_association()
        # Then
        assert desktop_id == "rust.desktop"
        assert query.calls == ["text/rust"]

    def test_falls_back_to_plain_text(self, load_entry):
        query = oracle({"text/plain": "plain.desktop"})
        resolver = ApplicationResolver(data_dirs=[], query_default=query, load_entry=load_entry)
        assert resolver.query_association() == "plain.desktop"
        assert query.calls == ["text/rust", "text/plain"]

    def test_no_association_at_all(self, load_entry):
        # Given
        resolver = make_resolver([], {}, load_entry)
        # When / Then
        with pytest.raises(NoDefaultEditorSet):
            resolver.detect_editor()

    def test_custom_mime_types(self, load_entry):
        query = oracle({"text/x-python": "py.desktop"})
        resolver = ApplicationResolver(
            data_dirs=[], mime_types=["text/x-python"], query_default=query, load_entry=load_entry
        )
        assert resolver.query_association() == "py.desktop"


class TestDetectEditor:
    def test_builds_entry_from_file(self, tmp_path, write_entry, load_entry):
        # Given
        path = write_entry(tmp_path, "ed.desktop", Name="Ed", Exec="ed %f %i", Icon="ed-icon")
        resolver = make_resolver([tmp_path], {"text/rust": "ed.desktop"}, load_entry)
        # When
        entry = resolver.detect_editor()
        # Then
        assert entry.desktop_id == "ed.desktop"
        assert entry.exec_command == "ed %f %i"
        assert entry.icon == "ed-icon"
        assert entry.name == "Ed"
        assert entry.source_path == path
        assert entry.argv(path="/tmp/a.rs") == ["ed", "/tmp/a.rs", "--icon", "ed-icon"]

    def test_icon_is_optional(self, tmp_path, write_entry, load_entry):
        write_entry(tmp_path, "ed.desktop", Exec="ed %f %i")
        entry = make_resolver([tmp_path], {"text/rust": "ed"}, load_entry).detect_editor()
        assert entry.icon is None
        assert entry.argv(path="/tmp/a.rs") == ["ed", "/tmp/a.rs"]

    def test_higher_precedence_directory_wins(self, tmp_path, write_entry, load_entry):
        # Given
        write_entry(tmp_path / "home", "ed.desktop", Exec="home-ed %f")
        write_entry(tmp_path / "system", "ed.desktop", Exec="system-ed %f")
        resolver = make_resolver(
            [tmp_path / "home", tmp_path / "system"], {"text/rust": "ed.desktop"}, load_entry
        )
        # When
        entry = resolver.detect_editor()
        # Then
        assert entry.exec_command == "home-ed %f"

    def test_unusable_first_directory_falls_through(self, tmp_path, write_entry, load_entry):
        # Given
        bad = tmp_path / "bad"
        bad.mkdir()
        (bad / "applications").write_text("")
        write_entry(tmp_path / "system", "ed.desktop", Exec="system-ed %f")
        resolver = make_resolver([bad, tmp_path / "system"], {"text/rust": "ed.desktop"}, load_entry)
        # When / Then
        assert resolver.detect_editor().exec_command == "system-ed %f"

    def test_uses_plain_text_entry_when_rust_lookup_fails(self, tmp_path, write_entry, load_entry):
        write_entry(tmp_path, "gedit.desktop", Exec="gedit %U")
        resolver = make_resolver([tmp_path], {"text/plain": "gedit.desktop"}, load_entry)
        assert resolver.detect_editor().desktop_id == "gedit.desktop"

    def test_entry_not_found(self, tmp_path, load_entry):
        # Given
        resolver = make_resolver([tmp_path], {"text/rust": "ghost.desktop"}, load_entry)
        # When
        with pytest.raises(EntryNotFound) as excinfo:
            resolver.detect_editor()
        # Then
        assert excinfo.value.desktop_id == "ghost.desktop"

    def test_exec_missing(self, tmp_path, write_entry, load_entry):
        write_entry(tmp_path, "ed.desktop", Name="Ed")
        resolver = make_resolver([tmp_path], {"text/rust": "ed.desktop"}, load_entry)
        with pytest.raises(ExecFieldMissing):
            resolver.detect_editor()

    def test_parse_error(self, tmp_path, load_entry):
        # Given
        path = tmp_path / "applications" / "ed.desktop"
        path.parent.mkdir(parents=True)
        path.write_text("Exec=ed\n")
        resolver = make_resolver([tmp_path], {"text/rust": "ed.desktop"}, load_entry)
        # When
        with pytest.raises(EntryParseError) as excinfo:
            resolver.detect_editor()
        # Then
        assert excinfo.value.path == path
        assert excinfo.value.__cause__ is excinfo.value.cause

    def test_read_error_on_matched_file(self, tmp_path, write_entry):
        # Given
        write_entry(tmp_path, "ed.desktop", Exec="ed")

        def unreadable(path):
            raise PermissionError(f"denied: {path}")

        resolver = make_resolver([tmp_path], {"text/rust": "ed.desktop"}, unreadable)
        # When
        with pytest.raises(EntryLookupFailed) as excinfo:
            resolver.detect_editor()
        # Then
        assert isinstance(excinfo.value.cause, PermissionError)

    def test_parse_error_does_not_fall_through_to_next_directory(
        self, tmp_path, write_entry, load_entry
    ):
        # Given
        broken = tmp_path / "home" / "applications" / "ed.desktop"
        broken.parent.mkdir(parents=True)
        broken.write_text("garbage\n")
        write_entry(tmp_path / "system", "ed.desktop", Exec="ed")
        resolver = make_resolver(
            [tmp_path / "home", tmp_path / "system"], {"text/rust": "ed.desktop"}, load_entry
        )
        # When / Then
        with pytest.raises(DetectEditorError):
            resolver.detect_editor()


class TestResolveByName:
    def test_expands_matching_entry(self, tmp_path, write_entry, load_entry):
        # Given
        write_entry(tmp_path, "org.kde.kate.desktop", Name="Kate", Exec="kate -b %U", Icon="kate")
        resolver = make_resolver([tmp_path], {}, load_entry)
        # When
        entry, argv = resolver.resolve_by_name("kate", path="/tmp/a.rs", file_uris=False)
        # Then
        assert entry.desktop_id == "org.kde.kate.desktop"
        assert argv == ["kate", "-b", "/tmp/a.rs"]

    def test_skips_entries_without_usable_exec(self, tmp_path, write_entry, load_entry):
        # Given
        write_entry(tmp_path / "home", "ed.desktop", Name="Ed")
        write_entry(tmp_path / "mid", "ed.desktop", Name="Ed", Exec="%i")
        write_entry(tmp_path / "system", "ed.desktop", Name="Ed", Exec="system-ed %f")
        resolver = make_resolver(
            [tmp_path / "home", tmp_path / "mid", tmp_path / "system"], {}, load_entry
        )
        # When
        _, argv = resolver.resolve_by_name("Ed", path="/tmp/a.rs")
        # Then
        assert argv == ["system-ed", "/tmp/a.rs"]

    def test_returns_none_when_nothing_matches(self, tmp_path, load_entry):
        assert make_resolver([tmp_path], {}, load_entry).resolve_by_name("nope") is None

    def test_argv_for_name_falls_back_to_bare_name(self, tmp_path, load_entry):
        # Given
        resolver = make_resolver([tmp_path], {}, load_entry)
        # When
        argv = resolver.argv_for_name("vim", path=Path("/tmp/a.rs"))
        # Then
        assert argv == ["vim"]

    def test_argv_for_name_uses_entry(self, tmp_path, write_entry, load_entry):
        write_entry(tmp_path, "vim.desktop", Name="Vim", Exec="vim %F")
        resolver = make_resolver([tmp_path], {}, load_entry)
        assert resolver.argv_for_name("Vim", path="/tmp/a.rs") == ["vim", "/tmp/a.rs"]


@needs_glib
class TestDetectEditorWithKeyFile:
    def test_default_loader_parses_the_entry(self, tmp_path, write_entry):
        # Given
        path = write_entry(tmp_path, "ed.desktop", Name="Ed", Exec="ed --wait %f", Icon="ed")
        resolver = ApplicationResolver(
            data_dirs=[tmp_path], query_default=oracle({"text/rust": "ed.desktop"})
        )
        # When
        entry = resolver.detect_editor()
        # Then
        assert entry.source_path == path
        assert entry.argv(path="/tmp/a.rs") == ["ed", "--wait", "/tmp/a.rs"]
        assert entry.icon == "ed"

    def test_non_utf8_entry_is_a_parse_error(self, tmp_path):
        # Given
        path = tmp_path / "applications" / "ed.desktop"
        path.parent.mkdir(parents=True)
        path.write_bytes(b"[Desktop Entry]\nExec=ed\nComment=\xe9\n")
        resolver = ApplicationResolver(
            data_dirs=[tmp_path], query_default=oracle({"text/rust": "ed.desktop"})
        )
        # When / Then
        with pytest.raises(EntryParseError):
            resolver.detect_editor()

    def test_non_utf8_entry_is_skipped_by_name(self, tmp_path, write_entry):
        # Given
        legacy = tmp_path / "applications" / "a-legacy.desktop"
        legacy.parent.mkdir(parents=True)
        legacy.write_bytes(b"[Desktop Entry]\nName=Ed\nExec=old-ed\nComment=\xe9\n")
        write_entry(tmp_path, "ed.desktop", Name="Ed", Exec="ed %f")
        resolver = ApplicationResolver(data_dirs=[tmp_path], query_default=oracle({}))
        # When
        argv = resolver.argv_for_name("Ed", path="/tmp/a.rs")
        # Then
        assert argv == ["ed", "/tmp/a.rs"]
