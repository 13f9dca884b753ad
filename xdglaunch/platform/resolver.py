"""Resolve a default application to a DesktopEntry.

Resolution by MIME type runs as a single pass through these stages, each of
which can fail with its own error:

  QueryAssociation -> LocateEntry -> ParseEntry -> ExtractFields -> Ready

Resolution by application name scans entry files instead and never fails:
when nothing usable is found, the name itself is used as the program.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Sequence

from xdglaunch.core.config import DEFAULT_EDITOR_MIME_TYPES
from xdglaunch.core.entry import DESKTOP_ENTRY_GROUP, DesktopEntry
from xdglaunch.core.errors import (
    CommandParsingFailed,
    EntryLookupFailed,
    EntryNotFound,
    EntryParseError,
    ExecFieldMissing,
    KeyFileError,
    NoDefaultEditorSet,
)
from xdglaunch.log import get_logger
from xdglaunch.platform import mime, search
from xdglaunch.platform.keyfile import KeyFileView

_log = get_logger(name="resolver")


def entry_from_keyfile(keyfile: KeyFileView, path: Path, desktop_id: str) -> DesktopEntry:
    """Extract Exec (required), Icon and Name (optional) from a parsed entry."""
    section = keyfile.section(DESKTOP_ENTRY_GROUP)
    exec_command = section.get("Exec")
    if exec_command is None:
        raise ExecFieldMissing(path)
    return DesktopEntry(
        desktop_id=desktop_id,
        exec_command=exec_command,
        source_path=Path(os.path.abspath(path)),
        icon=section.get("Icon"),
        name=section.get("Name"),
    )


class ApplicationResolver:
    """Finds desktop entries in an explicit list of XDG data directories."""

    def __init__(
        self,
        data_dirs: Sequence[Path],
        mime_types: Sequence[str] = tuple(DEFAULT_EDITOR_MIME_TYPES),
        query_default: Callable[[str], str | None] = mime.query_default,
        load_entry: Callable[[Path], KeyFileView] = KeyFileView.load,
    ) -> None:
        self._data_dirs = list(data_dirs)
        self._mime_types = tuple(mime_types)
        self._query_default = query_default
        self._load_entry = load_entry

    def query_association(self) -> str:
        """Desktop id of the first MIME type with a default application."""
        for mime_type in self._mime_types:
            desktop_id = self._query_default(mime_type)
            if desktop_id:
                _log.debug("Default for %s is %s", mime_type, desktop_id)
                return desktop_id
        raise NoDefaultEditorSet(self._mime_types)

    def load(self, desktop_id: str) -> DesktopEntry:
        """Locate, read and parse the entry for desktop_id."""
        path = search.find_entry(data_dirs=self._data_dirs, desktop_id=desktop_id)
        if path is None:
            raise EntryNotFound(desktop_id)
        try:
            keyfile = self._load_entry(path)
        except OSError as exc:
            raise EntryLookupFailed(path, exc) from exc
        except KeyFileError as exc:
            raise EntryParseError(path, exc) from exc
        return entry_from_keyfile(
            keyfile=keyfile, path=path, desktop_id=search.normalize_id(desktop_id)
        )

    def detect_editor(self) -> DesktopEntry:
        """Resolve the default editor for source files."""
        return self.load(self.query_association())

    def resolve_by_name(
        self, app_name: str, path: str | os.PathLike[str] | None = None, file_uris: bool = True
    ) -> tuple[DesktopEntry, list[str]] | None:
        """First entry named app_name whose Exec expands to a command.

        Entries without Exec, or whose Exec is malformed or empty, are
        skipped in favour of the next match.
        """
        for match in search.find_entry_by_name(
            data_dirs=self._data_dirs, app_name=app_name, load=self._load_entry
        ):
            try:
                entry = entry_from_keyfile(
                    keyfile=match.keyfile, path=match.path, desktop_id=match.desktop_id
                )
                return entry, entry.argv(path=path, file_uris=file_uris)
            except (ExecFieldMissing, CommandParsingFailed) as exc:
                _log.debug("Skipping %s: %s", match.path, exc)
        return None

    def argv_for_name(
        self, app_name: str, path: str | os.PathLike[str], file_uris: bool = True
    ) -> list[str]:
        """Command opening path with app_name, falling back to the bare name."""
        resolved = self.resolve_by_name(app_name=app_name, path=path, file_uris=file_uris)
        if resolved is not None:
            return resolved[1]
        _log.debug("No desktop entry named %r, running it directly", app_name)
        return [os.fspath(app_name)]

