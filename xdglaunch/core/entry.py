"""Resolved desktop entry and its launch command."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from xdglaunch.core.errors import CommandParsingFailed, ExecParseError
from xdglaunch.core.field_codes import ExpansionContext, expand_exec

DESKTOP_SUFFIX = ".desktop"
DESKTOP_ENTRY_GROUP = "Desktop Entry"


@dataclass(frozen=True)
class DesktopEntry:
    """The parts of a .desktop file needed to launch it."""

    desktop_id: str
    exec_command: str
    source_path: Path
    icon: str | None = None
    name: str | None = None

    @property
    def display_name(self) -> str:
        """Name key if present, otherwise the entry id without suffix."""
        return self.name or self.desktop_id.removesuffix(DESKTOP_SUFFIX)

    def context(self, path: str | os.PathLike[str] | None, file_uris: bool = True) -> ExpansionContext:
        return ExpansionContext(
            target_path=os.fspath(path) if path is not None else None,
            icon=self.icon,
            entry_name=self.display_name,
            entry_file_path=str(self.source_path),
            file_uris=file_uris,
        )

    def argv(self, path: str | os.PathLike[str] | None, file_uris: bool = True) -> list[str]:
        """Expand Exec for opening path.

        Raises CommandParsingFailed when Exec is malformed or expands to nothing.
        """
        try:
            argv = expand_exec(self.exec_command, self.context(path=path, file_uris=file_uris))
        except ExecParseError as exc:
            raise CommandParsingFailed(self.exec_command, reason=str(exc)) from exc
        if not argv:
            raise CommandParsingFailed(self.exec_command, reason="empty command")
        return argv
