"""Locate desktop entry files in the XDG 'applications' directories.

Directory errors during the search never surface: a base directory that is
missing or unreadable is simply skipped, as the XDG Base Directory
Specification requires.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator, NamedTuple, Sequence

from xdglaunch.core.entry import DESKTOP_ENTRY_GROUP, DESKTOP_SUFFIX
from xdglaunch.core.errors import KeyFileError
from xdglaunch.log import get_logger
from xdglaunch.platform.keyfile import KeyFileView
from xdglaunch.platform.xdg_dirs import APPLICATIONS_SUBDIR

_log = get_logger(name="search")


class EntryMatch(NamedTuple):
    """An entry file found by name."""

    keyfile: KeyFileView
    path: Path
    desktop_id: str


def normalize_id(desktop_id: str) -> str:
    """Ensure the id carries the .desktop suffix."""
    desktop_id = desktop_id.strip()
    if desktop_id.endswith(DESKTOP_SUFFIX):
        return desktop_id
    return desktop_id + DESKTOP_SUFFIX


def desktop_id_for(applications_dir: Path, path: Path) -> str:
    """Entry id of a file: its path below applications_dir with '/' -> '-'."""
    return "-".join(path.relative_to(applications_dir).parts)


def find_in_dir(applications_dir: Path, desktop_id: str) -> Path | None:
    """Look for desktop_id in one applications directory.

    The plain filename is tried first, then every subdirectory form where a
    '-' in the id stands for a '/'. Raises OSError if the directory cannot be
    inspected.
    """
    desktop_id = normalize_id(desktop_id)
    if "/" in desktop_id:
        return None
    if not applications_dir.is_dir():
        raise FileNotFoundError(f"no such directory: {applications_dir}")
    return _find_aliased(directory=applications_dir, rest=desktop_id)


def _find_aliased(directory: Path, rest: str) -> Path | None:
    candidate = directory / rest
    if candidate.is_file():
        return candidate

    # Each '-' may be a path separator: descend into matching subdirectories
    idx = rest.find("-")
    while idx != -1:
        prefix = rest[:idx]
        if prefix and (directory / prefix).is_dir():
            found = _find_aliased(directory=directory / prefix, rest=rest[idx + 1:])
            if found is not None:
                return found
        idx = rest.find("-", idx + 1)
    return None


def find_entry(data_dirs: Sequence[Path], desktop_id: str) -> Path | None:
    """Return the highest-precedence file for desktop_id, or None."""
    for base in data_dirs:
        applications_dir = base / APPLICATIONS_SUBDIR
        try:
            found = find_in_dir(applications_dir=applications_dir, desktop_id=desktop_id)
        except OSError as exc:
            _log.debug("Skipping %s: %s", applications_dir, exc)
            continue
        if found is not None:
            _log.debug("Found %s at %s", desktop_id, found)
            return found
    return None


def list_entry_files(applications_dir: Path) -> list[Path]:
    """Every .desktop file below applications_dir, in a stable order.

    Raises OSError if the directory cannot be listed.
    """
    if not applications_dir.is_dir():
        raise FileNotFoundError(f"no such directory: {applications_dir}")
    return sorted(applications_dir.rglob("*" + DESKTOP_SUFFIX))


def _matches_name(keyfile: KeyFileView, desktop_id: str, app_name: str) -> bool:
    wanted = app_name.strip()
    if not wanted:
        return False
    name = keyfile.get(DESKTOP_ENTRY_GROUP, "Name")
    if name is not None and name.casefold() == wanted.casefold():
        return True
    return desktop_id == normalize_id(wanted)


def find_entry_by_name(
    data_dirs: Sequence[Path],
    app_name: str,
    load: Callable[[Path], KeyFileView] = KeyFileView.load,
) -> Iterator[EntryMatch]:
    """Yield entries whose Name (or id) matches app_name, in precedence order.

    Unreadable directories and unreadable or malformed files are skipped.
    """
    for base in data_dirs:
        applications_dir = base / APPLICATIONS_SUBDIR
        try:
            files = list_entry_files(applications_dir)
        except OSError as exc:
            _log.debug("Skipping %s: %s", applications_dir, exc)
            continue

        for path in files:
            try:
                keyfile = load(path)
            except (OSError, KeyFileError) as exc:
                _log.debug("Skipping unreadable entry %s: %s", path, exc)
                continue
            desktop_id = desktop_id_for(applications_dir=applications_dir, path=path)
            if _matches_name(keyfile=keyfile, desktop_id=desktop_id, app_name=app_name):
                yield EntryMatch(keyfile=keyfile, path=path, desktop_id=desktop_id)
