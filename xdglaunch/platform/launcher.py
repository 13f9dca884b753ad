"""Spawning resolved commands, plus a few fixed command builders."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Callable, Sequence

from xdglaunch.core.entry import DesktopEntry
from xdglaunch.core.errors import CommandParsingFailed, LaunchFailed
from xdglaunch.log import get_logger
from xdglaunch.platform.resolver import ApplicationResolver

_log = get_logger(name="launcher")

Spawn = Callable[[Sequence[str]], None]


def spawn_detached(argv: Sequence[str]) -> None:
    """Start argv without a shell and without waiting for it.

    The child gets its own session and process group so it outlives us and
    does not receive our SIGHUP/SIGINT.
    """
    argv = [os.fspath(a) for a in argv]
    if not argv:
        raise CommandParsingFailed(reason="empty command")
    try:
        subprocess.Popen(
            argv,
            shell=False,
            start_new_session=True,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        _log.warning("Failed to launch %s: %s", argv[0], e)
        raise LaunchFailed(argv, e) from e
    _log.debug("Launched %s", argv)


def open_file(
    entry: DesktopEntry,
    path: str | os.PathLike[str],
    file_uris: bool = True,
    spawn: Spawn = spawn_detached,
) -> list[str]:
    """Open path with a resolved entry. Returns the launched argv."""
    argv = entry.argv(path=path, file_uris=file_uris)
    spawn(argv)
    return argv


def open_file_with(
    application: str,
    path: str | os.PathLike[str],
    resolver: ApplicationResolver,
    file_uris: bool = True,
    spawn: Spawn = spawn_detached,
) -> list[str]:
    """Open path with the application named application.

    If no desktop entry carries that name, application is run directly
    with path as its only argument.
    """
    argv = resolver.argv_for_name(app_name=application, path=path, file_uris=file_uris)
    spawn(argv)
    return argv


def command_path(name: str) -> str | None:
    """Locate name like the shell would, via the 'command -v' builtin."""
    # The name is passed as $1, never spliced into the script
    cmd = ["sh", "-c", 'command -v "$1"', "sh", name]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except OSError as exc:
        _log.debug("Failed to run %s: %s", cmd, exc)
        return None
    found = result.stdout.strip()
    if result.returncode != 0 or not found:
        return None
    return found


def code_command() -> list[str]:
    return ["code"]


def gradlew_command(project_dir: str | os.PathLike[str]) -> list[str]:
    project_dir = os.fspath(project_dir)
    return [str(Path(project_dir) / "gradlew"), "--project-dir", project_dir]
