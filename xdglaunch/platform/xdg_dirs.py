"""XDG base data directories, computed once and passed around explicitly."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

DEFAULT_XDG_DATA_DIRS = "/usr/local/share:/usr/share"
APPLICATIONS_SUBDIR = "applications"


def data_dirs(environ: Mapping[str, str] | None = None) -> list[Path]:
    """Return data base directories, highest precedence first.

    XDG_DATA_HOME (default $HOME/.local/share) comes before every entry of
    XDG_DATA_DIRS (default /usr/local/share:/usr/share). Relative paths are
    invalid per the base directory spec and are skipped.
    """
    env = os.environ if environ is None else environ

    data_home = env.get("XDG_DATA_HOME", "")
    if not os.path.isabs(data_home):
        home = env.get("HOME") or str(Path.home())
        data_home = os.path.join(home, ".local", "share")

    system_dirs = env.get("XDG_DATA_DIRS", "") or DEFAULT_XDG_DATA_DIRS

    dirs: list[Path] = []
    for d in [data_home, *system_dirs.split(":")]:
        if not os.path.isabs(d):
            continue
        p = Path(d)
        if p not in dirs:
            dirs.append(p)
    return dirs

