"""Default-application lookup through xdg-mime."""

from __future__ import annotations

import subprocess

from xdglaunch.log import get_logger

_log = get_logger(name="mime")

XDG_MIME = "xdg-mime"


def query_default(mime_type: str) -> str | None:
    """Return the desktop id associated with mime_type, or None.

    A missing xdg-mime binary, a non-zero exit status and an empty answer
    all count as "no association".
    """
    cmd = [XDG_MIME, "query", "default", mime_type]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except OSError as exc:
        _log.debug("Failed to run %s: %s", cmd, exc)
        return None
    if result.returncode != 0:
        _log.debug("%s exited with %d: %s", cmd, result.returncode, result.stderr.strip())
        return None
    desktop_id = result.stdout.strip()
    if not desktop_id:
        _log.debug("No default application for %s", mime_type)
        return None
    # xdg-mime may list several ids separated by ';', the first one wins
    return desktop_id.split(";")[0].strip() or None
