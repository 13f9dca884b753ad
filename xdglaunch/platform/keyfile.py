"""Read-only view over a parsed desktop entry file, backed by GLib.KeyFile."""

from __future__ import annotations

from pathlib import Path

import gi

gi.require_version("GLib", "2.0")
from gi.repository import GLib  # noqa: E402

from xdglaunch.core.errors import KeyFileError  # noqa: E402


class KeyFileView:
    """Section -> key -> value mapping of a key file.

    Only base keys are kept; locale-suffixed variants (``Name[de]``) are
    dropped.
    """

    def __init__(self, sections: dict[str, dict[str, str]] | None = None) -> None:
        self._sections = sections or {}

    @classmethod
    def load(cls, path: Path | str) -> KeyFileView:
        """Read and parse a key file.

        Raises OSError if the file cannot be read, KeyFileError if it is
        malformed.
        """
        data = Path(path).read_bytes()
        return cls.from_bytes(data, source=str(path))

    @classmethod
    def from_bytes(cls, data: bytes, source: str = "<data>") -> KeyFileView:
        keyfile = GLib.KeyFile()
        try:
            keyfile.load_from_bytes(GLib.Bytes.new(data), GLib.KeyFileFlags.NONE)
        except GLib.Error as exc:
            raise KeyFileError(f"{source}: {exc.message}") from exc

        sections: dict[str, dict[str, str]] = {}
        groups, _ = keyfile.get_groups()
        for group in groups:
            keys, _ = keyfile.get_keys(group)
            try:
                sections[group] = {
                    key: _read_string(keyfile=keyfile, group=group, key=key)
                    for key in keys
                    if "[" not in key
                }
            except UnicodeDecodeError as exc:
                raise KeyFileError(f"{source}: [{group}] is not valid UTF-8") from exc
        return cls(sections)

    def section(self, name: str) -> dict[str, str]:
        return dict(self._sections.get(name, {}))

    def get(self, section: str, key: str) -> str | None:
        return self._sections.get(section, {}).get(key)

    def __contains__(self, section: object) -> bool:
        return section in self._sections


def _read_string(keyfile: GLib.KeyFile, group: str, key: str) -> str:
    """Unescaped string value, or the raw value if it has invalid escapes."""
    try:
        return keyfile.get_string(group, key)
    except GLib.Error:
        return keyfile.get_value(group, key)
