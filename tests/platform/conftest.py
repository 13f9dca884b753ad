"""Shared fixtures for search and resolver tests."""

import configparser
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Mock gi before importing the platform modules only when PyGObject is unavailable.
try:
    import gi  # type: ignore # noqa: F401
except Exception:
    gi_mock = MagicMock()
    gi_mock.require_version = MagicMock()
    sys.modules.setdefault("gi", gi_mock)
    sys.modules.setdefault("gi.repository", gi_mock.repository)

from xdglaunch.core.errors import KeyFileError  # noqa: E402
from xdglaunch.platform.keyfile import KeyFileView  # noqa: E402


def _load_with_configparser(path: Path) -> KeyFileView:
    """Stand-in for the GLib-backed loader, usable without PyGObject."""
    parser = configparser.ConfigParser(interpolation=None, strict=False, delimiters=("=",))
    parser.optionxform = str
    try:
        parser.read_string(Path(path).read_text(encoding="utf-8"))
    except (configparser.Error, UnicodeDecodeError) as exc:
        raise KeyFileError(str(exc)) from exc
    return KeyFileView(
        {
            section: {k: v for k, v in parser[section].items() if "[" not in k}
            for section in parser.sections()
        }
    )


@pytest.fixture
def load_entry():
    return _load_with_configparser


@pytest.fixture
def write_entry():
    """Write <base>/applications/<rel> with the given [Desktop Entry] keys."""

    def _write(base: Path, rel: str, **keys: str) -> Path:
        path = base / "applications" / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        lines = ["[Desktop Entry]", "Type=Application"]
        lines += [f"{k}={v}" for k, v in keys.items()]
        path.write_text("\n".join(lines) + "\n")
        return path

    return _write
