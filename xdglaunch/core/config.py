"""Configuration loading, saving, and defaults for the launcher."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Mapping

from xdglaunch.platform import xdg_dirs

DEFAULT_CONFIG_DIR = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "xdglaunch"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.json"

# A Rust-aware editor first, any text editor second
DEFAULT_EDITOR_MIME_TYPES = [
    "text/rust",
    "text/plain",
]


@dataclass
class Config:
    """Launcher configuration with sensible defaults."""

    editor_mime_types: list[str] = field(
        default_factory=lambda: list(DEFAULT_EDITOR_MIME_TYPES)
    )
    # Overrides XDG_DATA_HOME/XDG_DATA_DIRS when non-empty
    data_dirs: list[str] = field(default_factory=list)
    file_uris: bool = True

    @classmethod
    def load(cls, path: Path | str | None = None) -> Config:
        """Load config from JSON file, falling back to defaults for missing keys."""
        path = Path(path) if path else DEFAULT_CONFIG_FILE
        if not path.exists():
            config = cls()
            config.save(path)
            return config

        with open(path) as f:
            data: dict[str, Any] = json.load(f)

        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)

    def save(self, path: Path | str | None = None) -> None:
        """Save config to JSON file."""
        path = Path(path) if path else DEFAULT_CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(asdict(self), f, indent=2)
            f.write("\n")

    def search_dirs(self, environ: Mapping[str, str] | None = None) -> list[Path]:
        """Base directories to search, highest precedence first."""
        if self.data_dirs:
            return [Path(d) for d in self.data_dirs if os.path.isabs(d)]
        return xdg_dirs.data_dirs(environ=environ)
