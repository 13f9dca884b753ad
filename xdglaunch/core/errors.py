"""Typed errors raised while resolving and launching desktop entries."""

from __future__ import annotations


class XdgLaunchError(Exception):
    """Base class for every error surfaced to callers."""


class DetectEditorError(XdgLaunchError):
    """Detecting the default editor failed."""


class NoDefaultEditorSet(DetectEditorError):
    def __init__(self, mime_types: tuple[str, ...] = ("text/rust", "text/plain")) -> None:
        self.mime_types = tuple(mime_types)
        queried = " and ".join(f'"{m}"' for m in self.mime_types)
        super().__init__(f"No default editor is set: xdg-mime queries for {queried} all failed")


class EntryNotFound(DetectEditorError):
    def __init__(self, desktop_id: str) -> None:
        self.desktop_id = desktop_id
        super().__init__(
            f"Entry not found: xdg-mime returned {desktop_id!r}, which is in no applications directory"
        )


class EntryParseError(DetectEditorError):
    def __init__(self, path: object, cause: Exception) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Entry parse error: {path} could not be parsed. Caused by {cause}")


class EntryLookupFailed(DetectEditorError):
    def __init__(self, path: object, cause: Exception) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Entry lookup failed: {path} could not be read. Caused by {cause}")


class ExecFieldMissing(DetectEditorError):
    def __init__(self, path: object) -> None:
        self.path = path
        super().__init__(f"Exec field on desktop entry {path} was not found")


class OpenFileError(XdgLaunchError):
    """Opening a file with a resolved application failed."""


class CommandParsingFailed(OpenFileError):
    def __init__(self, exec_command: str = "", reason: str = "") -> None:
        self.exec_command = exec_command
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Command parsing failed for {exec_command!r}{detail}")


class LaunchFailed(OpenFileError):
    def __init__(self, argv: list[str], cause: Exception) -> None:
        self.argv = list(argv)
        self.cause = cause
        super().__init__(f"Launch failed for {self.argv[0] if self.argv else '?'}: {cause}")


class ExecParseError(ValueError):
    """Malformed Exec value, e.g. an unterminated quote."""


class KeyFileError(ValueError):
    """Malformed key file."""
