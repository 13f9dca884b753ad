"""Field-code expansion for Desktop Entry Exec values.

Turns the tokens produced by :mod:`xdglaunch.core.exec_line` into the final
argument vector, substituting run-time values for the field codes:

  - ``%f`` / ``%F``: the target file path
  - ``%u`` / ``%U``: the target as a URL (``file://`` URI for local paths)
  - ``%i``: ``--icon <Icon>`` as two arguments, nothing if there is no icon
  - ``%c``: the entry's display name
  - ``%k``: the location of the desktop entry file
  - ``%%``: a literal percent sign

Every other code (including the deprecated ``%d %D %n %N %v %m``) is removed.
Only a single target is supported; ``%F`` and ``%U`` behave like their
single-value counterparts.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable

from xdglaunch.core.exec_line import Token, tokenize

PERCENT = "%"
ICON_FLAG = "--icon"
_URI_PREFIX = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


class FieldCode(str, Enum):
    SINGLE_FILE = "f"
    MULTI_FILE = "F"
    SINGLE_URL = "u"
    MULTI_URL = "U"
    ICON = "i"
    ENTRY_NAME = "c"
    ENTRY_FILE = "k"
    LITERAL_PERCENT = "%"

    def __str__(self) -> str:
        return PERCENT + self.value

    @classmethod
    def parse(cls, char: str) -> FieldCode | None:
        """Return the code for the character after '%', None if unsupported."""
        try:
            return cls(char)
        except ValueError:
            return None


FILE_CODES = frozenset({FieldCode.SINGLE_FILE, FieldCode.MULTI_FILE})
URL_CODES = frozenset({FieldCode.SINGLE_URL, FieldCode.MULTI_URL})
TARGET_CODES = FILE_CODES | URL_CODES


@dataclass(frozen=True)
class ExpansionContext:
    """Run-time values substituted into an Exec value."""

    target_path: str | None = None
    icon: str | None = None
    entry_name: str | None = None
    entry_file_path: str | None = None
    file_uris: bool = True

    def target_uri(self) -> str | None:
        """The target as passed to %u/%U."""
        target = self.target_path
        if target is None or not self.file_uris:
            return target
        if _URI_PREFIX.match(target):
            return target
        return Path(os.path.abspath(target)).as_uri()


class _DropToken(Exception):
    """Raised while expanding a token that must vanish entirely."""


def _substitute(code: FieldCode, ctx: ExpansionContext) -> str:
    """Value of a field code embedded in a larger token."""
    if code is FieldCode.LITERAL_PERCENT:
        return PERCENT
    if code in FILE_CODES:
        return ctx.target_path or ""
    if code in URL_CODES:
        return ctx.target_uri() or ""
    if code is FieldCode.ICON:
        if ctx.icon is None:
            raise _DropToken
        return ctx.icon
    if code is FieldCode.ENTRY_NAME:
        return ctx.entry_name or ""
    if code is FieldCode.ENTRY_FILE:
        return ctx.entry_file_path or ""
    raise AssertionError(f"unhandled field code {code!r}")


def _expand_standalone(code: FieldCode, ctx: ExpansionContext) -> list[str] | None:
    """Arguments for a token that is exactly one field code, None to fall through."""
    if code is FieldCode.ICON:
        return [ICON_FLAG, ctx.icon] if ctx.icon is not None else []
    if code in FILE_CODES:
        return [ctx.target_path] if ctx.target_path is not None else []
    if code in URL_CODES:
        uri = ctx.target_uri()
        return [uri] if uri is not None else []
    return None


def expand_token(token: Token, ctx: ExpansionContext) -> list[str]:
    """Expand one token into zero, one or two arguments."""
    value = token.value
    if PERCENT not in value:
        return [value] if value or token.quoted else []

    if len(value) == 2 and value[0] == PERCENT:
        code = FieldCode.parse(value[1])
        if code is not None:
            standalone = _expand_standalone(code, ctx)
            if standalone is not None:
                return standalone

    out: list[str] = []
    i = 0
    n = len(value)
    try:
        while i < n:
            ch = value[i]
            if ch != PERCENT or i + 1 == n:
                out.append(ch)
                i += 1
                continue
            code = FieldCode.parse(value[i + 1])
            i += 2
            if code is not None:
                out.append(_substitute(code, ctx))
    except _DropToken:
        return []

    text = "".join(out)
    return [text] if text else []


def expand_tokens(tokens: Iterable[Token], ctx: ExpansionContext) -> list[str]:
    argv: list[str] = []
    for token in tokens:
        argv.extend(expand_token(token, ctx))
    return argv


def expand_exec(exec_line: str, ctx: ExpansionContext) -> list[str]:
    """Tokenize and expand an Exec value.

    Raises ExecParseError for malformed input. The result may be empty; it is
    up to the caller to reject an empty command.
    """
    return expand_tokens(tokenize(exec_line), ctx)
