"""Tokenizer for Desktop Entry Exec values.

The quoting rules are those of the Desktop Entry Specification, not of a
POSIX shell:

  - arguments are separated by unquoted whitespace
  - a double quote opens a run that ends at the next unescaped double quote;
    whitespace inside it is literal
  - inside quotes, a backslash escapes only the double quote, the backtick,
    the dollar sign and the backslash; before any other character it is kept
    as-is
  - outside quotes a backslash is an ordinary character

Shell metacharacters (``|``, ``*``, ``$VAR``, ...) are never interpreted.
"""

from __future__ import annotations

from typing import Iterable, NamedTuple

from xdglaunch.core.errors import ExecParseError

WHITESPACE = frozenset(" \t\n")
QUOTE = '"'
ESCAPE = "\\"
ESCAPABLE = frozenset('"`$\\')


class Token(NamedTuple):
    """One argument before field-code expansion."""

    value: str
    quoted: bool = False


def tokenize(exec_line: str) -> list[Token]:
    """Split an Exec value into tokens.

    Raises ExecParseError on an unterminated quoted run.
    """
    tokens: list[Token] = []
    buf: list[str] = []
    in_token = False
    quoted = False
    i = 0
    n = len(exec_line)

    while i < n:
        ch = exec_line[i]
        if ch in WHITESPACE:
            if in_token:
                tokens.append(Token("".join(buf), quoted))
                buf = []
                in_token = False
                quoted = False
            i += 1
        elif ch == QUOTE:
            in_token = True
            quoted = True
            i = _read_quoted(exec_line, i + 1, buf)
        else:
            in_token = True
            buf.append(ch)
            i += 1

    if in_token:
        tokens.append(Token("".join(buf), quoted))
    return tokens


def _read_quoted(exec_line: str, start: int, buf: list[str]) -> int:
    """Consume a quoted run into buf, returning the index after the closing quote."""
    i = start
    n = len(exec_line)
    while i < n:
        ch = exec_line[i]
        if ch == QUOTE:
            return i + 1
        if ch == ESCAPE and i + 1 < n and exec_line[i + 1] in ESCAPABLE:
            buf.append(exec_line[i + 1])
            i += 2
            continue
        buf.append(ch)
        i += 1
    raise ExecParseError(f"unterminated quote starting at offset {start - 1} in {exec_line!r}")


def needs_quoting(value: str) -> bool:
    return value == "" or any(ch in WHITESPACE or ch == QUOTE for ch in value)


def quote_arg(value: str, force: bool = False) -> str:
    """Quote a single argument so that tokenize() reads it back unchanged."""
    if not force and not needs_quoting(value):
        return value
    escaped = "".join(ESCAPE + ch if ch in ESCAPABLE else ch for ch in value)
    return f"{QUOTE}{escaped}{QUOTE}"


def join_exec(tokens: Iterable[Token | str]) -> str:
    """Build an Exec value from tokens, quoting where required."""
    parts = []
    for tok in tokens:
        if isinstance(tok, Token):
            parts.append(quote_arg(tok.value, force=tok.quoted))
        else:
            parts.append(quote_arg(tok))
    return " ".join(parts)
