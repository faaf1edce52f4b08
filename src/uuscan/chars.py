"""Single-byte character classification helpers."""

from __future__ import annotations

# Stands for end-of-text: returned by peek() past the end of a line.
NUL = "\0"

_SPACE = frozenset(" \t\n\r\v\f")
_DIGITS = frozenset("0123456789")
_ALPHA = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")


def is_space(ch: str) -> bool:
    """Return True if ch is an ASCII blank."""
    return ch in _SPACE


def is_digit(ch: str) -> bool:
    return ch in _DIGITS


def is_alpha(ch: str) -> bool:
    return ch in _ALPHA


def is_alnum(ch: str) -> bool:
    return ch in _ALPHA or ch in _DIGITS


def is_ident_start(ch: str) -> bool:
    """Return True if ch may start an identifier (letter or underscore)."""
    return ch in _ALPHA or ch == "_"


def is_ident_char(ch: str) -> bool:
    """Return True if ch may continue an identifier."""
    return ch in _ALPHA or ch in _DIGITS or ch == "_"


def is_printable(ch: str) -> bool:
    """Return True if ch is a printable ASCII character (space included)."""
    return " " <= ch <= "~"


def peek(line: str, pos: int) -> str:
    """Return the character at pos, or NUL at or past the end of line."""
    if 0 <= pos < len(line):
        return line[pos]
    return NUL


def skip_space(line: str, pos: int) -> int:
    """Return the first position at or after pos that is not a blank."""
    end = len(line)
    while pos < end and line[pos] in _SPACE:
        pos += 1
    return pos
