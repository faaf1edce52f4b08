"""Scan state shared by every matcher during one parse, and the match result."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, NamedTuple, NoReturn

from uuscan.errors import ScanError


class Match(NamedTuple):
    """Outcome of one scan attempt.

    On success ``pos`` is the position just past the consumed text; on
    failure it is where the scan diverged (``None`` if the scanner did not
    say).
    """

    ok: bool
    pos: int | None
    value: Any = None


def success(pos: int, value: Any = None) -> Match:
    return Match(True, pos, value)


def fail(pos: int | None = None) -> Match:
    return Match(False, pos)


@dataclass
class ScanState:
    """Cursor, last-match bookkeeping and error context for one parse."""

    line: str = ""
    cursor: int = 0
    match_start: int = 0
    fail_position: int | None = None
    match_length: int = 0
    last_start: int = 0
    last_length: int = 0
    value: Any = None
    error_message: str | None = None
    pending_detail: str | None = None
    cleanup_hook: Callable[[], object] | None = None

    def reset(self, line: str) -> None:
        """Point the state at the start of a new input line."""
        self.line = line
        self.cursor = 0
        self.match_start = 0
        self.fail_position = None
        self.match_length = 0
        self.last_start = 0
        self.last_length = 0
        self.value = None
        self.error_message = None
        self.pending_detail = None
        self.cleanup_hook = None

    @property
    def error_pos(self) -> int:
        """1-based column of the last failure (or of the cursor if none)."""
        if self.fail_position is not None:
            return self.fail_position + 1
        return self.cursor + 1

    @property
    def matched(self) -> str:
        """Text of the most recent successful match."""
        return self.line[self.last_start : self.last_start + self.last_length]

    @property
    def rest(self) -> str:
        """Unconsumed remainder of the line."""
        return self.line[self.cursor :]

    def on_cleanup(self, hook: Callable[[], object] | None) -> None:
        """Register a hook to run once just before the next error unwind."""
        self.cleanup_hook = hook

    def error(self, fmt: str, *args: object) -> NoReturn:
        """Raise a ScanError with a %-formatted message."""
        message = fmt % args if args else fmt
        raise self.unwind(message)

    def unwind(self, message: str) -> ScanError:
        """Store message, fire the cleanup hook once, and build the error."""
        self.error_message = message
        hook = self.cleanup_hook
        if hook is not None:
            self.cleanup_hook = None
            hook()
        return ScanError(message, self.error_pos, self.line, self)
