"""--debug scan trace to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from uuscan.state import Match
from uuscan.targets import Char, Literal, Target
from uuscan.terminals import Terminal


class Tracer:
    """Write one line per scan attempt, and its outcome, to *file*."""

    def __init__(self, file: TextIO | None = None) -> None:
        self._file = file if file is not None else sys.stderr

    def attempt(self, target: Target, line: str, pos: int) -> None:
        self._file.write(f'{_describe(target)}, at {pos}: "{line[pos:]}"\n')

    def outcome(self, result: Match) -> None:
        verdict = "ok" if result.ok else "fail"
        self._file.write(f"  -> {verdict} {result.pos}\n")


def _describe(target: Target) -> str:
    if isinstance(target, Literal):
        return f'scan_literal "{target.text}"'
    if isinstance(target, Char):
        return f"scan_char {target.ch!r} 0x{ord(target.ch):02x}"
    if isinstance(target, Terminal):
        return f"scan_term {target.name}"
    return f"scan {target!r}"
