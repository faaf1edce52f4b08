"""Built-in matchers for literal text, single characters and terminals."""

from __future__ import annotations

from typing import assert_never

from uuscan.chars import NUL, is_alnum, is_alpha, is_digit, is_space, peek, skip_space
from uuscan.state import Match, ScanState, fail, success
from uuscan.targets import Char, Literal, Target
from uuscan.terminals import Terminal


def scan_char(state: ScanState, wanted: str, pos: int) -> Match:
    """Scan for a single character.

    A blank ``wanted`` consumes exactly one blank at ``pos``, so "any one
    blank" can be matched without the usual blank skipping.
    """
    line = state.line
    if is_space(wanted) and is_space(peek(line, pos)):
        state.match_start = pos
        return success(pos + 1)

    p = skip_space(line, pos)
    state.match_start = p

    ch = peek(line, p)
    if ch == wanted:
        # NUL matches end of line without moving past it
        return success(p if ch == NUL else p + 1)

    return fail(p)


def scan_literal(state: ScanState, wanted: str, pos: int) -> Match:
    """Scan for literal text, refusing to stop inside a word or number."""
    line = state.line
    state.match_start = pos

    if pos >= len(line):
        return success(pos) if wanted == "" else fail(pos)
    if wanted == "":
        return fail(pos)

    # if not looking for a blank, skip over them
    p = pos if is_space(wanted[0]) else skip_space(line, pos)
    state.match_start = p

    n = len(wanted)
    if len(line) - p < n:
        return fail(p)
    if line[p : p + n] != wanted:
        return fail(p)

    last = wanted[-1]
    after = peek(line, p + n)
    if is_alpha(last) and is_alnum(after):
        return fail(p)
    if is_digit(last) and is_digit(after):
        return fail(p)

    return success(p + n)


def scan_term(state: ScanState, term: Terminal, pos: int) -> Match:
    """Scan for an application-defined terminal."""
    p = skip_space(state.line, pos)
    state.match_start = p
    state.fail_position = None
    state.pending_detail = None
    state.match_length = 0

    result = term.fn(state, p)
    if not result.ok and result.pos is None:
        return fail(p)
    return result


def dispatch(state: ScanState, target: Target) -> Match:
    """Run the one matcher for target from the current cursor."""
    match target:
        case Literal(text=text):
            return scan_literal(state, text, state.cursor)
        case Char(ch=ch):
            return scan_char(state, ch, state.cursor)
        case Terminal():
            return scan_term(state, target, state.cursor)
        case _:
            assert_never(target)
