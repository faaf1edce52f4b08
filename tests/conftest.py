"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from uuscan.chars import is_alpha, is_digit, peek
from uuscan.scanner import Scanner
from uuscan.state import Match, ScanState, fail, success
from uuscan.terminals import TerminalRegistry


def scan_word(state: ScanState, pos: int) -> Match:
    end = pos
    while is_alpha(peek(state.line, end)):
        end += 1
    if end == pos:
        return fail(pos)
    return success(end, state.line[pos:end])


def scan_number(state: ScanState, pos: int) -> Match:
    end = pos
    while is_digit(peek(state.line, end)):
        end += 1
    if end == pos:
        state.pending_detail = "digits required"
        return fail(pos)
    return success(end, int(state.line[pos:end]))


def scan_end(state: ScanState, pos: int) -> Match:
    # reports no position on failure
    return success(pos) if pos >= len(state.line) else fail()


@pytest.fixture
def registry() -> TerminalRegistry:
    """Return a frozen registry with word, number and end terminals."""
    reg = TerminalRegistry()
    reg.register("word", scan_word, result_type=str)
    reg.register("number", scan_number, result_type=int)
    reg.register("end", scan_end, display="end of line")
    reg.freeze()
    return reg


@pytest.fixture
def scanner(registry: TerminalRegistry) -> Scanner:
    return Scanner(registry)


@pytest.fixture
def scan(scanner: Scanner):
    """Return a helper that resets the scanner to a line and returns it."""

    def _scan(line: str) -> Scanner:
        scanner.reset(line)
        return scanner

    return _scan
