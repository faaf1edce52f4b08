"""Tokenless scanning primitives for recursive-descent parsers."""

from __future__ import annotations

from uuscan.errors import RegistryError, ScanError
from uuscan.scanner import Scanner
from uuscan.state import Match, ScanState, fail, success
from uuscan.targets import Char, Literal
from uuscan.terminals import Terminal, TerminalRegistry

__version__ = "0.1.0"

__all__ = [
    "Char",
    "Literal",
    "Match",
    "RegistryError",
    "ScanError",
    "ScanState",
    "Scanner",
    "Terminal",
    "TerminalRegistry",
    "fail",
    "success",
]
