"""Match targets: the closed set of things accept() and expect() can scan for."""

from __future__ import annotations

from dataclasses import dataclass

from uuscan.chars import NUL
from uuscan.terminals import Terminal, TerminalRegistry


@dataclass(frozen=True, slots=True)
class Literal:
    """Verbatim text, matched with word/number boundary rules."""

    text: str


@dataclass(frozen=True, slots=True)
class Char:
    """A single character; ``Char(NUL)`` matches the end of the line."""

    ch: str

    def __post_init__(self) -> None:
        if len(self.ch) != 1:
            raise ValueError(f"Char target needs exactly one character, got {self.ch!r}")


Target = Literal | Char | Terminal

EOL = Char(NUL)


def coerce(target: Target | str | int, registry: TerminalRegistry) -> Target:
    """Normalize a target: plain str is a Literal, int is a terminal id."""
    if isinstance(target, (Literal, Char, Terminal)):
        return target
    # bool is an int subclass but never a terminal id
    if isinstance(target, int) and not isinstance(target, bool):
        return registry.lookup(target)
    if isinstance(target, str):
        return Literal(target)
    raise TypeError(f"unsupported scan target type: {type(target).__name__}")
