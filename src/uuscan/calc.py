"""Integer calculator: the demonstration grammar built on the scanner.

Grammar::

    expr    := term eol
    term    := factor { ("+" | "-") factor }
    factor  := primary { ("*" | "/" | "÷") primary }
    primary := ident "(" [ term { "," term } ] ")"
             | ident
             | "(" term ")"
             | "-" primary | "+" primary
             | int

A bare identifier is looked up in the environment mapping.
"""

from __future__ import annotations

import os
import random
import sys
from collections.abc import Callable, Iterable, Iterator, Mapping

from uuscan.chars import is_digit, is_ident_char, is_ident_start, peek
from uuscan.debug import Tracer
from uuscan.errors import ScanError
from uuscan.scanner import Scanner
from uuscan.state import Match, ScanState, fail, success
from uuscan.targets import EOL, Char, Literal
from uuscan.terminals import TerminalRegistry

INT_MAX = 2**31 - 1
MAX_ARGS = 10
MAX_DEPTH = 100

LPAREN = Char("(")
RPAREN = Char(")")
MINUS = Char("-")
PLUS = Char("+")
COMMA = Char(",")
MUL = Char("*")
DIV1 = Char("/")
DIV2 = Literal("÷")

Builtin = Callable[[list[int]], int]


# ---------------------------------------------------------------------------
# Terminal scanners
# ---------------------------------------------------------------------------


def scan_ident(state: ScanState, pos: int) -> Match:
    line = state.line
    if not is_ident_start(peek(line, pos)):
        return fail(pos)
    end = pos + 1
    while is_ident_char(peek(line, end)):
        end += 1
    return success(end, line[pos:end])


def make_int_scanner(max_int: int = INT_MAX) -> Callable[[ScanState, int], Match]:
    """Return a decimal integer scanner that raises on values above max_int."""
    limit = max_int % 10
    cutoff = max_int // 10

    def scan_int(state: ScanState, pos: int) -> Match:
        line = state.line
        if not is_digit(peek(line, pos)):
            return fail(pos)
        val = 0
        while is_digit(ch := peek(line, pos)):
            d = ord(ch) - ord("0")
            if val > cutoff or (val == cutoff and d > limit):
                state.fail_position = pos
                state.error("integer overflow")
            val = val * 10 + d
            pos += 1
        return success(pos, val)

    return scan_int


def scan_eol(state: ScanState, pos: int) -> Match:
    if pos >= len(state.line):
        return success(pos)
    return fail(pos)


def build_registry(max_int: int = INT_MAX) -> TerminalRegistry:
    """Declare the calculator's terminals: ident, int and eol."""
    registry = TerminalRegistry()
    registry.register("ident", scan_ident, result_type=str)
    registry.register("int", make_int_scanner(max_int), result_type=int)
    registry.register("eol", scan_eol, display="end of line")
    registry.freeze()
    return registry


# ---------------------------------------------------------------------------
# Built-in functions
# ---------------------------------------------------------------------------


def fn_min(args: list[int]) -> int:
    return min(args)


def fn_max(args: list[int]) -> int:
    return max(args)


def make_rand(rng: random.Random | None = None, max_int: int = INT_MAX) -> Builtin:
    gen = rng if rng is not None else random.Random()

    def fn_rand(args: list[int]) -> int:
        if args:
            print("arguments in rand() ignored", file=sys.stderr)
        return gen.randint(0, max_int)

    return fn_rand


# Functions that need at least one argument
_NEEDS_ARGS = frozenset({"min", "max"})


def default_functions(rng: random.Random | None = None, max_int: int = INT_MAX) -> dict[str, Builtin]:
    return {"min": fn_min, "max": fn_max, "rand": make_rand(rng, max_int)}


def atoi(text: str) -> int:
    """Parse a leading optionally-signed decimal integer; 0 if there is none."""
    s = text.lstrip()
    sign = 1
    if s[:1] in ("-", "+"):
        if s[0] == "-":
            sign = -1
        s = s[1:]
    digits = 0
    while digits < len(s) and is_digit(s[digits]):
        digits += 1
    return sign * int(s[:digits]) if digits else 0


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------


class Calculator:
    """Evaluate one integer expression per input line."""

    def __init__(
        self,
        env: Mapping[str, str] | None = None,
        *,
        max_int: int = INT_MAX,
        functions: Mapping[str, Builtin] | None = None,
        trace: Tracer | None = None,
        max_depth: int = MAX_DEPTH,
    ) -> None:
        self.env: Mapping[str, str] = env if env is not None else os.environ
        self.functions: Mapping[str, Builtin] = (
            functions if functions is not None else default_functions(max_int=max_int)
        )
        self.registry = build_registry(max_int)
        self.scanner = Scanner(self.registry, trace=trace)
        self._ident = self.registry["ident"]
        self._int = self.registry["int"]
        self._eol = self.registry["eol"]
        self.max_depth = max_depth
        self._depth = 0

    def evaluate(self, line: str) -> int:
        """Evaluate one line; raises ScanError on any error."""
        return self.scanner.parse(line, lambda _: self.expr())

    def run(
        self,
        lines: Iterable[str],
        on_error: Callable[[ScanError], object],
    ) -> Iterator[tuple[str, int]]:
        """Evaluate each line, reporting errors to on_error and carrying on."""
        stripped = (line.rstrip("\r\n") for line in lines)
        return self.scanner.handle(stripped, lambda _: self.expr(), on_error)

    # ------------------------------------------------------------------
    # Grammar rules
    # ------------------------------------------------------------------

    def expr(self) -> int:
        self._depth = 0
        n = self.term()
        self.scanner.expect(self._eol)
        return n

    def term(self) -> int:
        sc = self.scanner
        n = self.factor()
        while True:
            if sc.accept(PLUS):
                n += self.factor()
            elif sc.accept(MINUS):
                n -= self.factor()
            else:
                return n

    def factor(self) -> int:
        sc = self.scanner
        n = self.primary()
        while True:
            if sc.accept(MUL):
                n *= self.primary()
            elif sc.accept(DIV1) or sc.accept(DIV2):
                d = self.primary()
                if d == 0:
                    sc.error("division by zero")
                n = _trunc_div(n, d)
            else:
                return n

    def primary(self) -> int:
        if self._depth >= self.max_depth:
            self.scanner.error("expression too deeply nested")
        self._depth += 1
        try:
            return self._primary()
        finally:
            self._depth -= 1

    def _primary(self) -> int:
        sc = self.scanner

        if sc.accept(self._ident):
            name = sc.value
            if sc.accept(LPAREN):
                return self._call(name)
            value = self.env.get(name)
            if value is None:
                sc.error("%s not found in environment", name)
            return atoi(value)

        if sc.accept(LPAREN):
            n = self.term()
            sc.expect(RPAREN)
            return n

        if sc.accept(MINUS):
            return -self.primary()

        if sc.accept(PLUS):
            return self.primary()

        if sc.accept(self._int):
            return sc.value

        sc.error("syntax error at pos %d", sc.state.error_pos)

    def _call(self, name: str) -> int:
        sc = self.scanner
        fn = self.functions.get(name)
        if fn is None:
            sc.error("unknown function %s", name)

        args: list[int] = []
        while True:
            if sc.accept(RPAREN):
                break

            if len(args) >= MAX_ARGS:
                sc.error("function %s: too many args", name)
            args.append(self.term())

            if sc.accept(COMMA):
                continue

            if sc.accept(EOL):
                sc.error("unclosed paren on function call %s", name)

        if name in _NEEDS_ARGS and not args:
            sc.error("function %s: needs at least one arg", name)
        return fn(args)
