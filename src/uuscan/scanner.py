"""accept()/expect() scanning over one line, with a single error handler."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Any, NoReturn, TypeVar

from uuscan.chars import is_printable
from uuscan.debug import Tracer
from uuscan.errors import ScanError
from uuscan.matchers import dispatch
from uuscan.state import ScanState
from uuscan.targets import Char, Literal, Target, coerce
from uuscan.terminals import Terminal, TerminalRegistry

T = TypeVar("T")


class Scanner:
    """Tokenless scanner for recursive-descent grammar rules.

    Grammar rules call ``accept`` to probe alternatives and ``expect`` to
    require one. The cursor moves only when a match succeeds. A failed
    ``expect`` or an explicit ``error`` raises ScanError, caught once per
    input line by ``handle`` (or by the application's own single handler).
    """

    def __init__(self, registry: TerminalRegistry, *, trace: Tracer | None = None) -> None:
        if not registry.frozen:
            registry.freeze()
        self.registry = registry
        self.state = ScanState()
        self._trace = trace

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def cursor(self) -> int:
        return self.state.cursor

    @property
    def value(self) -> Any:
        """Converted value from the last successful terminal match."""
        return self.state.value

    @property
    def matched(self) -> str:
        return self.state.matched

    def reset(self, line: str) -> None:
        self.state.reset(line)

    def on_cleanup(self, hook: Callable[[], object] | None) -> None:
        self.state.on_cleanup(hook)

    def error(self, fmt: str, *args: object) -> NoReturn:
        self.state.error(fmt, *args)

    # ------------------------------------------------------------------
    # accept / expect
    # ------------------------------------------------------------------

    def accept(self, target: Target | str | int) -> bool:
        """Scan for target; advance and return True, or leave the cursor and return False."""
        target = coerce(target, self.registry)
        state = self.state

        if self._trace is not None:
            self._trace.attempt(target, state.line, state.cursor)

        result = dispatch(state, target)

        if self._trace is not None:
            self._trace.outcome(result)

        if not result.ok:
            state.fail_position = result.pos
            return False

        state.cursor = result.pos
        state.match_length = result.pos - state.match_start
        state.last_start = state.match_start
        state.last_length = state.match_length
        if isinstance(target, Terminal):
            state.value = result.value
        return True

    def accept_all(self, *targets: Target | str | int) -> bool:
        """Accept every target in order, or none of them.

        On the first failure the cursor, value and matched text are put
        back to where they were before the first target.
        """
        state = self.state
        saved_cursor = state.cursor
        saved_value = state.value
        saved_span = (state.last_start, state.last_length)
        for target in targets:
            if not self.accept(target):
                state.cursor = saved_cursor
                state.value = saved_value
                state.last_start, state.last_length = saved_span
                return False
        return True

    def expect(self, target: Target | str | int, message: str | None = None) -> None:
        """Accept target or raise ScanError "expected ... at pos N"."""
        target = coerce(target, self.registry)
        if self.accept(target):
            return
        what = message if message is not None else f"expected {expected_label(target)}"
        raise self.state.unwind(f"{what} at pos {self.state.error_pos}")

    # ------------------------------------------------------------------
    # Parse sessions
    # ------------------------------------------------------------------

    def parse(self, line: str, rule: Callable[[Scanner], T]) -> T:
        """Scan line with rule, returning its result. ScanError propagates."""
        self.state.reset(line)
        result = rule(self)
        self.state.cleanup_hook = None
        return result

    def handle(
        self,
        lines: Iterable[str],
        rule: Callable[[Scanner], T],
        on_error: Callable[[ScanError], object],
    ) -> Iterator[tuple[str, T]]:
        """Parse each line, yielding (line, result); report errors to on_error.

        This is the one place this scanner's errors are caught. After
        on_error returns, scanning resumes with the next line; on_error
        raises to stop. Errors raised by another scanner pass through.
        """
        for line in lines:
            try:
                result = self.parse(line, rule)
            except ScanError as exc:
                if exc.origin is not self.state:
                    raise
                on_error(exc)
                continue
            yield line, result


def expected_label(target: Target) -> str:
    """Describe target for an "expected ..." message."""
    match target:
        case Literal(text=text):
            return f'"{text}"'
        case Char(ch=ch):
            if is_printable(ch):
                return f"'{ch}'"
            return f"{ord(ch):x}"
        case Terminal():
            return target.label
    raise TypeError(f"unsupported scan target type: {type(target).__name__}")
