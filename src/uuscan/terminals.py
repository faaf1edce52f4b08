"""Terminal registry: application-declared lexical categories with dense ids."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from uuscan.errors import RegistryError

if TYPE_CHECKING:
    from uuscan.state import Match, ScanState

# A terminal scanner gets the state and a position already past leading
# blanks, and reports success(end, value) or fail(where).
ScanFn = Callable[["ScanState", int], "Match"]


@dataclass(frozen=True, slots=True)
class Terminal:
    """A registered terminal: identity, names and its scanning function."""

    id: int
    name: str
    fn: ScanFn = field(compare=False, repr=False)
    display: str = ""
    result_type: type | None = None

    @property
    def label(self) -> str:
        """Name used in default error messages."""
        return self.display or self.name


class TerminalRegistry:
    """Table of terminals indexed by dense, zero-based id.

    Terminals are registered once, in declaration order, before parsing
    begins. ``freeze()`` closes registration; a Scanner freezes the registry
    it is given.
    """

    def __init__(self) -> None:
        self._terminals: list[Terminal] = []
        self._by_name: dict[str, Terminal] = {}
        self._frozen = False

    @classmethod
    def from_list(cls, entries: Iterable[tuple[str, ScanFn]]) -> TerminalRegistry:
        """Build and freeze a registry from (name, scan function) pairs."""
        registry = cls()
        for name, fn in entries:
            registry.register(name, fn)
        registry.freeze()
        return registry

    def register(
        self,
        name: str,
        fn: ScanFn,
        *,
        display: str | None = None,
        result_type: type | None = None,
    ) -> Terminal:
        """Add a terminal and return it; its id is the next free index."""
        if self._frozen:
            raise RegistryError(f"cannot register terminal {name!r}: registry is frozen")
        if not name:
            raise RegistryError("terminal name must not be empty")
        if name in self._by_name:
            raise RegistryError(f"terminal {name!r} already registered")
        if not callable(fn):
            raise RegistryError(f"scanner for terminal {name!r} is not callable")

        term = Terminal(len(self._terminals), name, fn, display or "", result_type)
        self._terminals.append(term)
        self._by_name[name] = term
        return term

    def terminal(
        self,
        name: str,
        *,
        display: str | None = None,
        result_type: type | None = None,
    ) -> Callable[[ScanFn], Terminal]:
        """Decorator form of register(); binds the function's name to the Terminal."""

        def decorator(fn: ScanFn) -> Terminal:
            return self.register(name, fn, display=display, result_type=result_type)

        return decorator

    def freeze(self) -> None:
        """Close registration. An empty registry is a configuration error."""
        if not self._terminals:
            raise RegistryError("at least one terminal must be registered")
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, term_id: int) -> Terminal:
        return self._terminals[term_id]

    def __getitem__(self, name: str) -> Terminal:
        return self._by_name[name]

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._terminals)

    def __iter__(self) -> Iterator[Terminal]:
        return iter(self._terminals)
