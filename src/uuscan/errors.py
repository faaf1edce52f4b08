"""Error types with formatted source context."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuscan.state import ScanState


class RegistryError(Exception):
    """Raised when a terminal registry is misconfigured."""


class ScanError(Exception):
    """Raised by a failed expect() or an explicit error, caught at one handler.

    ``message`` is the exact user-visible text (``"expected int at pos 7"``);
    ``position`` is the 1-based column in ``line`` the error refers to.
    ``origin`` is the scan state that raised it, so a handler only catches
    errors from its own parse.
    """

    def __init__(
        self,
        message: str,
        position: int,
        line: str,
        origin: ScanState | None = None,
    ) -> None:
        self.message = message
        self.position = position
        self.line = line
        self.origin = origin
        super().__init__(message)

    def format(self, filename: str = "<input>", lineno: int = 1) -> str:
        source_line = self.line.rstrip("\n").rstrip("\r")
        col = max(1, self.position)

        pad = " " * (col - 1)

        line_num = str(lineno)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{lineno}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}^"
        )
