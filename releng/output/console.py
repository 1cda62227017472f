"""Progress and diagnostics output.

Services report through ``ConsoleProtocol`` instead of printing. ``RichConsole``
writes to stderr, since stdout belongs to the values scripts capture
(versions, branch names, release notes). ``MockConsole`` records for tests.

Verbosity lives on the console: ``debug`` needs a verbose console, and a
quiet one drops everything except errors and warnings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

from rich.console import Console
from rich.markup import escape

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]


class Style(Enum):
    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()


_RICH_STYLES = {
    Style.DEFAULT: None,
    Style.SUCCESS: "green",
    Style.ERROR: "red bold",
    Style.WARNING: "yellow",
    Style.INFO: "cyan",
    Style.DIM: "dim",
}

# styles that survive a quiet console
_ALWAYS_SHOWN = frozenset({Style.ERROR, Style.WARNING})


class ConsoleProtocol(Protocol):
    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print ``message`` as is; used to echo commands before running them."""
        ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def debug(self, message: str) -> None:
        """Diagnostic line, shown only by a verbose console."""
        ...


class RichConsole:
    def __init__(self, *, verbose: bool = False, quiet: bool = False) -> None:
        self._console = Console(stderr=True, highlight=False)
        self._verbose = verbose
        self._quiet = quiet

    def _emit(self, label: str, style: Style, message: str) -> None:
        if self._quiet and style not in _ALWAYS_SHOWN:
            return
        self._console.print(f"[{_RICH_STYLES[style]}]{label}[/] {escape(message)}")

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        if self._quiet and style not in _ALWAYS_SHOWN:
            return
        # commit subjects and git refspecs are full of brackets
        self._console.print(message, style=_RICH_STYLES[style], markup=False)

    def success(self, message: str) -> None:
        self._emit("OK", Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._emit("error:", Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._emit("warning:", Style.WARNING, message)

    def info(self, message: str) -> None:
        self._emit("info:", Style.INFO, message)

    def debug(self, message: str) -> None:
        # verbose wins over quiet
        if self._verbose:
            self._console.print(message, style="dim", markup=False)


@dataclass
class OutputRecord:
    message: str
    style: Style


@dataclass
class MockConsole:
    """Records output instead of printing it."""

    verbose: bool = False
    outputs: list[OutputRecord] = field(default_factory=list)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self.print(f"OK {message}", Style.SUCCESS)

    def error(self, message: str) -> None:
        self.print(f"error: {message}", Style.ERROR)

    def warning(self, message: str) -> None:
        self.print(f"warning: {message}", Style.WARNING)

    def info(self, message: str) -> None:
        self.print(f"info: {message}", Style.INFO)

    def debug(self, message: str) -> None:
        if self.verbose:
            self.print(message, Style.DIM)

    @property
    def messages(self) -> list[str]:
        return [record.message for record in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(record.style is Style.ERROR for record in self.outputs)

    def has_warning(self) -> bool:
        return any(record.style is Style.WARNING for record in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        return [record for record in self.outputs if substring in record.message]
