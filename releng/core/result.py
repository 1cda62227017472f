"""Result type for explicit error handling.

Every step that talks to git, gh or go can fail, and the failure has to reach
the CLI intact so it can be reported with its cause and mapped to an exit
code. Instead of exceptions threaded through the flows, fallible operations
return ``Ok(value)`` or ``Err(error)`` and callers branch with ``isinstance``
or ``match``:

    match read_base_version(settings):
        case Ok(version):
            ...
        case Err(error):
            return Err(from_config(error))
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        return Ok(f(self.value))

    def map_err(self, f: Callable[[Any], F]) -> Ok[T]:
        return self

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E

    def map(self, f: Callable[[Any], U]) -> Err[E]:
        return self

    def map_err(self, f: Callable[[E], F]) -> Err[F]:
        """Convert the payload, typically into the caller's error type."""
        return Err(f(self.error))

    def unwrap(self) -> None:
        raise ValueError(f"called unwrap on Err: {self.error!r}")


Result: TypeAlias = Ok[T] | Err[E]
