"""Semantic version value type.

Versions are read from tag names and from the base version file. A version
is a sequence of integer segments, optionally followed by a prerelease and
build metadata. Missing trailing segments count as zero, so ``1.2`` and
``1.2.0`` are equal and both print as ``1.2.0``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

__all__ = [
    "MAJOR",
    "MINOR",
    "PATCH",
    "SemanticVersion",
    "VersionParseError",
    "parse_version",
]

MAJOR = 0
MINOR = 1
PATCH = 2

_MIN_SEGMENTS = 3

_VERSION_RE = re.compile(
    r"^v?"
    r"(?P<segments>\d+(?:\.\d+)*)"
    r"(?:-(?P<prerelease>[0-9A-Za-z\-~]+(?:\.[0-9A-Za-z\-~]+)*))?"
    r"(?:\+(?P<metadata>[0-9A-Za-z\-~]+(?:\.[0-9A-Za-z\-~]+)*))?$"
)


class VersionParseError(ValueError):
    """Raised when text is not a semantic version."""


def _pad(segments: tuple[int, ...], length: int = _MIN_SEGMENTS) -> tuple[int, ...]:
    if len(segments) >= length:
        return segments
    return segments + (0,) * (length - len(segments))


def _prerelease_key(prerelease: str) -> tuple[tuple[int, int | str], ...]:
    # numeric identifiers sort before alphanumeric ones
    key: list[tuple[int, int | str]] = []
    for part in prerelease.split("."):
        if part.isdigit():
            key.append((0, int(part)))
        else:
            key.append((1, part))
    return tuple(key)


@total_ordering
@dataclass(frozen=True, slots=True, eq=False)
class SemanticVersion:
    """Immutable semantic version.

    Attributes:
        segments: Integer segments (major, minor, patch, ...)
        prerelease: Prerelease identifier without the leading dash
        metadata: Build metadata without the leading plus (ignored for ordering)
    """

    segments: tuple[int, ...]
    prerelease: str | None = None
    metadata: str | None = None

    def __post_init__(self) -> None:
        if not self.segments:
            raise VersionParseError("version needs at least one segment")
        if any(s < 0 for s in self.segments):
            raise VersionParseError(f"negative segment in {self.segments}")

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        """Parse a version such as ``v1.2.3``, ``1.2`` or ``0.9.1-rc.1+abc``.

        Raises:
            VersionParseError: If the text is not a version.
        """
        m = _VERSION_RE.match(text.strip())
        if m is None:
            raise VersionParseError(f"malformed version: {text!r}")
        segments = tuple(int(s) for s in m.group("segments").split("."))
        return cls(segments, m.group("prerelease"), m.group("metadata"))

    @classmethod
    def of(cls, *segments: int) -> SemanticVersion:
        return cls(tuple(segments))

    @property
    def major(self) -> int:
        return self._padded[MAJOR]

    @property
    def minor(self) -> int:
        return self._padded[MINOR]

    @property
    def patch(self) -> int:
        return self._padded[PATCH]

    @property
    def _padded(self) -> tuple[int, ...]:
        return _pad(self.segments)

    def with_patch(self, patch: int) -> SemanticVersion:
        """Return a copy with the patch segment set, prerelease dropped."""
        parts = list(self._padded)
        parts[PATCH] = patch
        return SemanticVersion(tuple(parts))

    def bump(self, index: int) -> SemanticVersion:
        """Return a copy with segment ``index`` incremented by one.

        Lower segments are kept as they are: ``bump(MINOR)`` on 1.2.0 gives
        1.3.0 and on 1.2.5 gives 1.3.5.
        """
        parts = list(_pad(self.segments, max(_MIN_SEGMENTS, index + 1)))
        parts[index] += 1
        return SemanticVersion(tuple(parts))

    def _key(self) -> tuple[object, ...]:
        length = max(_MIN_SEGMENTS, len(self.segments))
        if self.prerelease is None:
            pre: tuple[int, tuple[tuple[int, int | str], ...]] = (1, ())
        else:
            pre = (0, _prerelease_key(self.prerelease))
        return (_pad(self.segments, length), pre)

    def _compare_key(self, other: SemanticVersion) -> tuple[tuple[object, ...], tuple[object, ...]]:
        length = max(_MIN_SEGMENTS, len(self.segments), len(other.segments))
        mine = (_pad(self.segments, length),) + self._key()[1:]
        theirs = (_pad(other.segments, length),) + other._key()[1:]
        return mine, theirs

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        mine, theirs = self._compare_key(other)
        return mine == theirs

    def __lt__(self, other: SemanticVersion) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        mine, theirs = self._compare_key(other)
        return mine < theirs

    def __hash__(self) -> int:
        segments = self.segments
        while len(segments) > _MIN_SEGMENTS and segments[-1] == 0:
            segments = segments[:-1]
        # prerelease hashed by its comparison key: rc.01 == rc.1
        return hash((_pad(segments), self._key()[1]))

    def __str__(self) -> str:
        text = ".".join(str(s) for s in self._padded)
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.metadata:
            text += f"+{self.metadata}"
        return text

    def __repr__(self) -> str:
        return f"SemanticVersion({str(self)!r})"


def parse_version(text: str) -> SemanticVersion | None:
    """Parse a version, returning None instead of raising."""
    try:
        return SemanticVersion.parse(text)
    except VersionParseError:
        return None
