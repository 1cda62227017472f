"""Current/next version derivation from tag history.

The base version file says "we are working toward at least X.Y.Z". Tags
accumulate patch releases inside that minor line (X.Y.0, X.Y.1, ...), and
bumping the base version file moves the window to a new minor or major
line. Tags from other lines may live in the same repository and are
ignored.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from releng.version.semver import MINOR, PATCH, SemanticVersion, parse_version

__all__ = [
    "VersionResolution",
    "VersionResolver",
    "VersionWindow",
    "parse_tags",
    "resolve_versions",
]


@dataclass(frozen=True, slots=True)
class VersionWindow:
    """Half-open interval ``[lower, upper)`` one minor version wide."""

    lower: SemanticVersion
    upper: SemanticVersion

    @classmethod
    def for_base(cls, base: SemanticVersion) -> VersionWindow:
        lower = base.with_patch(0)
        return cls(lower=lower, upper=lower.bump(MINOR))

    def __contains__(self, version: object) -> bool:
        if not isinstance(version, SemanticVersion):
            return False
        return self.lower <= version < self.upper


@dataclass(frozen=True, slots=True)
class VersionResolution:
    """Outcome of a resolution.

    Attributes:
        base: The configured base version
        current: Latest released version in the window, None on a first release
        next: Version the next tag should carry
    """

    base: SemanticVersion
    current: SemanticVersion | None
    next: SemanticVersion

    @property
    def is_first_release(self) -> bool:
        return self.current is None

    @property
    def publish_version(self) -> SemanticVersion:
        """Version to publish artifacts under: current if tagged, else next."""
        return self.current if self.current is not None else self.next


def parse_tags(
    names: Iterable[str],
    on_skip: Callable[[str], None] | None = None,
) -> tuple[SemanticVersion, ...]:
    """Parse tag names into versions, dropping the ones that are not versions.

    Returns the versions sorted ascending.
    """
    versions: list[SemanticVersion] = []
    for name in names:
        name = name.strip()
        if not name:
            continue
        version = parse_version(name)
        if version is None:
            if on_skip is not None:
                on_skip(name)
            continue
        versions.append(version)
    return tuple(sorted(versions))


def resolve_versions(
    base: SemanticVersion,
    tags: Iterable[SemanticVersion],
    on_compare: Callable[[SemanticVersion], None] | None = None,
) -> VersionResolution:
    """Compute the current and next version for ``base`` given ``tags``.

    The scan keeps the last qualifying tag, so tags are sorted first and the
    result is the largest tag inside the window regardless of input order.
    """
    window = VersionWindow.for_base(base)

    current: SemanticVersion | None = None
    for tag in sorted(tags):
        if on_compare is not None:
            on_compare(tag)
        if tag in window:
            current = tag

    nxt = current.bump(PATCH) if current is not None else window.lower
    if nxt < base:
        nxt = base

    return VersionResolution(base=base, current=current, next=nxt)


class VersionResolver:
    """Resolver bound to one base version.

    ``on_compare`` is called with every tag considered, which the CLI uses
    for verbose output.
    """

    def __init__(
        self,
        base: SemanticVersion,
        on_compare: Callable[[SemanticVersion], None] | None = None,
    ) -> None:
        self.base = base
        self._on_compare = on_compare

    @property
    def window(self) -> VersionWindow:
        return VersionWindow.for_base(self.base)

    def resolve(self, tags: Iterable[SemanticVersion]) -> VersionResolution:
        return resolve_versions(self.base, tags, on_compare=self._on_compare)

    def resolve_names(
        self,
        names: Iterable[str],
        on_skip: Callable[[str], None] | None = None,
    ) -> VersionResolution:
        return self.resolve(parse_tags(names, on_skip=on_skip))
