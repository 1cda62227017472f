"""Version derivation from git tag history.

Usage:
    from releng.version import SemanticVersion, parse_tags, resolve_versions

    base = SemanticVersion.parse("0.9.0")
    resolution = resolve_versions(base, parse_tags(["v0.9.0", "v0.9.1", "v1.0.0"]))
    print(resolution.current, resolution.next)  # 0.9.1 0.9.2
"""

from releng.version.language import GoStrategy, Language, LanguageStrategy, language_strategy
from releng.version.resolver import (
    VersionResolution,
    VersionResolver,
    VersionWindow,
    parse_tags,
    resolve_versions,
)
from releng.version.semver import (
    MAJOR,
    MINOR,
    PATCH,
    SemanticVersion,
    VersionParseError,
    parse_version,
)

__all__ = [
    # semver
    "MAJOR",
    "MINOR",
    "PATCH",
    "SemanticVersion",
    "VersionParseError",
    "parse_version",
    # resolver
    "VersionResolution",
    "VersionResolver",
    "VersionWindow",
    "parse_tags",
    "resolve_versions",
    # language
    "GoStrategy",
    "Language",
    "LanguageStrategy",
    "language_strategy",
]
