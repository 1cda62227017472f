"""Language-specific release rules.

Only Go is supported today. Each language contributes a strategy so that
tag naming and module checks do not leak as special cases into the flows.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Protocol

from releng.version.semver import SemanticVersion

__all__ = ["GoStrategy", "Language", "LanguageStrategy", "language_strategy"]


class Language(StrEnum):
    GO = "go"


class LanguageStrategy(Protocol):
    language: Language

    def tag_name(self, version: SemanticVersion) -> str:
        """Name of the git tag for ``version``."""
        ...

    def check_module_path(self, version: SemanticVersion, module_path: str) -> str | None:
        """Return an error message if the module cannot be released as ``version``."""
        ...

    @property
    def needs_module_path(self) -> bool: ...


class GoStrategy:
    """Go modules: ``v``-prefixed tags, ``/vN`` module suffix for N >= 2."""

    language = Language.GO

    def tag_name(self, version: SemanticVersion) -> str:
        return f"v{version}"

    def check_module_path(self, version: SemanticVersion, module_path: str) -> str | None:
        major = version.major
        if major <= 1:
            return None
        if module_path.endswith(f"/v{major}"):
            return None
        return f"module version doesn't match next version: {module_path} is not /v{major}"

    @property
    def needs_module_path(self) -> bool:
        return True


_STRATEGIES: dict[Language, LanguageStrategy] = {
    Language.GO: GoStrategy(),
}


def language_strategy(language: Language) -> LanguageStrategy:
    return _STRATEGIES[language]
