"""Error payload shared by the command flows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from releng.changelog.extractor import ChangelogError
from releng.core.config import ConfigError
from releng.git.repository import GitError

__all__ = ["ReleaseError", "ReleaseErrorKind", "from_changelog", "from_config", "from_git"]

ReleaseErrorKind = Literal[
    "config",
    "invalid_input",
    "git",
    "revision_not_found",
    "history",
    "no_release",
    "module_mismatch",
    "diverged",
    "gh_missing",
    "gh_failed",
    "go_failed",
    "io",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """What went wrong, and the underlying cause as ``hint``."""

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


def from_config(error: ConfigError) -> ReleaseError:
    return ReleaseError(kind="config", message=error.message, hint=error.hint)


def from_git(error: GitError) -> ReleaseError:
    return ReleaseError(kind="git", message=error.message, hint=error.hint)


def from_changelog(error: ChangelogError, project: str) -> ReleaseError:
    kind: ReleaseErrorKind = "revision_not_found" if error.kind == "revision_not_found" else "history"
    return ReleaseError(kind=kind, message=f"{project}: {error.message}", hint=error.hint)
