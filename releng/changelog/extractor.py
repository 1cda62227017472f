"""Commit range extraction for release notes.

Given a new and an old revision, walk history newest-first from the new one
and keep the commits a human should read about: no merge commits, nothing
authored by the release automation or the dependency bot, and nothing at or
below the old boundary.

The old boundary needs a correction before it is usable. A release tag
often sits on a commit the automation created on top of the real history
(one parent, bot author); that commit is replaced by its parent. For the
primary project the boundary may also be a merge commit, in which case the
walk follows the most recently authored parent until it reaches a
non-merge commit.
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import closing
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from releng.changelog.issues import extract_issues
from releng.core.config import BotIdentities
from releng.core.result import Err, Ok, Result
from releng.git.commit import Commit
from releng.git.repository import GitError

__all__ = [
    "ChangeLogExtractor",
    "ChangeMode",
    "ChangelogError",
    "CommitSource",
    "correct_old_boundary",
    "format_commit_line",
    "resolve_boundary",
]


class CommitSource(Protocol):
    """Read access to a repository's commit graph."""

    def resolve_revision(self, revision: str) -> Result[str, GitError]: ...

    def commit(self, sha: str) -> Result[Commit, GitError]: ...

    def log(self, start: str) -> Generator[Result[Commit, GitError], None, None]:
        """Commits reachable from ``start``, newest first, produced lazily."""
        ...


class ChangeMode(StrEnum):
    ISSUES = "issues"
    ALL_COMMITS = "all-commits"


@dataclass(frozen=True, slots=True)
class ChangelogError:
    kind: str
    message: str
    hint: str | None = None


def _pseudo_version_hash(revision: str) -> str | None:
    # <base>-<n>-<hash>, e.g. v0.0.0-20230101120000-abcdef123456
    parts = revision.split("-")
    if len(parts) == 3 and parts[2]:
        return parts[2]
    return None


def resolve_boundary(source: CommitSource, revision: str) -> Result[str, ChangelogError]:
    """Resolve ``revision`` to a hash, falling back to a pseudo-version's hash."""
    result = source.resolve_revision(revision)
    if isinstance(result, Ok):
        return result

    fallback = _pseudo_version_hash(revision)
    if fallback is not None:
        retry = source.resolve_revision(fallback)
        if isinstance(retry, Ok):
            return retry

    return Err(
        ChangelogError(
            kind="revision_not_found",
            message=f"unable to resolve revision {revision}",
            hint=result.error.message,
        )
    )


def _load(source: CommitSource, sha: str) -> Result[Commit, ChangelogError]:
    result = source.commit(sha)
    if isinstance(result, Err):
        return Err(ChangelogError(kind="history_error", message=result.error.message, hint=sha))
    return result


def correct_old_boundary(
    source: CommitSource,
    sha: str,
    bots: BotIdentities,
    *,
    primary: bool,
) -> Result[str, ChangelogError]:
    """Move the old boundary from a release commit onto the mainline history."""
    loaded = _load(source, sha)
    if isinstance(loaded, Err):
        return loaded
    boundary = loaded.value

    if boundary.parent_count == 1 and bots.is_automation(boundary.author_name):
        loaded = _load(source, boundary.parents[0])
        if isinstance(loaded, Err):
            return loaded
        boundary = loaded.value

    if not primary:
        return Ok(boundary.sha)

    while boundary.is_merge:
        latest: Commit | None = None
        for parent_sha in boundary.parents:
            loaded = _load(source, parent_sha)
            if isinstance(loaded, Err):
                return loaded
            parent = loaded.value
            if latest is None or parent.authored_at > latest.authored_at:
                latest = parent
        assert latest is not None
        boundary = latest

    return Ok(boundary.sha)


def format_commit_line(commit: Commit) -> str:
    return f"    * {commit.short_sha}: {commit.subject} ({commit.author_email})"


class ChangeLogExtractor:
    """Interesting commits between two revisions of one repository."""

    def __init__(self, source: CommitSource, bots: BotIdentities) -> None:
        self.source = source
        self.bots = bots

    def collect(
        self,
        new_revision: str,
        old_revision: str,
        *,
        primary: bool = False,
    ) -> Result[list[Commit], ChangelogError]:
        """Commits after ``old_revision`` up to ``new_revision``, newest first.

        Running out of history before meeting the old boundary is not an
        error: everything down to the root is returned.
        """
        new_sha = resolve_boundary(self.source, new_revision)
        if isinstance(new_sha, Err):
            return new_sha
        old_sha = resolve_boundary(self.source, old_revision)
        if isinstance(old_sha, Err):
            return old_sha
        stop = correct_old_boundary(self.source, old_sha.value, self.bots, primary=primary)
        if isinstance(stop, Err):
            return stop

        commits: list[Commit] = []
        with closing(self.source.log(new_sha.value)) as history:
            for item in history:
                if isinstance(item, Err):
                    return Err(
                        ChangelogError(
                            kind="history_error",
                            message=item.error.message,
                            hint=f"walking history from {new_revision}",
                        )
                    )
                commit = item.value
                if commit.sha == stop.value:
                    break
                if self.bots.is_bot(commit.author_name):
                    continue
                if commit.is_merge:
                    continue
                commits.append(commit)
        return Ok(commits)

    def changes(
        self,
        new_revision: str,
        old_revision: str,
        *,
        primary: bool = False,
        mode: ChangeMode = ChangeMode.ISSUES,
    ) -> Result[list[str], ChangelogError]:
        """Issue numbers (default) or commit summary lines for the range."""
        collected = self.collect(new_revision, old_revision, primary=primary)
        if isinstance(collected, Err):
            return collected

        if mode is ChangeMode.ALL_COMMITS:
            return Ok([format_commit_line(c) for c in collected.value])

        issues: list[str] = []
        for commit in collected.value:
            issues.extend(extract_issues(commit.message))
        return Ok(issues)
