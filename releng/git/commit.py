"""Commit snapshot read from ``git log``."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

__all__ = ["Commit", "LOG_FORMAT", "RECORD_SEPARATOR", "parse_log_record"]

FIELD_SEPARATOR = "\x1f"
RECORD_SEPARATOR = "\x1e"

# hash, parents, author name, author email, author time, raw body
LOG_FORMAT = FIELD_SEPARATOR.join(["%H", "%P", "%an", "%ae", "%at", "%B"]) + RECORD_SEPARATOR


@dataclass(frozen=True, slots=True)
class Commit:
    """A single commit.

    Attributes:
        sha: Full commit hash
        parents: Parent hashes; empty for a root commit, two or more for a merge
        author_name: Author name
        author_email: Author email
        authored_at: Author timestamp
        message: Full commit message
    """

    sha: str
    parents: tuple[str, ...]
    author_name: str
    author_email: str
    authored_at: datetime
    message: str

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def subject(self) -> str:
        """First line of the message."""
        return self.message.split("\n", 1)[0]

    @property
    def parent_count(self) -> int:
        return len(self.parents)

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1


def parse_log_record(record: str) -> Commit | None:
    """Parse one ``LOG_FORMAT`` record, or return None if it is malformed."""
    record = record.lstrip("\n")
    if not record:
        return None
    fields = record.split(FIELD_SEPARATOR, 5)
    if len(fields) != 6:
        return None
    sha, parents, name, email, timestamp, message = fields
    try:
        authored_at = datetime.fromtimestamp(int(timestamp), tz=UTC)
    except ValueError:
        return None
    return Commit(
        sha=sha.strip(),
        parents=tuple(parents.split()),
        author_name=name,
        author_email=email,
        authored_at=authored_at,
        message=message.rstrip("\n"),
    )
