"""Git operations.

- Repository: tags, revisions, history walks and mutating commands
- Commit: immutable commit snapshot

Usage:
    from releng.core.result import Ok
    from releng.git import Repository

    repo = Repository(Path("."))
    tags = repo.list_tags()
    if isinstance(tags, Ok):
        print(tags.value)
"""

from releng.git.commit import Commit, parse_log_record
from releng.git.repository import BRANCH_ENV_VARS, GitError, Repository, branch_from_env

__all__ = [
    "BRANCH_ENV_VARS",
    "Commit",
    "GitError",
    "Repository",
    "branch_from_env",
    "parse_log_record",
]
