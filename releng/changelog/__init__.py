"""Changelog extraction from commit history.

Usage:
    from releng.changelog import ChangeLogExtractor, ChangeMode

    extractor = ChangeLogExtractor(repo, settings.bots)
    match extractor.changes("HEAD", "v0.9.3", primary=True):
        case Ok(issues):
            print(issues)  # ['431', '433']
        case Err(e):
            print(e.message)
"""

from releng.changelog.extractor import (
    ChangeLogExtractor,
    ChangelogError,
    ChangeMode,
    CommitSource,
    correct_old_boundary,
    format_commit_line,
    resolve_boundary,
)
from releng.changelog.issues import extract_issues
from releng.changelog.notes import (
    DependencyChange,
    DependencyStatus,
    IssueInfo,
    diff_dependencies,
    extract_release_notes,
    format_dependency_change,
    format_issue,
    format_raw_issue,
    parse_requirements,
)

__all__ = [
    # extractor
    "ChangeLogExtractor",
    "ChangelogError",
    "ChangeMode",
    "CommitSource",
    "correct_old_boundary",
    "format_commit_line",
    "resolve_boundary",
    # issues
    "extract_issues",
    # notes
    "DependencyChange",
    "DependencyStatus",
    "IssueInfo",
    "diff_dependencies",
    "extract_release_notes",
    "format_dependency_change",
    "format_issue",
    "format_raw_issue",
    "parse_requirements",
]
