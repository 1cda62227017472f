"""Issue references in commit messages."""

from __future__ import annotations

import re

__all__ = ["ISSUE_PATTERN", "extract_issues"]

# fix(es|ed), close(s|d), resolve(s|d); ASCII digits only, issue numbers go to gh
ISSUE_PATTERN = re.compile(
    r"(fix(e[sd])?|close[sd]?|resolve[sd]?)\s*#(\d+)", re.IGNORECASE | re.ASCII
)


def extract_issues(message: str) -> list[str]:
    """Numbers of the issues a commit message closes, in order of appearance.

    >>> extract_issues("This commit fixes #20, closes #10 and resolves #5")
    ['20', '10', '5']
    """
    return [m.group(3) for m in ISSUE_PATTERN.finditer(message)]
