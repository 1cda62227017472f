"""Release notes text: changelog sections, go.mod dependency diffs, issue lines."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum

__all__ = [
    "RELEASE_HEADER",
    "DependencyChange",
    "DependencyStatus",
    "IssueInfo",
    "compare_url",
    "diff_dependencies",
    "extract_release_notes",
    "format_dependency_change",
    "format_issue",
    "format_raw_issue",
    "module_org",
    "module_project",
    "parse_module_path",
    "parse_requirements",
]

RELEASE_HEADER = "# Release"

_MODULE_RE = re.compile(r"^\s*module\s+(\S+)", re.MULTILINE)
_REQUIRE_LINE_RE = re.compile(r"^(\S+)\s+(\S+)$")


# -----------------------------------------------------------------------------
# CHANGELOG.md sections
# -----------------------------------------------------------------------------


def extract_release_notes(changelog: str, version: str | None = None) -> str:
    """Return one ``# Release ...`` section of a changelog.

    Without ``version`` the first section is returned, otherwise the section
    whose header starts with ``# Release <version>``. Empty if none matches.
    """
    out: list[str] = []
    started = False
    for line in changelog.splitlines():
        if line.startswith(RELEASE_HEADER):
            if started:
                break
            if not version or line.startswith(f"{RELEASE_HEADER} {version}"):
                started = True
        if started:
            out.append(line)
    if not out:
        return ""
    return "\n".join(out) + "\n"


# -----------------------------------------------------------------------------
# go.mod
# -----------------------------------------------------------------------------


def _strip_comment(line: str) -> str:
    return line.split("//", 1)[0].strip()


def parse_module_path(go_mod: str) -> str | None:
    m = _MODULE_RE.search(go_mod)
    if m is None:
        return None
    return m.group(1).strip('"')


def parse_requirements(go_mod: str) -> dict[str, str]:
    """Module path to version for every ``require`` entry, in file order."""
    requirements: dict[str, str] = {}
    in_block = False
    for raw in go_mod.splitlines():
        line = _strip_comment(raw)
        if not line:
            continue
        if in_block:
            if line == ")":
                in_block = False
                continue
            entry = line
        elif line.startswith("require"):
            rest = line[len("require") :].strip()
            if rest == "(":
                in_block = True
                continue
            entry = rest
        else:
            continue

        m = _REQUIRE_LINE_RE.match(entry)
        if m is not None:
            requirements[m.group(1).strip('"')] = m.group(2)
    return requirements


def module_project(module_path: str) -> str:
    """Repository name of a module: ``github.com/org/name/v2`` -> ``name``."""
    parts = module_path.split("/")
    if len(parts) >= 3:
        return parts[2]
    return parts[-1]


def module_org(module_path: str) -> str | None:
    parts = module_path.split("/")
    if len(parts) >= 3:
        return parts[1]
    return None


class DependencyStatus(StrEnum):
    NEW = "new"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


@dataclass(frozen=True, slots=True)
class DependencyChange:
    path: str
    old_version: str | None
    new_version: str
    status: DependencyStatus

    @property
    def project(self) -> str:
        return module_project(self.path)


def diff_dependencies(
    old: Mapping[str, str],
    new: Mapping[str, str],
    *,
    module_filter: str,
    show_unchanged: bool = False,
) -> list[DependencyChange]:
    """Compare in-family requirements of two go.mod files, in ``new`` order."""
    changes: list[DependencyChange] = []
    for path, version in new.items():
        if module_filter not in path:
            continue
        previous = old.get(path)
        if previous is None:
            changes.append(DependencyChange(path, None, version, DependencyStatus.NEW))
        elif previous != version:
            changes.append(DependencyChange(path, previous, version, DependencyStatus.CHANGED))
        elif show_unchanged:
            changes.append(DependencyChange(path, previous, version, DependencyStatus.UNCHANGED))
    return changes


def compare_url(org: str, project: str, old: str, new: str) -> str:
    return f"https://github.com/{org}/{project}/compare/{old}...{new}"


def format_dependency_change(change: DependencyChange, org: str) -> str:
    match change.status:
        case DependencyStatus.NEW:
            return f"* {change.path}: {change.new_version} (new)"
        case DependencyStatus.UNCHANGED:
            return f"* {change.path}: {change.new_version} (unchanged)"
        case DependencyStatus.CHANGED:
            old = change.old_version or ""
            url = compare_url(org, change.project, old, change.new_version)
            return f"* {change.path}: [{old} -> {change.new_version}]({url})"


# -----------------------------------------------------------------------------
# Issues
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class IssueInfo:
    number: int
    title: str
    url: str


def format_issue(issue: IssueInfo) -> str:
    return f"    * [Issue #{issue.number}]({issue.url}) - {issue.title}"


def format_raw_issue(number: str) -> str:
    return f"    * #{number}"
