from __future__ import annotations

import json
import shutil
from pathlib import Path

from releng.changelog.notes import IssueInfo
from releng.core.result import Err, Ok, Result
from releng.core.structured import as_str_dict, get_int, get_str
from releng.output.console import ConsoleProtocol, Style
from releng.platform.process import run as run_process
from releng.platform.process import run_streaming
from releng.services.errors import ReleaseError

GH_TIMEOUT_SECONDS = 60.0


def ensure_gh_available() -> Result[None, ReleaseError]:
    if shutil.which("gh") is None:
        return Err(
            ReleaseError(
                kind="gh_missing",
                message="gh (github CLI) not found",
                hint="Install GitHub CLI (https://cli.github.com/) and run: gh auth login",
            )
        )
    return Ok(None)


def lookup_issue(number: str, *, cwd: Path) -> Result[IssueInfo, ReleaseError]:
    """Title and URL of an issue in the repository checked out at ``cwd``."""
    available = ensure_gh_available()
    if isinstance(available, Err):
        return available

    cmd = ["gh", "issue", "view", number, "--json", "number,title,url"]
    result = run_process(cmd, cwd=cwd, timeout=GH_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="gh_failed",
                message=f"gh issue view {number} failed",
                hint=result.error.detail,
            )
        )

    try:
        obj: object = json.loads(result.value)
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind="gh_failed",
                message=f"gh returned invalid JSON for issue {number}: {e}",
            )
        )

    data = as_str_dict(obj)
    issue_number = get_int(data, "number") if data is not None else None
    url = get_str(data, "url") if data is not None else None
    if data is None or issue_number is None or url is None:
        return Err(ReleaseError(kind="gh_failed", message=f"unexpected gh output for issue {number}"))

    return Ok(IssueInfo(number=issue_number, title=get_str(data, "title") or "", url=url))


def create_release(
    *,
    root: Path,
    console: ConsoleProtocol,
    tag: str,
    notes_file: Path,
    artifacts: list[Path],
    dry_run: bool,
) -> Result[None, ReleaseError]:
    """Create a GitHub release for ``tag`` and upload ``artifacts``."""
    cmd = ["gh", "release", "create", tag, "-F", str(notes_file), *(str(a) for a in artifacts)]
    for artifact in artifacts:
        console.print(f"publishing {artifact}", Style.DIM)
    console.print(f"create GH release and publish release artifacts: {' '.join(cmd)}", Style.DIM)
    if dry_run:
        return Ok(None)

    available = ensure_gh_available()
    if isinstance(available, Err):
        return available

    result = run_streaming(cmd, cwd=root)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="gh_failed",
                message=f"gh release create {tag} failed",
                hint=result.error.detail,
            )
        )
    return Ok(None)
