from __future__ import annotations

from pathlib import Path

from releng.core.config import Settings
from releng.core.result import Err, Ok, Result
from releng.git.repository import Repository
from releng.output.console import ConsoleProtocol
from releng.services import gh
from releng.services.errors import ReleaseError
from releng.services.tagging import evaluate_versions
from releng.version.language import language_strategy

DEFAULT_NOTES_FILE = Path("CHANGELOG.md")


def publish_release(
    *,
    settings: Settings,
    repo: Repository,
    console: ConsoleProtocol,
    artifacts: list[Path],
    notes_file: Path | None = None,
) -> Result[str, ReleaseError]:
    """Create the GitHub release for the published version. Returns its tag."""
    resolution = evaluate_versions(settings=settings, repo=repo, console=console)
    if isinstance(resolution, Err):
        return resolution

    notes = notes_file or DEFAULT_NOTES_FILE
    if not notes.is_absolute():
        notes = settings.root / notes
    if not notes.is_file():
        return Err(ReleaseError(kind="io", message=f"release notes not found: {notes}"))

    resolved: list[Path] = []
    for artifact in artifacts:
        path = artifact if artifact.is_absolute() else settings.root / artifact
        if not path.is_file():
            return Err(ReleaseError(kind="io", message=f"artifact not found: {path}"))
        resolved.append(path)

    tag = language_strategy(settings.language).tag_name(resolution.value.publish_version)
    created = gh.create_release(
        root=settings.root,
        console=console,
        tag=tag,
        notes_file=notes,
        artifacts=resolved,
        dry_run=settings.dry_run,
    )
    if isinstance(created, Err):
        return created
    return Ok(tag)
