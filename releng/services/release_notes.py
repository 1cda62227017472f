"""Release notes: building them from history, and extracting them from a changelog.

``build_release_notes`` compares the ``go.mod`` of the last release with the
working copy. Every in-family dependency whose version moved gets a compare
link followed by the changes in that project (checked out next to this one,
at ``../<project>``). The primary project's own changes since its last
release come last. Projects are processed one after another and the first
error aborts the run.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from releng.changelog.extractor import ChangeLogExtractor, ChangeMode
from releng.changelog.notes import (
    DependencyChange,
    DependencyStatus,
    diff_dependencies,
    extract_release_notes,
    format_dependency_change,
    format_issue,
    format_raw_issue,
    module_org,
    module_project,
    parse_module_path,
    parse_requirements,
)
from releng.core.config import Settings
from releng.core.result import Err, Ok, Result
from releng.git.repository import Repository
from releng.output.console import ConsoleProtocol
from releng.services import gh
from releng.services.errors import ReleaseError, from_changelog, from_git
from releng.services.tagging import evaluate_versions
from releng.version.language import language_strategy

__all__ = ["build_release_notes", "read_release_notes", "write_release_notes"]

Emit = Callable[[str], None]
RepositoryFactory = Callable[[Path], Repository]

GO_MOD = "go.mod"


def _project_changes(
    *,
    project: str,
    repo: Repository,
    settings: Settings,
    emit: Emit,
    new_revision: str,
    old_revision: str,
    primary: bool,
    mode: ChangeMode,
    raw_issues: bool,
) -> Result[None, ReleaseError]:
    extractor = ChangeLogExtractor(repo, settings.bots)
    changes = extractor.changes(new_revision, old_revision, primary=primary, mode=mode)
    if isinstance(changes, Err):
        return Err(from_changelog(changes.error, project))

    for entry in changes.value:
        if mode is ChangeMode.ALL_COMMITS:
            emit(entry)
        elif raw_issues:
            emit(format_raw_issue(entry))
        else:
            issue = gh.lookup_issue(entry, cwd=repo.path)
            if isinstance(issue, Err):
                return issue
            emit(format_issue(issue.value))

    if changes.value:
        emit("")
    return Ok(None)


def _go_mod_at(repo: Repository, revision: str) -> Result[str, ReleaseError]:
    result = repo.show_file(revision, GO_MOD)
    if isinstance(result, Err):
        return Err(from_git(result.error))
    return result


def build_release_notes(
    *,
    settings: Settings,
    repo: Repository,
    console: ConsoleProtocol,
    emit: Emit,
    mode: ChangeMode = ChangeMode.ISSUES,
    show_unchanged: bool = False,
    raw_issues: bool = False,
    open_repository: RepositoryFactory | None = None,
) -> Result[None, ReleaseError]:
    """Write release notes for the upcoming release through ``emit``."""
    resolution = evaluate_versions(settings=settings, repo=repo, console=console)
    if isinstance(resolution, Err):
        return resolution
    current = resolution.value.current
    if current is None:
        return Err(
            ReleaseError(
                kind="no_release",
                message=f"no previous release for {resolution.value.base} to compare against",
            )
        )

    strategy = language_strategy(settings.language)
    current_tag = strategy.tag_name(current)
    next_tag = strategy.tag_name(resolution.value.next)

    go_mod_path = settings.root / GO_MOD
    try:
        new_go_mod = go_mod_path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(ReleaseError(kind="io", message=f"cannot read {go_mod_path}", hint=str(e)))
    old_go_mod = _go_mod_at(repo, current_tag)
    if isinstance(old_go_mod, Err):
        return old_go_mod

    own_path = parse_module_path(new_go_mod)
    if own_path is None:
        return Err(ReleaseError(kind="invalid_input", message=f"no module directive in {go_mod_path}"))
    org = settings.project.github_org or module_org(own_path)
    if org is None:
        return Err(
            ReleaseError(
                kind="config",
                message=f"cannot determine the GitHub organisation of {own_path}",
                hint="set github_org in .releng.toml",
            )
        )
    module_filter = settings.project.module_filter or org

    dependencies = diff_dependencies(
        parse_requirements(old_go_mod.value),
        parse_requirements(new_go_mod),
        module_filter=module_filter,
        show_unchanged=show_unchanged,
    )
    for change in dependencies:
        emit(format_dependency_change(change, org))
        if change.status is not DependencyStatus.CHANGED or change.old_version is None:
            continue

        project_dir = settings.root.parent / change.project
        if not project_dir.is_dir():
            return Err(
                ReleaseError(
                    kind="io",
                    message=f"{change.project}: repository not found at {project_dir}",
                    hint="check out dependency projects next to this one",
                )
            )
        if open_repository is not None:
            dep_repo = open_repository(project_dir)
        else:
            dep_repo = Repository(project_dir, console=console, dry_run=settings.dry_run)
        fetched = dep_repo.fetch_tags()
        if isinstance(fetched, Err):
            return Err(from_git(fetched.error))
        console.debug(f"{change.project}: {change.old_version}..{change.new_version}")
        result = _project_changes(
            project=change.project,
            repo=dep_repo,
            settings=settings,
            emit=emit,
            new_revision=change.new_version,
            old_revision=change.old_version,
            primary=False,
            mode=mode,
            raw_issues=raw_issues,
        )
        if isinstance(result, Err):
            return result

    own = DependencyChange(own_path, current_tag, next_tag, DependencyStatus.CHANGED)
    emit(format_dependency_change(own, org))
    return _project_changes(
        project=module_project(own_path),
        repo=repo,
        settings=settings,
        emit=emit,
        new_revision="HEAD",
        old_revision=current_tag,
        primary=True,
        mode=mode,
        raw_issues=raw_issues,
    )


def read_release_notes(changelog: Path, version: str | None = None) -> Result[str, ReleaseError]:
    """The ``# Release`` section for ``version`` (or the newest) of a changelog file.

    Empty when no section matches.
    """
    try:
        text = changelog.read_text(encoding="utf-8")
    except OSError as e:
        return Err(ReleaseError(kind="io", message=f"cannot read {changelog}", hint=str(e)))

    return Ok(extract_release_notes(text, version))


def write_release_notes(notes: str, outfile: Path) -> Result[None, ReleaseError]:
    try:
        outfile.write_text(notes, encoding="utf-8")
    except OSError as e:
        return Err(ReleaseError(kind="io", message=f"cannot write {outfile}", hint=str(e)))
    return Ok(None)
