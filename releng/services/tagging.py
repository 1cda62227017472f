"""Version evaluation and release tagging."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from releng.core.config import Settings, read_base_version
from releng.core.result import Err, Ok, Result
from releng.git.repository import Repository
from releng.output.console import ConsoleProtocol
from releng.services import gomod
from releng.services.errors import ReleaseError, from_config, from_git
from releng.version.language import language_strategy
from releng.version.resolver import VersionResolution, VersionResolver, parse_tags

VersionKind = Literal["current", "next"]


@dataclass(frozen=True, slots=True)
class TagOutcome:
    """Result of the tag flow.

    ``tag`` is None when the flow stopped early without it being an error;
    ``skipped`` then says why.
    """

    tag: str | None
    resolution: VersionResolution | None = None
    skipped: str | None = None


def evaluate_versions(
    *,
    settings: Settings,
    repo: Repository,
    console: ConsoleProtocol,
) -> Result[VersionResolution, ReleaseError]:
    """Fetch tags and resolve the current and next version."""
    base = read_base_version(settings)
    if isinstance(base, Err):
        return Err(from_config(base.error))

    fetched = repo.fetch_tags()
    if isinstance(fetched, Err):
        return Err(from_git(fetched.error))

    names = repo.list_tags()
    if isinstance(names, Err):
        return Err(from_git(names.error))

    tags = parse_tags(
        names.value,
        on_skip=lambda name: console.debug(f"failure interpreting tag version on {name}"),
    )
    for tag in tags:
        console.debug(f"found version {tag}")

    resolver = VersionResolver(
        base.value,
        on_compare=lambda v: console.debug(f"Comparing against: {v}"),
    )
    resolution = resolver.resolve(tags)
    console.info(f"current version: {resolution.current}, next version: {resolution.next}")
    return Ok(resolution)


def ensure_not_tagged(repo: Repository) -> Result[str | None, ReleaseError]:
    """Why HEAD must not be tagged again, or None when it carries no version tag."""
    names = repo.tags_at_head()
    if isinstance(names, Err):
        return Err(from_git(names.error))
    tags = parse_tags(names.value)
    if not tags:
        return Ok(None)
    return Ok(f"head already tagged with {', '.join(str(t) for t in tags)}")


def query_version(
    *,
    settings: Settings,
    repo: Repository,
    console: ConsoleProtocol,
    kind: VersionKind,
) -> Result[TagOutcome, ReleaseError]:
    """Tag name of the current or next version, unless HEAD is already tagged."""
    resolution = evaluate_versions(settings=settings, repo=repo, console=console)
    if isinstance(resolution, Err):
        return resolution

    tagged = ensure_not_tagged(repo)
    if isinstance(tagged, Err):
        return tagged
    if tagged.value is not None:
        return Ok(TagOutcome(tag=None, resolution=resolution.value, skipped=tagged.value))

    version = resolution.value.next if kind == "next" else resolution.value.current
    if version is None:
        return Err(
            ReleaseError(
                kind="no_release",
                message=f"no release tagged yet for {resolution.value.base}",
                hint=f"next version would be {resolution.value.next}",
            )
        )
    strategy = language_strategy(settings.language)
    return Ok(TagOutcome(tag=strategy.tag_name(version), resolution=resolution.value))


def create_tag(
    *,
    settings: Settings,
    repo: Repository,
    console: ConsoleProtocol,
    only_for_branch: str | None = None,
) -> Result[TagOutcome, ReleaseError]:
    """Tag HEAD with the next version and push the tag.

    Re-running on an already tagged HEAD is a no-op, so CI can retry the
    step safely. Tag creation and push are skipped in dry-run mode.
    """
    if only_for_branch:
        branch = repo.current_branch()
        if isinstance(branch, Err):
            return Err(from_git(branch.error))
        if branch.value != only_for_branch:
            return Ok(
                TagOutcome(
                    tag=None,
                    skipped=(
                        f"current branch {branch.value} doesn't match requested branch "
                        f"{only_for_branch}, so skipping"
                    ),
                )
            )

    resolution = evaluate_versions(settings=settings, repo=repo, console=console)
    if isinstance(resolution, Err):
        return resolution

    tagged = ensure_not_tagged(repo)
    if isinstance(tagged, Err):
        return tagged
    if tagged.value is not None:
        return Ok(TagOutcome(tag=None, resolution=resolution.value, skipped=tagged.value))

    next_version = resolution.value.next
    console.info(f"previous version: {resolution.value.current}, next version: {next_version}")

    strategy = language_strategy(settings.language)
    if strategy.needs_module_path and next_version.major > 1:
        module = gomod.module_path(root=settings.root, console=console)
        if isinstance(module, Err):
            return module
        problem = strategy.check_module_path(next_version, module.value)
        if problem is not None:
            return Err(ReleaseError(kind="module_mismatch", message=problem))

    tag = strategy.tag_name(next_version)
    steps = [
        ("create tag", ["tag", "-a", tag, "-m", f"Release {tag}"]),
        ("push tag to repo", ["push", "origin", tag]),
    ]
    for description, args in steps:
        result = repo.run_mutating(description, args)
        if isinstance(result, Err):
            return Err(from_git(result.error))

    return Ok(TagOutcome(tag=tag, resolution=resolution.value))
