"""Dependency-bump branch flow.

``update_dependency`` runs on a bot-created update branch: it syncs the
branch with the main branch, bumps one Go dependency and commits the result.
``complete_dependency_update`` then fast-forwards the main branch to that
commit and pushes both branches.

Projects that finish updates by hand set ``complete_update_dependency_manually``
to ``true``; the sync with main is skipped and the update branch is pushed
on its own.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from releng.core.config import Settings
from releng.core.result import Err, Ok, Result
from releng.git.repository import Repository
from releng.output.console import ConsoleProtocol
from releng.services import gomod
from releng.services.errors import ReleaseError, from_git

__all__ = [
    "MANUAL_COMPLETE_ENV",
    "UPDATED_DEPENDENCY_ENV",
    "DependencyUpdate",
    "complete_dependency_update",
    "is_manual_complete",
    "update_dependency",
]

UPDATED_DEPENDENCY_ENV = "UPDATED_DEPENDENCY"
MANUAL_COMPLETE_ENV = "complete_update_dependency_manually"


@dataclass(frozen=True, slots=True)
class DependencyUpdate:
    dependency: str
    changed: bool


def is_manual_complete(env: Mapping[str, str]) -> bool:
    return env.get(MANUAL_COMPLETE_ENV, "") == "true"


def _git_steps(repo: Repository, steps: list[tuple[str, list[str]]]) -> Result[None, ReleaseError]:
    for description, args in steps:
        result = repo.run_mutating(description, args)
        if isinstance(result, Err):
            return Err(from_git(result.error))
    return Ok(None)


def update_dependency(
    *,
    settings: Settings,
    repo: Repository,
    console: ConsoleProtocol,
    dependency: str | None = None,
    env: Mapping[str, str] | None = None,
) -> Result[DependencyUpdate, ReleaseError]:
    """Bump ``dependency`` (``module@version``) on the current update branch.

    Falls back to ``$UPDATED_DEPENDENCY``. When ``go get`` leaves ``go.mod``
    untouched the flow stops with ``changed=False`` and nothing is committed.
    """
    env = os.environ if env is None else env
    dep = dependency or env.get(UPDATED_DEPENDENCY_ENV, "").strip()
    if not dep:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message="no updated dependency provided",
                hint=f"pass it as an argument or set {UPDATED_DEPENDENCY_ENV}",
            )
        )

    main = settings.project.main_branch
    synced = _git_steps(
        repo,
        [
            (
                "allow fetching other branches",
                ["config", "--replace-all", "remote.origin.fetch", "+refs/heads/*:refs/remotes/origin/*"],
            ),
            (f"ensure origin/{main} is up to date", ["fetch", "origin", main]),
            ("ensure go.mod/go.sum are untouched", ["checkout", "--", "go.mod", "go.sum"]),
        ],
    )
    if isinstance(synced, Err):
        return synced

    if not is_manual_complete(env):
        merged = _git_steps(repo, [(f"sync with {main}", ["merge", "--ff-only", f"origin/{main}"])])
        if isinstance(merged, Err):
            return merged
        diff = repo.diff(f"origin/{main}")
        if isinstance(diff, Err):
            return Err(from_git(diff.error))
        if diff.value.strip():
            return Err(
                ReleaseError(
                    kind="diverged",
                    message=(
                        f"update branch has diverged from {main}. "
                        "automated merges won't work until this is fixed"
                    ),
                    hint=diff.value.strip(),
                )
            )

    got = gomod.run_go("update dependency", ["get", dep], root=settings.root, console=console)
    if isinstance(got, Err):
        return got

    changed = repo.diff_names("go.mod")
    if isinstance(changed, Err):
        return Err(from_git(changed.error))
    if changed.value != ["go.mod"]:
        return Ok(DependencyUpdate(dependency=dep, changed=False))

    console.info(f"attempting to update to {dep}")
    tidied = gomod.run_go("tidy go.sum", ["mod", "tidy"], root=settings.root, console=console)
    if isinstance(tidied, Err):
        return tidied

    committed = _git_steps(
        repo,
        [
            ("add go mod changes", ["add", "go.mod", "go.sum"]),
            ("commit go.mod changes", ["commit", "-m", f"Updating dependency {dep}"]),
        ],
    )
    if isinstance(committed, Err):
        return committed
    return Ok(DependencyUpdate(dependency=dep, changed=True))


def complete_dependency_update(
    *,
    settings: Settings,
    repo: Repository,
    console: ConsoleProtocol,
    env: Mapping[str, str] | None = None,
) -> Result[str, ReleaseError]:
    """Fast-forward the target branch to the update commit and push. Returns the commit."""
    env = os.environ if env is None else env
    branch = repo.current_branch(env)
    if isinstance(branch, Err):
        return Err(from_git(branch.error))
    update_branch = branch.value

    # tooling run after the commit may have touched go.mod
    restored = _git_steps(
        repo, [("ensure go.mod/go.sum are untouched", ["checkout", "--", "go.mod", "go.sum"])]
    )
    if isinstance(restored, Err):
        return restored

    head = repo.short_head(12)
    if isinstance(head, Err):
        return Err(from_git(head.error))

    if is_manual_complete(env):
        checkout = ("checkout actual branch", ["checkout", update_branch])
    else:
        main = settings.project.main_branch
        checkout = (f"checkout {main}", ["checkout", main])
    console.debug(f"merging {head.value} from {update_branch}")

    pushed = _git_steps(
        repo,
        [
            checkout,
            ("merge in changes", ["merge", "--ff-only", head.value]),
            ("push to remote", ["push"]),
            ("push update branch", ["push", "origin", update_branch]),
        ],
    )
    if isinstance(pushed, Err):
        return pushed
    return Ok(head.value)
