from __future__ import annotations

import typer

from releng.cli.commands._helpers import exit_on_error
from releng.cli.context import build_context
from releng.services.deps import complete_dependency_update, update_dependency


def update_go_dependency(
    ctx: typer.Context,
    dependency: str | None = typer.Argument(
        None, help="module@version to update to (default: $UPDATED_DEPENDENCY)."
    ),
) -> None:
    """Update a go dependency to a different version and commit it."""
    cli = build_context(ctx)
    update = exit_on_error(
        update_dependency(
            settings=cli.settings,
            repo=cli.repo,
            console=cli.console,
            dependency=dependency,
        ),
        cli,
    )
    if not update.changed:
        cli.console.warning(f"requested dependency {update.dependency} did not result in change")
        return
    cli.console.success(f"updated {update.dependency}")


def complete_update_go_dependency(ctx: typer.Context) -> None:
    """Merge a go dependency update into the main branch and push."""
    cli = build_context(ctx)
    commit = exit_on_error(
        complete_dependency_update(settings=cli.settings, repo=cli.repo, console=cli.console),
        cli,
    )
    cli.console.success(f"merged {commit}")
