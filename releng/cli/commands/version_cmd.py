from __future__ import annotations

import typer

from releng.cli.commands._helpers import exit_on_error
from releng.cli.context import CLIContext, build_context
from releng.services.errors import from_git
from releng.services.tagging import TagOutcome, VersionKind, create_tag, query_version


def _report_skip(ctx: CLIContext, outcome: TagOutcome) -> None:
    if outcome.skipped:
        ctx.console.warning(outcome.skipped)


def tag(
    ctx: typer.Context,
    only_for_branch: str | None = typer.Option(
        None,
        "--only-for-branch",
        help="Only tag when building this branch; otherwise exit successfully.",
    ),
) -> None:
    """Tag HEAD with the next version and push the tag."""
    cli = build_context(ctx)
    outcome = exit_on_error(
        create_tag(
            settings=cli.settings,
            repo=cli.repo,
            console=cli.console,
            only_for_branch=only_for_branch,
        ),
        cli,
    )
    if outcome.tag is None:
        _report_skip(cli, outcome)
        return
    cli.console.success(f"tagged {outcome.tag}")


def _print_version(ctx: typer.Context, kind: VersionKind) -> None:
    cli = build_context(ctx)
    outcome = exit_on_error(
        query_version(settings=cli.settings, repo=cli.repo, console=cli.console, kind=kind),
        cli,
    )
    if outcome.tag is None:
        _report_skip(cli, outcome)
        return
    typer.echo(outcome.tag)


def get_version(ctx: typer.Context) -> None:
    """Print the version being built. Run it before the tag is made."""
    _print_version(ctx, "next")


def get_current_version(ctx: typer.Context) -> None:
    """Print the most recent release tag of the current minor line."""
    _print_version(ctx, "current")


def get_branch(ctx: typer.Context) -> None:
    """Print the branch being built."""
    cli = build_context(ctx)
    result = cli.repo.current_branch()
    typer.echo(exit_on_error(result.map_err(from_git), cli))
