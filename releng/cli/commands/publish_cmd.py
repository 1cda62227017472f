from __future__ import annotations

from pathlib import Path

import typer

from releng.cli.commands._helpers import exit_on_error
from releng.cli.context import build_context
from releng.services.publish import publish_release


def publish_to_github(
    ctx: typer.Context,
    artifacts: list[Path] | None = typer.Argument(None, help="Files to attach to the release."),
    notes_file: Path | None = typer.Option(
        None, "--notes-file", "-n", help="Release notes file (default: CHANGELOG.md)."
    ),
) -> None:
    """Create a GitHub release for the current version and upload artifacts."""
    cli = build_context(ctx)
    tag = exit_on_error(
        publish_release(
            settings=cli.settings,
            repo=cli.repo,
            console=cli.console,
            artifacts=list(artifacts or []),
            notes_file=notes_file,
        ),
        cli,
    )
    cli.console.success(f"published {tag}")
