from __future__ import annotations

from pathlib import Path

import typer

from releng.changelog.extractor import ChangeMode
from releng.cli.commands._helpers import exit_on_error
from releng.cli.context import build_context
from releng.services.release_notes import build_release_notes as build_notes
from releng.services.release_notes import read_release_notes, write_release_notes


def build_release_notes(
    ctx: typer.Context,
    all_commits: bool = typer.Option(
        False, "--all-commits", "-a", help="Show all commits, not just closed issues."
    ),
    show_unchanged: bool = typer.Option(
        False, "--show-unchanged", "-u", help="Show in-family dependencies even if unchanged."
    ),
    raw_issues: bool = typer.Option(
        False, "--raw-issues", help="Print issue numbers without looking them up with gh."
    ),
) -> None:
    """Print release notes for the upcoming release.

    Quiet unless --quiet or --no-quiet is given explicitly, so the output
    can be pasted into a changelog as is.
    """
    cli = build_context(ctx, quiet_by_default=True)
    exit_on_error(
        build_notes(
            settings=cli.settings,
            repo=cli.repo,
            console=cli.console,
            emit=typer.echo,
            mode=ChangeMode.ALL_COMMITS if all_commits else ChangeMode.ISSUES,
            show_unchanged=show_unchanged,
            raw_issues=raw_issues,
        ),
        cli,
    )


def get_release_notes(
    ctx: typer.Context,
    changelog: Path = typer.Argument(..., help="Changelog made of '# Release <version>' sections."),
    version: str | None = typer.Argument(None, help="Version to extract (default: newest)."),
    outfile: Path | None = typer.Argument(None, help="Write the notes here instead of stdout."),
) -> None:
    """Print the release notes of one version from a changelog."""
    cli = build_context(ctx)
    notes = exit_on_error(read_release_notes(changelog, version), cli)
    if not notes:
        cli.console.warning(f"no release section found in {changelog}")

    if outfile is None:
        typer.echo(notes, nl=False)
        return
    exit_on_error(write_release_notes(notes, outfile), cli)
