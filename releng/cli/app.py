from __future__ import annotations

from pathlib import Path

import typer
from click.core import ParameterSource

from releng import __version__
from releng.cli.commands.deps_cmd import complete_update_go_dependency, update_go_dependency
from releng.cli.commands.notes_cmd import build_release_notes, get_release_notes
from releng.cli.commands.publish_cmd import publish_to_github
from releng.cli.commands.version_cmd import get_branch, get_current_version, get_version, tag
from releng.cli.context import GlobalOptions
from releng.version.language import Language


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(tag)
app.command("get-version")(get_version)
app.command("get-current-version")(get_current_version)
app.command("get-branch")(get_branch)
app.command("build-release-notes")(build_release_notes)
app.command("get-release-notes")(get_release_notes)
app.command("update-go-dependency")(update_go_dependency)
app.command("complete-update-go-dependency")(complete_update_go_dependency)
app.command("publish-to-github")(publish_to_github)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output."),
    quiet: bool = typer.Option(
        False, "--quiet/--no-quiet", "-q", help="Disable informational output."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-d", help="Do everything except modify git and GitHub."
    ),
    language: str = typer.Option(
        Language.GO.value, "--language", "-l", help="Project language."
    ),
    base_version: str | None = typer.Option(
        None, "--base-version", "-b", help="Base version (overrides the version file)."
    ),
    base_version_file: Path | None = typer.Option(
        None,
        "--base-version-file",
        "-f",
        help="File holding the base version (default: ./version, then ./common/version/VERSION).",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    ctx.obj = GlobalOptions(
        verbose=verbose,
        quiet=quiet,
        quiet_explicit=ctx.get_parameter_source("quiet") is ParameterSource.COMMANDLINE,
        dry_run=dry_run,
        language=language,
        base_version=base_version,
        base_version_file=base_version_file,
    )


def main() -> None:
    app()
