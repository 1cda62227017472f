from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from releng.core.config import Settings, load_settings
from releng.core.errors import ErrorCode
from releng.core.result import Err
from releng.git.repository import Repository
from releng.output.console import ConsoleProtocol, RichConsole
from releng.version.language import Language


@dataclass(frozen=True, slots=True)
class GlobalOptions:
    """Options given before the command name, kept on the typer context."""

    verbose: bool = False
    quiet: bool = False
    quiet_explicit: bool = False
    dry_run: bool = False
    language: str = Language.GO.value
    base_version: str | None = None
    base_version_file: Path | None = None


@dataclass(frozen=True, slots=True)
class CLIContext:
    settings: Settings
    console: ConsoleProtocol
    repo: Repository


def _parse_language(name: str) -> Language:
    try:
        return Language(name.strip().lower())
    except ValueError:
        choices = ", ".join(lang.value for lang in Language)
        typer.echo(f"error: unsupported language: {name} (expected one of: {choices})", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))


def build_context(ctx: typer.Context, *, quiet_by_default: bool = False) -> CLIContext:
    """Settings, console and repository for the current directory.

    ``quiet_by_default`` makes the command quiet unless ``--quiet`` was
    given explicitly, for commands whose stdout is the whole point.
    """
    options = ctx.find_object(GlobalOptions) or GlobalOptions()
    quiet = options.quiet if options.quiet_explicit or not quiet_by_default else True

    settings_result = load_settings(
        Path.cwd(),
        verbose=options.verbose,
        quiet=quiet,
        dry_run=options.dry_run,
        language=_parse_language(options.language),
        base_version=options.base_version,
        base_version_file=options.base_version_file,
    )
    if isinstance(settings_result, Err):
        error = settings_result.error
        location = f" ({error.path})" if error.path else ""
        typer.echo(f"error: {error.message}{location}", err=True)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    settings = settings_result.value
    console = RichConsole(verbose=settings.verbose, quiet=settings.quiet)
    return CLIContext(
        settings=settings,
        console=console,
        repo=Repository(settings.root, console=console, dry_run=settings.dry_run),
    )
