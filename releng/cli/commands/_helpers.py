"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import typer

from releng.core.errors import ErrorCode
from releng.core.result import Err, Result
from releng.output.console import Style
from releng.services.errors import ReleaseError

if TYPE_CHECKING:
    from releng.cli.context import CLIContext

T = TypeVar("T")


def release_error_code(error: ReleaseError) -> ErrorCode:
    match error.kind:
        case "config" | "gh_missing":
            return ErrorCode.CONFIG_ERROR
        case "git" | "revision_not_found" | "history" | "diverged":
            return ErrorCode.GIT_ERROR
        case "gh_failed" | "go_failed":
            return ErrorCode.EXTERNAL_ERROR
        case "io":
            return ErrorCode.IO_ERROR
        case _:
            return ErrorCode.USER_ERROR


def exit_on_error(result: Result[T, ReleaseError], ctx: CLIContext) -> T:
    """Return the value of ``result``, or report the error and exit.

    The exit code follows from the error kind; the hint, when present, is
    printed on its own line below the error.
    """
    if isinstance(result, Err):
        error = result.error
        ctx.console.error(error.message)
        if error.hint:
            # WARNING style survives --quiet, unlike DIM
            ctx.console.print(f"hint: {error.hint}", Style.WARNING)
        raise typer.Exit(code=int(release_error_code(error)))
    return result.value
