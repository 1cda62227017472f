"""``go`` toolchain calls used by the release flows."""

from __future__ import annotations

from pathlib import Path

from releng.core.result import Err, Ok, Result
from releng.output.console import ConsoleProtocol, Style
from releng.platform.process import run as run_process
from releng.platform.process import run_streaming
from releng.services.errors import ReleaseError

GO_TIMEOUT_SECONDS = 5 * 60.0


def module_path(*, root: Path, console: ConsoleProtocol) -> Result[str, ReleaseError]:
    """Module path of the main module (``go list -m``)."""
    console.print("get go module: go list -m", Style.DIM)
    result = run_process(["go", "list", "-m"], cwd=root, timeout=GO_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(
            ReleaseError(kind="go_failed", message="error get go module", hint=result.error.detail)
        )
    lines = [ln.strip() for ln in result.value.splitlines() if ln.strip()]
    if len(lines) != 1:
        return Err(
            ReleaseError(
                kind="go_failed",
                message=f"expected 1 line from go list -m, but got {len(lines)}",
                hint="\n".join(lines) or None,
            )
        )
    return Ok(lines[0])


def run_go(
    description: str,
    args: list[str],
    *,
    root: Path,
    console: ConsoleProtocol,
) -> Result[None, ReleaseError]:
    console.print(f"{description}: go {' '.join(args)}", Style.DIM)
    result = run_streaming(["go", *args], cwd=root)
    if isinstance(result, Err):
        return Err(
            ReleaseError(kind="go_failed", message=f"error {description}", hint=result.error.detail)
        )
    return Ok(None)
