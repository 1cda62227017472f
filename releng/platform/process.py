"""Subprocess execution with Result-based error handling.

This is the only module that touches ``subprocess``. Three shapes are
offered:

- ``run``: capture stdout, used for queries (``git tag --list``, ``go list -m``)
- ``run_streaming``: inherit the terminal, used for actions whose output the
  CI log should show (``git push``, ``go get``)
- ``stream_records``: lazily read separator-delimited records from a long
  running command (``git log``), so callers can stop early

Usage:
    result = run(["git", "tag", "--list"], cwd=repo_root)
    match result:
        case Ok(stdout):
            print(stdout)
        case Err(error):
            print(f"failed: {error.stderr}")
"""

from __future__ import annotations

import subprocess
import tempfile
from collections.abc import Generator
from dataclasses import dataclass
from pathlib import Path

from releng.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run", "run_streaming", "stream_records"]

_READ_CHUNK = 64 * 1024


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that could not be started, timed out or exited non-zero.

    ``returncode`` is -1 when there is no exit status.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @classmethod
    def not_started(cls, cmd: list[str], reason: str) -> ProcessError:
        return cls(command=tuple(cmd), returncode=-1, stderr=reason)

    def __str__(self) -> str:
        shown = " ".join(self.command[:3]) + (" ..." if len(self.command) > 3 else "")
        return f"{shown} failed (exit {self.returncode})"

    @property
    def detail(self) -> str:
        """stderr, else stdout, else the one-line summary."""
        return self.stderr.strip() or self.stdout.strip() or str(self)


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run ``cmd`` in ``cwd`` and return its captured stdout.

    ``env`` replaces the environment when given.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return Err(ProcessError.not_started(cmd, f"timed out after {timeout}s"))
    except OSError as e:
        return Err(ProcessError.not_started(cmd, str(e)))

    if proc.returncode:
        return Err(ProcessError(tuple(cmd), proc.returncode, proc.stdout, proc.stderr))
    return Ok(proc.stdout)


def run_streaming(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Execute a command with stdout/stderr going straight to the terminal."""
    try:
        proc = subprocess.run(cmd, cwd=str(cwd), env=env, check=False)
    except OSError as e:
        return Err(ProcessError.not_started(cmd, str(e)))

    if proc.returncode != 0:
        return Err(ProcessError(tuple(cmd), proc.returncode))

    return Ok(None)


def stream_records(
    cmd: list[str],
    cwd: Path,
    separator: str,
) -> Generator[Result[str, ProcessError], None, None]:
    """Yield ``separator``-terminated records from a command's stdout.

    Records are produced as the command writes them. Closing the iterator
    before the end kills the process. A non-zero exit after the last record
    is reported as a final ``Err`` item.
    """
    # stderr goes to a file: an unread stderr pipe can fill up and stall stdout
    with tempfile.TemporaryFile(mode="w+", encoding="utf-8", errors="replace") as stderr_file:
        try:
            proc = subprocess.Popen(
                cmd,
                cwd=str(cwd),
                stdout=subprocess.PIPE,
                stderr=stderr_file,
                text=True,
            )
        except OSError as e:
            yield Err(ProcessError.not_started(cmd, str(e)))
            return

        assert proc.stdout is not None
        finished = False
        try:
            buffer = ""
            while True:
                chunk = proc.stdout.read(_READ_CHUNK)
                if not chunk:
                    break
                buffer += chunk
                *records, buffer = buffer.split(separator)
                for record in records:
                    yield Ok(record)

            returncode = proc.wait()
            finished = True
            if buffer.strip():
                yield Ok(buffer)
            if returncode != 0:
                stderr_file.seek(0)
                yield Err(ProcessError(tuple(cmd), returncode, stderr=stderr_file.read()))
        finally:
            if not finished:
                proc.kill()
                proc.wait()
            proc.stdout.close()
