"""Git repository abstraction.

``Repository`` runs the ``git`` CLI in one working tree. Queries return
Result types; mutating commands go through ``run_mutating`` which echoes the
command and skips it in dry-run mode.

Usage:
    repo = Repository(Path("."), console=console, dry_run=True)

    match repo.resolve_revision("v0.9.3"):
        case Ok(sha):
            for item in repo.log(sha):
                ...
        case Err(e):
            print(f"error: {e.message}")
"""

from __future__ import annotations

import os
from collections.abc import Generator, Mapping
from dataclasses import dataclass
from pathlib import Path

from releng.core.result import Err, Ok, Result
from releng.git.commit import LOG_FORMAT, RECORD_SEPARATOR, Commit, parse_log_record
from releng.output.console import ConsoleProtocol, Style
from releng.platform.process import ProcessError
from releng.platform.process import run as run_process
from releng.platform.process import run_streaming, stream_records

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

BRANCH_ENV_VARS = ("TRAVIS_PULL_REQUEST_BRANCH", "TRAVIS_BRANCH")

__all__ = [
    "BRANCH_ENV_VARS",
    "GitError",
    "Repository",
    "branch_from_env",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1

    @property
    def hint(self) -> str:
        return f"git {self.command} (exit {self.returncode})"


def branch_from_env(env: Mapping[str, str]) -> str | None:
    """Branch name reported by CI, pull request branch first."""
    for name in BRANCH_ENV_VARS:
        value = env.get(name, "").strip()
        if value:
            return value
    return None


def _lines(output: str) -> list[str]:
    return [ln for ln in output.replace("\r\n", "\n").split("\n") if ln.strip()]


class Repository:
    """Git working tree.

    Attributes:
        path: Path to the repository root
        dry_run: Skip mutating commands (they are still echoed)
    """

    def __init__(
        self,
        path: Path,
        *,
        console: ConsoleProtocol | None = None,
        dry_run: bool = False,
    ) -> None:
        self.path = path
        self.dry_run = dry_run
        self._console = console

    # -- tags ---------------------------------------------------------------

    def fetch_tags(self) -> Result[None, GitError]:
        """Fetch remote tags. Runs in dry-run mode too: it only reads."""
        self._echo("fetching git tags", ["fetch", "--tags"])
        result = run_streaming(["git", "-C", str(self.path), "fetch", "--tags"], cwd=self.path)
        if isinstance(result, Err):
            return Err(self._error("fetch --tags", result.error, "fetching tags failed"))
        return Ok(None)

    def list_tags(self) -> Result[list[str], GitError]:
        return self._query_lines(["tag", "--list"], "list git tags")

    def tags_at_head(self) -> Result[list[str], GitError]:
        return self._query_lines(["tag", "--points-at", "HEAD"], "list tags at HEAD")

    # -- refs ---------------------------------------------------------------

    def current_branch(self, env: Mapping[str, str] | None = None) -> Result[str, GitError]:
        """Branch being built: CI environment first, then ``HEAD``."""
        from_env = branch_from_env(os.environ if env is None else env)
        if from_env is not None:
            return Ok(from_env)
        return self._query_one_line(["rev-parse", "--abbrev-ref", "HEAD"], "get git branch")

    def short_head(self, length: int = 12) -> Result[str, GitError]:
        return self._query_one_line(["rev-parse", f"--short={length}", "HEAD"], "get git SHA")

    def resolve_revision(self, revision: str) -> Result[str, GitError]:
        """Resolve a tag, branch or hash to a full commit hash."""
        result = self._run(["rev-parse", "--verify", "--quiet", f"{revision}^{{commit}}"])
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command=f"rev-parse {revision}",
                        message=f"revision not found: {revision}",
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                return Ok(stdout.strip())

    # -- history ------------------------------------------------------------

    def commit(self, sha: str) -> Result[Commit, GitError]:
        result = self._run(["log", "-1", f"--format={LOG_FORMAT}", sha])
        if isinstance(result, Err):
            return Err(self._error(f"log -1 {sha}", result.error, f"commit not found: {sha}"))
        commit = parse_log_record(result.value.split(RECORD_SEPARATOR, 1)[0])
        if commit is None:
            return Err(GitError(command=f"log -1 {sha}", message=f"unreadable commit: {sha}"))
        return Ok(commit)

    def log(self, start: str) -> Generator[Result[Commit, GitError], None, None]:
        """Commits reachable from ``start``, newest first by committer time.

        The walk is lazy; closing the iterator stops ``git log``.
        """
        cmd = ["git", "-C", str(self.path), "log", "--date-order", f"--format={LOG_FORMAT}", start]
        records = stream_records(cmd, cwd=self.path, separator=RECORD_SEPARATOR)
        try:
            for item in records:
                match item:
                    case Err(e):
                        yield Err(self._error(f"log {start}", e, "git log failed"))
                        return
                    case Ok(record):
                        commit = parse_log_record(record)
                        if commit is None:
                            if record.strip():
                                yield Err(
                                    GitError(
                                        command=f"log {start}",
                                        message="unreadable commit record in history",
                                    )
                                )
                                return
                            continue
                        yield Ok(commit)
        finally:
            records.close()

    # -- files --------------------------------------------------------------

    def show_file(self, revision: str, path: str) -> Result[str, GitError]:
        """Contents of ``path`` at ``revision``."""
        self._echo(f"get {path} contents", ["show", f"{revision}:{path}"])
        result = self._run(["show", f"{revision}:{path}"])
        if isinstance(result, Err):
            return Err(
                self._error(f"show {revision}:{path}", result.error, f"cannot read {path} at {revision}")
            )
        return Ok(result.value)

    def diff_names(self, *paths: str) -> Result[list[str], GitError]:
        return self._query_lines(["diff", "--name-only", "--", *paths], "check if there's a change")

    def diff(self, revision: str) -> Result[str, GitError]:
        self._echo("ensure we are synced", ["diff", revision])
        result = self._run(["diff", revision])
        if isinstance(result, Err):
            return Err(self._error(f"diff {revision}", result.error, "git diff failed"))
        return Ok(result.value)

    # -- mutations ----------------------------------------------------------

    def run_mutating(self, description: str, args: list[str]) -> Result[None, GitError]:
        """Run a command that changes the repository or the remote.

        The command is echoed first; in dry-run mode nothing else happens.
        """
        self._echo(description, args)
        if self.dry_run:
            return Ok(None)
        result = run_streaming(["git", "-C", str(self.path), *args], cwd=self.path)
        if isinstance(result, Err):
            return Err(self._error(" ".join(args), result.error, f"error {description}"))
        return Ok(None)

    # -- internals ----------------------------------------------------------

    def _echo(self, description: str, args: list[str]) -> None:
        if self._console is not None:
            self._console.print(f"{description}: git {' '.join(args)}", Style.DIM)

    def _query_lines(self, args: list[str], description: str) -> Result[list[str], GitError]:
        self._echo(description, args)
        result = self._run(args)
        if isinstance(result, Err):
            return Err(self._error(" ".join(args), result.error, f"error {description}"))
        return Ok(_lines(result.value))

    def _query_one_line(self, args: list[str], description: str) -> Result[str, GitError]:
        result = self._query_lines(args, description)
        if isinstance(result, Err):
            return result
        lines = result.value
        if len(lines) != 1:
            return Err(
                GitError(
                    command=" ".join(args),
                    message=f"expected 1 line from {description}, but got {len(lines)}",
                )
            )
        return Ok(lines[0].strip())

    def _error(self, command: str, error: ProcessError, message: str) -> GitError:
        return GitError(
            command=command,
            message=f"{message}: {error.detail}",
            returncode=error.returncode,
        )

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS
            if command in {"fetch", "pull", "push", "clone"}
            else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)
