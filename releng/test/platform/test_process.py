"""Tests for releng.platform.process module."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from releng.core.result import Err, Ok
from releng.platform.process import ProcessError, run, run_streaming, stream_records


class TestProcessError:
    """Test ProcessError dataclass."""

    def test_str_short_command(self) -> None:
        error = ProcessError(
            command=("git", "status"),
            returncode=1,
            stdout="",
            stderr="fatal: not a git repository",
        )
        assert str(error) == "git status failed (exit 1)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("git", "log", "--date-order", "--format=%H", "HEAD"),
            returncode=128,
            stdout="",
            stderr="",
        )
        assert str(error) == "git log --date-order ... failed (exit 128)"

    def test_detail_prefers_stderr(self) -> None:
        error = ProcessError(("gh",), 1, "out", "  err \n")
        assert error.detail == "err"

    def test_detail_falls_back_to_stdout_then_summary(self) -> None:
        assert ProcessError(("gh",), 1, "out\n", "").detail == "out"
        assert ProcessError(("gh",), 1, "", "").detail == "gh failed (exit 1)"

    def test_not_started(self) -> None:
        error = ProcessError.not_started(["gh", "issue"], "No such file or directory: 'gh'")
        assert error.returncode == -1
        assert error.command == ("gh", "issue")
        assert error.detail == "No such file or directory: 'gh'"

    def test_frozen(self) -> None:
        error = ProcessError(("cmd",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


class TestRun:
    """Test run function."""

    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "print('hello')"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert "hello" in result.value

    def test_failure_returns_error(self, tmp_path: Path) -> None:
        code = "import sys; sys.stderr.write('bad'); sys.exit(3)"
        result = run([sys.executable, "-c", code], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 3
        assert result.error.stderr == "bad"

    def test_missing_executable(self, tmp_path: Path) -> None:
        result = run(["definitely-not-a-real-binary-xyz"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == -1

    def test_timeout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "import time; time.sleep(5)"], cwd=tmp_path, timeout=0.2)

        assert isinstance(result, Err)
        assert "timed out" in result.error.stderr


class TestRunStreaming:
    def test_success(self, tmp_path: Path) -> None:
        assert run_streaming([sys.executable, "-c", "pass"], cwd=tmp_path) == Ok(None)

    def test_failure(self, tmp_path: Path) -> None:
        result = run_streaming([sys.executable, "-c", "raise SystemExit(2)"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 2


class TestStreamRecords:
    def test_splits_records(self, tmp_path: Path) -> None:
        code = "import sys; sys.stdout.write('a\\x1eb\\x1ec\\x1e')"
        items = list(stream_records([sys.executable, "-c", code], cwd=tmp_path, separator="\x1e"))

        assert items == [Ok("a"), Ok("b"), Ok("c")]

    def test_trailing_record_without_separator(self, tmp_path: Path) -> None:
        code = "import sys; sys.stdout.write('a\\x1etail')"
        items = list(stream_records([sys.executable, "-c", code], cwd=tmp_path, separator="\x1e"))

        assert items == [Ok("a"), Ok("tail")]

    def test_non_zero_exit_is_final_error(self, tmp_path: Path) -> None:
        code = "import sys; sys.stdout.write('a\\x1e'); sys.stderr.write('boom'); sys.exit(128)"
        items = list(stream_records([sys.executable, "-c", code], cwd=tmp_path, separator="\x1e"))

        assert items[0] == Ok("a")
        last = items[-1]
        assert isinstance(last, Err)
        assert last.error.returncode == 128
        assert last.error.stderr == "boom"

    def test_large_stderr_does_not_stall_records(self, tmp_path: Path) -> None:
        code = (
            "import sys\n"
            "sys.stderr.write('w' * 1_000_000); sys.stderr.flush()\n"
            "sys.stdout.write('a\\x1eb\\x1e')\n"
            "sys.exit(3)\n"
        )
        items = list(stream_records([sys.executable, "-c", code], cwd=tmp_path, separator="\x1e"))

        assert items[:2] == [Ok("a"), Ok("b")]
        last = items[-1]
        assert isinstance(last, Err)
        assert last.error.returncode == 3
        assert len(last.error.stderr) == 1_000_000

    def test_close_early_stops_process(self, tmp_path: Path) -> None:
        code = (
            "import sys, time\n"
            "for i in range(1000):\n"
            "    sys.stdout.write(f'{i}\\x1e'); sys.stdout.flush(); time.sleep(0.01)\n"
        )
        records = stream_records([sys.executable, "-c", code], cwd=tmp_path, separator="\x1e")

        first = next(records)
        records.close()

        assert first == Ok("0")

    def test_missing_executable(self, tmp_path: Path) -> None:
        items = list(stream_records(["definitely-not-a-real-binary-xyz"], cwd=tmp_path, separator="\x1e"))

        assert len(items) == 1
        assert isinstance(items[0], Err)
        assert items[0].error.returncode == -1
