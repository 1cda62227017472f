"""Tests for releng.services.deps module."""

from __future__ import annotations

from pathlib import Path

import pytest

from releng.core.config import Settings
from releng.core.result import Err, Ok, Result
from releng.git.repository import GitError
from releng.output.console import ConsoleProtocol, MockConsole
from releng.services import gomod
from releng.services.deps import (
    DependencyUpdate,
    complete_dependency_update,
    is_manual_complete,
    update_dependency,
)
from releng.services.errors import ReleaseError


class FakeRepo:
    def __init__(self, *, diff: str = "", changed: list[str] | None = None) -> None:
        self.steps: list[list[str]] = []
        self.diff_output = diff
        self.changed = ["go.mod"] if changed is None else changed

    def run_mutating(self, description: str, args: list[str]) -> Result[None, GitError]:
        self.steps.append(args)
        return Ok(None)

    def diff(self, revision: str) -> Result[str, GitError]:
        self.steps.append(["diff", revision])
        return Ok(self.diff_output)

    def diff_names(self, *paths: str) -> Result[list[str], GitError]:
        return Ok(self.changed)

    def current_branch(self, env: dict[str, str] | None = None) -> Result[str, GitError]:
        assert env is not None
        return Ok(env.get("TRAVIS_BRANCH", "update-deps"))

    def short_head(self, length: int = 12) -> Result[str, GitError]:
        return Ok("abcdef012345"[:length])


@pytest.fixture
def go_calls(monkeypatch: pytest.MonkeyPatch) -> list[list[str]]:
    calls: list[list[str]] = []

    def fake_run_go(
        description: str, args: list[str], *, root: Path, console: ConsoleProtocol
    ) -> Result[None, ReleaseError]:
        calls.append(args)
        return Ok(None)

    monkeypatch.setattr(gomod, "run_go", fake_run_go)
    return calls


def test_is_manual_complete() -> None:
    assert is_manual_complete({"complete_update_dependency_manually": "true"})
    assert not is_manual_complete({"complete_update_dependency_manually": "yes"})
    assert not is_manual_complete({})


class TestUpdateDependency:
    def test_full_flow(self, tmp_path: Path, go_calls: list[list[str]]) -> None:
        repo = FakeRepo()
        console = MockConsole()

        result = update_dependency(
            settings=Settings(root=tmp_path),
            repo=repo,  # type: ignore[arg-type]
            console=console,
            dependency="github.com/example/channel@v0.9.3",
            env={},
        )

        assert result == Ok(DependencyUpdate(dependency="github.com/example/channel@v0.9.3", changed=True))
        assert repo.steps == [
            ["config", "--replace-all", "remote.origin.fetch", "+refs/heads/*:refs/remotes/origin/*"],
            ["fetch", "origin", "main"],
            ["checkout", "--", "go.mod", "go.sum"],
            ["merge", "--ff-only", "origin/main"],
            ["diff", "origin/main"],
            ["add", "go.mod", "go.sum"],
            ["commit", "-m", "Updating dependency github.com/example/channel@v0.9.3"],
        ]
        assert go_calls == [["get", "github.com/example/channel@v0.9.3"], ["mod", "tidy"]]
        assert console.find("attempting to update to github.com/example/channel@v0.9.3")

    def test_dependency_from_env(self, tmp_path: Path, go_calls: list[list[str]]) -> None:
        result = update_dependency(
            settings=Settings(root=tmp_path),
            repo=FakeRepo(),  # type: ignore[arg-type]
            console=MockConsole(),
            env={"UPDATED_DEPENDENCY": "github.com/example/edge@v0.1.1"},
        )

        assert isinstance(result, Ok)
        assert result.value.dependency == "github.com/example/edge@v0.1.1"

    def test_missing_dependency(self, tmp_path: Path, go_calls: list[list[str]]) -> None:
        repo = FakeRepo()

        result = update_dependency(
            settings=Settings(root=tmp_path),
            repo=repo,  # type: ignore[arg-type]
            console=MockConsole(),
            env={},
        )

        assert isinstance(result, Err)
        assert result.error.kind == "invalid_input"
        assert repo.steps == []
        assert go_calls == []

    def test_diverged_branch(self, tmp_path: Path, go_calls: list[list[str]]) -> None:
        result = update_dependency(
            settings=Settings(root=tmp_path),
            repo=FakeRepo(diff="diff --git a/x b/x"),  # type: ignore[arg-type]
            console=MockConsole(),
            dependency="github.com/example/channel@v0.9.3",
            env={},
        )

        assert isinstance(result, Err)
        assert result.error.kind == "diverged"
        assert go_calls == []

    def test_manual_projects_skip_sync(self, tmp_path: Path, go_calls: list[list[str]]) -> None:
        repo = FakeRepo(diff="would have diverged")

        result = update_dependency(
            settings=Settings(root=tmp_path),
            repo=repo,  # type: ignore[arg-type]
            console=MockConsole(),
            dependency="github.com/example/channel@v0.9.3",
            env={"complete_update_dependency_manually": "true"},
        )

        assert isinstance(result, Ok)
        assert ["merge", "--ff-only", "origin/main"] not in repo.steps

    def test_no_change_is_benign(self, tmp_path: Path, go_calls: list[list[str]]) -> None:
        repo = FakeRepo(changed=[])

        result = update_dependency(
            settings=Settings(root=tmp_path),
            repo=repo,  # type: ignore[arg-type]
            console=MockConsole(),
            dependency="github.com/example/channel@v0.9.1",
            env={},
        )

        assert result == Ok(DependencyUpdate(dependency="github.com/example/channel@v0.9.1", changed=False))
        assert go_calls == [["get", "github.com/example/channel@v0.9.1"]]
        assert ["add", "go.mod", "go.sum"] not in repo.steps


class TestCompleteDependencyUpdate:
    def test_merges_into_main(self, tmp_path: Path) -> None:
        repo = FakeRepo()

        result = complete_dependency_update(
            settings=Settings(root=tmp_path),
            repo=repo,  # type: ignore[arg-type]
            console=MockConsole(),
            env={"TRAVIS_BRANCH": "update-channel"},
        )

        assert result == Ok("abcdef012345")
        assert repo.steps == [
            ["checkout", "--", "go.mod", "go.sum"],
            ["checkout", "main"],
            ["merge", "--ff-only", "abcdef012345"],
            ["push"],
            ["push", "origin", "update-channel"],
        ]

    def test_manual_stays_on_update_branch(self, tmp_path: Path) -> None:
        repo = FakeRepo()

        complete_dependency_update(
            settings=Settings(root=tmp_path),
            repo=repo,  # type: ignore[arg-type]
            console=MockConsole(),
            env={"TRAVIS_BRANCH": "update-channel", "complete_update_dependency_manually": "true"},
        )

        assert repo.steps[1] == ["checkout", "update-channel"]
