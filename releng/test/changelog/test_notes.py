"""Tests for releng.changelog.notes module."""

from __future__ import annotations

from releng.changelog.notes import (
    DependencyChange,
    DependencyStatus,
    IssueInfo,
    compare_url,
    diff_dependencies,
    extract_release_notes,
    format_dependency_change,
    format_issue,
    format_raw_issue,
    module_org,
    module_project,
    parse_module_path,
    parse_requirements,
)

CHANGELOG = """# Release 0.9.2

## What's New

* Retries for flaky links

# Release 0.9.1

* Bug fixes

# Release 0.9.0

* First cut
"""


class TestExtractReleaseNotes:
    def test_first_section_without_version(self) -> None:
        notes = extract_release_notes(CHANGELOG)
        assert notes == "# Release 0.9.2\n\n## What's New\n\n* Retries for flaky links\n\n"

    def test_section_by_version(self) -> None:
        assert extract_release_notes(CHANGELOG, "0.9.1") == "# Release 0.9.1\n\n* Bug fixes\n\n"

    def test_last_section_runs_to_end(self) -> None:
        assert extract_release_notes(CHANGELOG, "0.9.0") == "# Release 0.9.0\n\n* First cut\n"

    def test_unknown_version_is_empty(self) -> None:
        assert extract_release_notes(CHANGELOG, "1.0.0") == ""

    def test_no_sections(self) -> None:
        assert extract_release_notes("just text\n") == ""

    def test_prefix_match_on_header(self) -> None:
        text = "# Release 0.9.10\nten\n# Release 0.9.1\none\n"
        # header prefix matching: 0.9.1 also matches 0.9.10, which comes first
        assert extract_release_notes(text, "0.9.1") == "# Release 0.9.10\nten\n"


GO_MOD_OLD = """module github.com/example/tool

go 1.21

require (
\tgithub.com/example/channel v0.9.1
\tgithub.com/example/foundation v0.4.0 // indirect
\tgithub.com/spf13/cobra v1.7.0
)

require github.com/example/edge v0.1.0
"""

GO_MOD_NEW = """module github.com/example/tool

go 1.21

require (
\tgithub.com/example/channel v0.9.3
\tgithub.com/example/foundation v0.4.0 // indirect
\tgithub.com/example/identity v0.2.0
\tgithub.com/spf13/cobra v1.8.0
)

require github.com/example/edge v0.1.0
"""


class TestGoMod:
    def test_module_path(self) -> None:
        assert parse_module_path(GO_MOD_OLD) == "github.com/example/tool"
        assert parse_module_path("go 1.21\n") is None

    def test_requirements(self) -> None:
        assert parse_requirements(GO_MOD_OLD) == {
            "github.com/example/channel": "v0.9.1",
            "github.com/example/foundation": "v0.4.0",
            "github.com/spf13/cobra": "v1.7.0",
            "github.com/example/edge": "v0.1.0",
        }

    def test_module_project_and_org(self) -> None:
        assert module_project("github.com/example/channel/v2") == "channel"
        assert module_org("github.com/example/channel/v2") == "example"
        assert module_org("tool") is None


class TestDiffDependencies:
    def test_changed_and_new_in_family_only(self) -> None:
        changes = diff_dependencies(
            parse_requirements(GO_MOD_OLD),
            parse_requirements(GO_MOD_NEW),
            module_filter="example",
        )

        assert changes == [
            DependencyChange("github.com/example/channel", "v0.9.1", "v0.9.3", DependencyStatus.CHANGED),
            DependencyChange("github.com/example/identity", None, "v0.2.0", DependencyStatus.NEW),
        ]

    def test_show_unchanged(self) -> None:
        changes = diff_dependencies(
            parse_requirements(GO_MOD_OLD),
            parse_requirements(GO_MOD_NEW),
            module_filter="example",
            show_unchanged=True,
        )

        statuses = {c.path: c.status for c in changes}
        assert statuses["github.com/example/foundation"] == DependencyStatus.UNCHANGED
        assert statuses["github.com/example/edge"] == DependencyStatus.UNCHANGED
        assert "github.com/spf13/cobra" not in statuses


class TestFormatting:
    def test_compare_url(self) -> None:
        assert (
            compare_url("example", "channel", "v0.9.1", "v0.9.3")
            == "https://github.com/example/channel/compare/v0.9.1...v0.9.3"
        )

    def test_changed_line(self) -> None:
        change = DependencyChange("github.com/example/channel", "v0.9.1", "v0.9.3", DependencyStatus.CHANGED)
        assert format_dependency_change(change, "example") == (
            "* github.com/example/channel: [v0.9.1 -> v0.9.3]"
            "(https://github.com/example/channel/compare/v0.9.1...v0.9.3)"
        )

    def test_new_and_unchanged_lines(self) -> None:
        new = DependencyChange("github.com/example/identity", None, "v0.2.0", DependencyStatus.NEW)
        same = DependencyChange("github.com/example/edge", "v0.1.0", "v0.1.0", DependencyStatus.UNCHANGED)

        assert format_dependency_change(new, "example") == "* github.com/example/identity: v0.2.0 (new)"
        assert format_dependency_change(same, "example") == "* github.com/example/edge: v0.1.0 (unchanged)"

    def test_issue_lines(self) -> None:
        issue = IssueInfo(number=431, title="Links flap", url="https://github.com/example/tool/issues/431")

        assert format_issue(issue) == "    * [Issue #431](https://github.com/example/tool/issues/431) - Links flap"
        assert format_raw_issue("431") == "    * #431"
