"""Tests for conventional commit parsing."""

from __future__ import annotations

import logging

import pytest

from semver_releaser.commit_parser import ConventionalCommitParser, StructuredCommit, parse_commit


class TestParseCommit:
    """Tests for parse_commit()."""

    def test_parse_with_scope(self):
        """Parse a commit with a scope."""
        commit = parse_commit("feat(api): add endpoint")

        assert commit == StructuredCommit(
            type="feat",
            scope="api",
            description="add endpoint",
            body=None,
            breaking=False,
        )

    def test_parse_without_scope(self):
        """Scope is None when absent."""
        commit = parse_commit("fix: handle null response")

        assert commit.type == "fix"
        assert commit.scope is None
        assert commit.description == "handle null response"
        assert not commit.breaking

    def test_parse_breaking_with_exclamation(self):
        """'!' before the colon marks a breaking change."""
        commit = parse_commit("fix!: urgent")

        assert commit.breaking
        assert commit.type == "fix"
        assert commit.description == "urgent"

    def test_parse_breaking_with_scope_and_exclamation(self):
        """'!' may follow the scope."""
        commit = parse_commit("feat(core)!: change config format")

        assert commit.breaking
        assert commit.scope == "core"

    def test_type_case_is_preserved(self):
        """The type is returned as written."""
        assert parse_commit("Feat: shout").type == "Feat"

    @pytest.mark.parametrize(
        "message",
        [
            "Updated the readme file",
            "feat add thing",
            "feat:missing space",
            "feat(): empty scope",
            "feat: ",
            ": no type",
            "feat(api: unclosed scope",
            "feat: first line\nsecond line without blank",
            "",
        ],
    )
    def test_not_conventional(self, message: str):
        """Messages that do not follow the header grammar return None."""
        assert parse_commit(message) is None

    def test_multiline_body(self):
        """Everything after the header becomes the body, verbatim."""
        commit = parse_commit("feat: new feature\n\nSome details.\n\nMore details.")

        assert commit.type == "feat"
        assert commit.description == "new feature"
        assert commit.body == "\nSome details.\n\nMore details."
        assert not commit.breaking

    def test_breaking_footer(self):
        """A BREAKING CHANGE footer marks the commit as breaking."""
        commit = parse_commit("feat: new feature\n\nBREAKING CHANGE: old API removed")

        assert commit.breaking

    def test_breaking_footer_is_case_insensitive(self):
        """The footer keyword is matched case-insensitively."""
        commit = parse_commit("refactor: rework\n\nbody\nBreaking Change: config renamed")

        assert commit.breaking

    def test_breaking_footer_must_start_line(self):
        """The footer only counts at the start of a line."""
        commit = parse_commit("fix: thing\n\nThis is not a BREAKING CHANGE: really")

        assert not commit.breaking

    def test_multiline_with_bad_header(self):
        """A multi-line message with a non-conventional header is rejected."""
        assert parse_commit("Update stuff\n\nfeat: this is the body") is None

    def test_multiline_keeps_header_bang(self):
        """A '!' in the header survives multi-line parsing."""
        commit = parse_commit("feat(api)!: drop v1\n\nDetails")

        assert commit.breaking
        assert commit.scope == "api"

    def test_commit_is_immutable(self):
        """Structured commits are frozen."""
        commit = parse_commit("fix: x")

        with pytest.raises(AttributeError):
            commit.type = "feat"


class TestConventionalCommitParser:
    """Tests for ConventionalCommitParser.parse_commits()."""

    def test_parse_multiple_commits(self, sample_messages: list[str]):
        """Conventional commits are kept in order, others are skipped."""
        report = ConventionalCommitParser().parse_commits(sample_messages)

        assert [c.type for c in report.commits] == ["feat", "fix", "chore", "docs"]
        assert report.skipped == ["Merge pull request #12 from someone/branch"]
        assert report.ignored == 0

    def test_ignore_list(self, sample_messages: list[str]):
        """Ignored types are dropped and counted."""
        report = ConventionalCommitParser(["chore", "DOCS"]).parse_commits(sample_messages)

        assert [c.type for c in report.commits] == ["feat", "fix"]
        assert report.ignored == 2

    def test_messages_are_stripped(self):
        """Surrounding whitespace from git log is removed before parsing."""
        report = ConventionalCommitParser().parse_commits(["  fix: trailing newline\n\n"])

        assert report.commits[0].description == "trailing newline"

    def test_non_conventional_is_logged(self, caplog):
        """Skipped commits produce a warning with their first line."""
        with caplog.at_level(logging.WARNING):
            ConventionalCommitParser().parse_commits(["WIP\n\nlots of text"])

        assert "Ignoring non-standard commit: WIP" in caplog.text

    def test_empty_input(self):
        """No messages yields an empty report."""
        report = ConventionalCommitParser().parse_commits([])

        assert report.commits == []
        assert report.skipped == []
