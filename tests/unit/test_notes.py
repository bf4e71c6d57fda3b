"""Tests for release notes composition."""

from __future__ import annotations

from semver_releaser.notes import compose_release_notes, format_commit, format_other_commit


class TestFormatting:
    """Tests for single-line formatting."""

    def test_format_with_scope(self, make_commit):
        """Scoped commits show the scope in bold."""
        assert format_commit(make_commit("feat", "add endpoint", scope="api")) == "- **api**: add endpoint"

    def test_format_without_scope(self, make_commit):
        """Unscoped commits show only the description."""
        assert format_commit(make_commit("fix", "handle nulls")) == "- handle nulls"

    def test_format_other_keeps_type(self, make_commit):
        """Catch-all lines keep the commit type."""
        assert format_other_commit(make_commit("docs", "typo", scope="readme")) == "- docs(readme): typo"
        assert format_other_commit(make_commit("ci", "cache deps")) == "- ci: cache deps"


class TestComposeReleaseNotes:
    """Tests for compose_release_notes()."""

    def test_grouped_sections(self, make_commit, categories):
        """Commits are grouped under their category titles."""
        commits = [
            make_commit("feat", "add endpoint", scope="api"),
            make_commit("fix", "handle nulls"),
            make_commit("feat", "dark mode"),
        ]

        notes = compose_release_notes(commits, categories)

        assert notes == "\n".join([
            "# New Features",
            "- **api**: add endpoint",
            "- dark mode",
            "# Bug Fixes",
            "- handle nulls",
        ])

    def test_wildcard_collects_unmatched(self, make_commit, categories):
        """Unmatched commits go to the catch-all section, listed last."""
        commits = [make_commit("docs", "typo", scope="readme"), make_commit("feat", "thing")]

        notes = compose_release_notes(commits, categories)

        assert notes == "\n".join([
            "# New Features",
            "- thing",
            "# Other Changes",
            "- docs(readme): typo",
        ])

    def test_wildcard_last_even_if_declared_first(self, make_commit):
        """The catch-all section is always the final one."""
        categories = {"*": "Other", "fix": "Fixes"}
        commits = [make_commit("chore", "tidy"), make_commit("fix", "bug")]

        notes = compose_release_notes(commits, categories)

        assert notes.splitlines() == ["# Fixes", "- bug", "# Other", "- chore: tidy"]

    def test_unmatched_dropped_without_wildcard(self, make_commit):
        """Without '*' unmatched commits produce no output."""
        categories = {"feat": "New Features"}
        commits = [make_commit("feat", "thing"), make_commit("chore", "tidy")]

        notes = compose_release_notes(commits, categories)

        assert notes == "# New Features\n- thing"
        assert "tidy" not in notes

    def test_empty_when_nothing_matches(self, make_commit):
        """No matching commits yields an empty body."""
        assert compose_release_notes([make_commit("chore")], {"feat": "Features"}) == ""

    def test_section_order_follows_declaration(self, make_commit):
        """Sections appear in the order categories were declared."""
        categories = {"fix": "Fixes", "feat": "Features"}
        commits = [make_commit("feat", "a"), make_commit("fix", "b")]

        notes = compose_release_notes(commits, categories)

        assert notes.splitlines()[0] == "# Fixes"

    def test_category_match_is_case_insensitive(self, make_commit):
        """Category keys match commit types regardless of case."""
        notes = compose_release_notes([make_commit("FEAT", "loud")], {"Feat": "Features"})

        assert notes == "# Features\n- loud"

    def test_empty_sections_are_omitted(self, make_commit, categories):
        """Categories without commits do not produce headings."""
        notes = compose_release_notes([make_commit("fix", "b")], categories)

        assert "New Features" not in notes
        assert "Other Changes" not in notes
