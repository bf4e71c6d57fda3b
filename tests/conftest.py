"""Shared fixtures for semver-releaser tests."""

from __future__ import annotations

import pytest

from semver_releaser.bump import parse_rules
from semver_releaser.commit_parser import StructuredCommit


@pytest.fixture
def default_rules():
    """Rules used by most bump tests."""
    return parse_rules({"fix": "patch", "feat": "minor", "bang": "major"})


@pytest.fixture
def categories() -> dict[str, str]:
    """Categories with a catch-all section."""
    return {"feat": "New Features", "fix": "Bug Fixes", "*": "Other Changes"}


@pytest.fixture
def sample_messages() -> list[str]:
    """Commit messages as read from git log, newest first."""
    return [
        "feat(api): add endpoint",
        "fix: handle empty response",
        "chore: bump dependencies",
        "Merge pull request #12 from someone/branch",
        "docs(readme): describe rules",
    ]


@pytest.fixture
def make_commit():
    """Factory for StructuredCommit values."""

    def _make(type_: str, description: str = "change", scope=None, breaking=False):
        return StructuredCommit(type=type_, scope=scope, description=description, breaking=breaking)

    return _make


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep CI environment variables from leaking into configuration tests."""
    for name in (
        "INPUT_RULES",
        "INPUT_CATEGORIES",
        "INPUT_IGNORE",
        "INPUT_PUSH",
        "INPUT_TOKEN",
        "GITHUB_WORKSPACE",
        "GITHUB_REPOSITORY",
        "GITHUB_TOKEN",
        "GH_TOKEN",
        "GITHUB_OUTPUT",
        "GITHUB_API_URL",
        "GITHUB_SERVER_URL",
    ):
        monkeypatch.delenv(name, raising=False)
