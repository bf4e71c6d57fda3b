"""
Compose markdown release notes from conventional commits.

Commits are grouped into the categories configured by the user
(e.g. ``feat="New Features" fix="Bug Fixes" *="Other Changes"``). Sections
follow the order in which categories were declared; the ``*`` catch-all
section, when configured, always comes last.
"""

from typing import Dict, List, Optional, Sequence

from semver_releaser.commit_parser import StructuredCommit

WILDCARD = '*'


def format_commit(commit: StructuredCommit) -> str:
    """Format a commit listed under its own category."""
    if commit.scope:
        return f"- **{commit.scope}**: {commit.description}"
    return f"- {commit.description}"


def format_other_commit(commit: StructuredCommit) -> str:
    """Format a commit listed under the catch-all category, keeping its type."""
    if commit.scope:
        return f"- {commit.type}({commit.scope}): {commit.description}"
    return f"- {commit.type}: {commit.description}"


def _find_category(commit: StructuredCommit, categories: Dict[str, str]) -> Optional[str]:
    commit_type = commit.type.lower()
    for key in categories:
        if key != WILDCARD and key.lower() == commit_type:
            return key
    return None


def compose_release_notes(commits: Sequence[StructuredCommit], categories: Dict[str, str]) -> str:
    """
    Build the release notes body.

    Args:
        commits: Parsed commits to list
        categories: Category key (commit type or ``*``) to section title

    Returns:
        Markdown text, empty if no commit matched any category
    """
    buckets: Dict[str, List[str]] = {}
    others: List[str] = []
    uses_others = WILDCARD in categories

    for commit in commits:
        category = _find_category(commit, categories)
        if category is not None:
            buckets.setdefault(category, []).append(format_commit(commit))
        elif uses_others:
            others.append(format_other_commit(commit))

    lines = []
    for key, title in categories.items():
        if key in buckets:
            lines.append(f"# {title}")
            lines.extend(buckets[key])

    if others:
        lines.append(f"# {categories[WILDCARD]}")
        lines.extend(others)

    return '\n'.join(lines)
