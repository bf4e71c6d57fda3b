"""
Plan a release from commit messages without touching the repository.

This module ties the pure pieces together: commit messages are parsed and
filtered, their aggregate severity is computed from the rules, the previous
version is bumped, and release notes are composed. The result is a
``ReleasePlan`` that the orchestrator can act on (or just report).
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from semver_releaser.bump import Severity, determine_bump
from semver_releaser.commit_parser import ConventionalCommitParser, StructuredCommit
from semver_releaser.notes import compose_release_notes
from semver_releaser.version import INITIAL_VERSION, Version

# Configure module logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReleasePlan:
    """Outcome of release planning."""
    previous_version: Version
    severity: Severity
    next_version: Optional[Version]
    notes: str = ''
    commits: Tuple[StructuredCommit, ...] = field(default_factory=tuple)
    skipped: Tuple[str, ...] = field(default_factory=tuple)
    ignored: int = 0

    @property
    def should_release(self) -> bool:
        return self.next_version is not None


def plan_release(
    messages: Iterable[str],
    rules: Dict[str, Severity],
    categories: Dict[str, str],
    ignore: Iterable[str] = (),
    previous_version: Optional[Version] = None,
) -> ReleasePlan:
    """
    Compute the next version and release notes.

    Args:
        messages: Raw commit messages since the previous release, in log order
        rules: Validated bump rules
        categories: Release-notes categories
        ignore: Commit types to exclude before any processing
        previous_version: Latest released version (None for a first release)

    Returns:
        ReleasePlan; ``next_version`` is None when no release is warranted
    """
    base = previous_version or INITIAL_VERSION
    report = ConventionalCommitParser(ignore).parse_commits(messages)
    commits: List[StructuredCommit] = report.commits

    if report.ignored:
        logger.info(f"{report.ignored} commit(s) matched the ignore list and were excluded")

    severity = determine_bump(commits, rules)
    if severity == Severity.NONE:
        logger.info("No need to bump version")
        return ReleasePlan(
            previous_version=base,
            severity=severity,
            next_version=None,
            commits=tuple(commits),
            skipped=tuple(report.skipped),
            ignored=report.ignored,
        )

    next_version = base.bump(severity)
    logger.info(f"Bumping {severity.word}: {base} -> {next_version}")

    return ReleasePlan(
        previous_version=base,
        severity=severity,
        next_version=next_version,
        notes=compose_release_notes(commits, categories),
        commits=tuple(commits),
        skipped=tuple(report.skipped),
        ignored=report.ignored,
    )
