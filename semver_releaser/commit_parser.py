"""
Parse conventional commit messages into structured commits.

This module:
- Parses ``type(scope)!: description`` headers
- Detects breaking changes via ``!`` or ``BREAKING CHANGE:`` footer lines
- Filters ignored commit types and reports non-conventional commits
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

# Configure module logger
logger = logging.getLogger(__name__)

# type(scope)!: description, matched against a single line
COMMIT_PATTERN = re.compile(r'(?P<type>[^(:!\n]+)(?:\((?P<scope>[^)\n]+)\))?(?P<bang>!)?: (?P<description>[^\n]+)')

# A line, at least one blank line, then more content
MULTILINE_PATTERN = re.compile(r'.+\n{2,}.+')

BREAKING_FOOTER = 'breaking change:'


@dataclass(frozen=True)
class StructuredCommit:
    """A parsed conventional commit."""
    type: str
    scope: Optional[str]
    description: str
    body: Optional[str] = None
    breaking: bool = False


def parse_commit(message: str) -> Optional[StructuredCommit]:
    """
    Parse a commit message.

    Args:
        message: Full commit message

    Returns:
        StructuredCommit if the message is conventional, None otherwise
    """
    if MULTILINE_PATTERN.search(message):
        lines = message.split('\n')
        header = parse_commit(lines[0])
        if header is None:
            return None

        rest = lines[1:]
        breaking = header.breaking or any(
            line.lower().startswith(BREAKING_FOOTER) for line in rest
        )
        return StructuredCommit(
            type=header.type,
            scope=header.scope,
            description=header.description,
            body='\n'.join(rest),
            breaking=breaking,
        )

    match = COMMIT_PATTERN.fullmatch(message)
    if not match:
        return None

    return StructuredCommit(
        type=match.group('type'),
        scope=match.group('scope'),
        description=match.group('description'),
        breaking=match.group('bang') == '!',
    )


@dataclass
class ParseReport:
    """Outcome of parsing a batch of commit messages."""
    commits: List[StructuredCommit] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    ignored: int = 0


class ConventionalCommitParser:
    """Parse batches of commit messages, honouring an ignore list."""

    def __init__(self, ignore: Iterable[str] = ()):
        """
        Initialize the parser.

        Args:
            ignore: Commit types to drop (compared case-insensitively)
        """
        self.ignore = {kind.lower() for kind in ignore}

    def is_ignored(self, commit: StructuredCommit) -> bool:
        return commit.type.lower() in self.ignore

    def parse_commits(self, messages: Iterable[str]) -> ParseReport:
        """
        Parse multiple commit messages, preserving their order.

        Args:
            messages: Raw commit messages, newest first as read from git log

        Returns:
            ParseReport with conventional commits, skipped headers and
            the number of ignored commits
        """
        report = ParseReport()

        for message in messages:
            message = message.strip()
            commit = parse_commit(message)

            if commit is None:
                header = message.split('\n')[0]
                logger.warning(f"Ignoring non-standard commit: {header}")
                report.skipped.append(header)
                continue

            if self.is_ignored(commit):
                logger.debug(f"Excluding '{commit.type}' commit: {commit.description}")
                report.ignored += 1
                continue

            report.commits.append(commit)

        return report
