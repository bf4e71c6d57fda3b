"""
Map conventional commits to a version bump severity.

This module:
- Defines the ordered Severity levels (none < patch < minor < major)
- Validates rule mappings such as ``fix=patch feat=minor bang=major``
- Reduces a list of commits to a single aggregate severity
"""

import logging
from enum import IntEnum
from typing import Dict, List, Optional, Sequence

from semver_releaser.commit_parser import StructuredCommit

# Configure module logger
logger = logging.getLogger(__name__)

# Rule name applied to breaking commits
BANG_RULE = 'bang'


class InvalidSeverityError(ValueError):
    """Raised when a rule maps to something other than patch, minor or major."""

    def __init__(self, rule: str, value: str):
        super().__init__(f"Invalid semver component '{value}' for rule '{rule}'")
        self.rule = rule
        self.value = value


class Severity(IntEnum):
    """Version bump severity, totally ordered."""
    NONE = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    @classmethod
    def from_word(cls, word: str) -> Optional['Severity']:
        """Return the severity named by ``word``, or None if it names none."""
        return _WORDS.get(word.strip().lower())

    @property
    def word(self) -> str:
        return self.name.lower()


_WORDS = {
    'patch': Severity.PATCH,
    'minor': Severity.MINOR,
    'major': Severity.MAJOR,
}

# Groups are checked from the most to the least severe
_GROUP_ORDER = (Severity.MAJOR, Severity.MINOR, Severity.PATCH)


def parse_rules(rules: Dict[str, str]) -> Dict[str, Severity]:
    """
    Validate a raw rule mapping.

    Args:
        rules: Rule name (commit type or ``bang``) to severity word

    Returns:
        Rule name to Severity, in declaration order

    Raises:
        InvalidSeverityError: If any value is not patch, minor or major
    """
    parsed = {}
    for name, word in rules.items():
        severity = Severity.from_word(word)
        if severity is None:
            raise InvalidSeverityError(name, word)
        parsed[name] = severity
    return parsed


def _group_rules(rules: Dict[str, Severity]) -> Dict[Severity, List[str]]:
    groups: Dict[Severity, List[str]] = {}
    for name, severity in rules.items():
        if name == BANG_RULE:
            continue
        groups.setdefault(severity, []).append(name.lower())
    return groups


def determine_bump(commits: Sequence[StructuredCommit], rules: Dict[str, Severity]) -> Severity:
    """
    Determine the aggregate bump for a sequence of commits.

    Commits are visited in the given order. A breaking commit takes the
    ``bang`` severity when that raises the result; otherwise its type is
    looked up from the major group down, ignoring groups below the current
    result. Processing stops once MAJOR is reached.

    Args:
        commits: Parsed commits, in history order
        rules: Validated rules (see ``parse_rules``)

    Returns:
        Aggregate Severity; Severity.NONE means no release is warranted
    """
    bang = rules.get(BANG_RULE)
    groups = _group_rules(rules)
    current = Severity.NONE

    for commit in commits:
        if current == Severity.MAJOR:
            break

        if commit.breaking and bang is not None and bang > current:
            logger.debug(f"Breaking commit '{commit.description}' bumps {bang.word}")
            current = bang
            continue

        commit_type = commit.type.lower()
        for severity in _GROUP_ORDER:
            if severity < current:
                continue
            if commit_type in groups.get(severity, ()):
                logger.debug(f"'{commit_type}' commit bumps {severity.word}")
                current = severity
                break

    return current
