"""
Semantic version parsing, ordering and bumping.

This module provides:
- Version class: parses ``vMAJOR.MINOR.PATCH[-prerelease][+build]`` tags
- latest_version(): picks the highest semantic version out of a tag list
- Version.bump(): applies a Severity to produce the next release version
"""

import re
import logging
from dataclasses import dataclass
from functools import total_ordering
from typing import Iterable, Optional, Tuple

from semver_releaser.bump import Severity

# Configure module logger
logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(
    r'^v(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)'
    r'(?:-(?P<prerelease>[0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*))?'
    r'(?:\+(?P<build>[0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*))?$'
)


def _prerelease_key(prerelease: Optional[str]) -> Tuple:
    # A release sorts above any of its prereleases; numeric identifiers sort
    # below alphanumeric ones.
    if prerelease is None:
        return (1,)
    identifiers = []
    for part in prerelease.split('.'):
        if part.isdigit():
            identifiers.append((0, int(part), ''))
        else:
            identifiers.append((1, 0, part))
    return (0, tuple(identifiers))


@total_ordering
@dataclass(frozen=True)
class Version:
    """Semantic version representation."""
    major: int
    minor: int
    patch: int
    prerelease: Optional[str] = None
    build: Optional[str] = None

    def __str__(self) -> str:
        """Format as a ``v``-prefixed semantic version string."""
        version = f"v{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            version += f"-{self.prerelease}"
        if self.build:
            version += f"+{self.build}"
        return version

    def _key(self) -> Tuple:
        return (self.major, self.minor, self.patch, _prerelease_key(self.prerelease))

    def __lt__(self, other: 'Version') -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    @classmethod
    def parse(cls, version_str: str) -> 'Version':
        """
        Parse a semantic version tag.

        Args:
            version_str: Tag such as "v1.2.3" or "v1.2.3-rc.1+build.5"

        Returns:
            Version object

        Raises:
            ValueError: If the string is not a ``v``-prefixed semantic version
        """
        match = VERSION_PATTERN.match(version_str.strip())
        if not match:
            raise ValueError(f"Invalid semantic version: {version_str}")

        return cls(
            major=int(match.group('major')),
            minor=int(match.group('minor')),
            patch=int(match.group('patch')),
            prerelease=match.group('prerelease'),
            build=match.group('build'),
        )

    def bump(self, severity: Severity) -> 'Version':
        """
        Create the next release version for a severity.

        Prerelease and build metadata are dropped.

        Args:
            severity: Aggregate bump severity

        Returns:
            New Version object
        """
        if severity == Severity.MAJOR:
            return Version(self.major + 1, 0, 0)
        elif severity == Severity.MINOR:
            return Version(self.major, self.minor + 1, 0)
        elif severity == Severity.PATCH:
            return Version(self.major, self.minor, self.patch + 1)
        else:
            return Version(self.major, self.minor, self.patch)


INITIAL_VERSION = Version(0, 0, 0)


def latest_version(tags: Iterable[str]) -> Optional[Version]:
    """
    Find the highest semantic version among tag names.

    Args:
        tags: Tag names; those that are not semantic versions are skipped

    Returns:
        Highest Version or None if no tag is a semantic version
    """
    versions = []
    for tag in tags:
        try:
            versions.append(Version.parse(tag))
        except ValueError:
            logger.debug(f"Skipping non-semver tag '{tag}'")
            continue

    if not versions:
        return None
    return max(versions)
