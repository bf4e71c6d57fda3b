"""
Git command wrapper for the release workflow.

This module:
- Lists tags and finds the latest semantic version tag
- Reads commit messages since the previous release tag
- Creates the release tag and pushes it with token authentication
"""

import os
import logging
import subprocess
from typing import List, Optional, Tuple

from semver_releaser.version import Version, latest_version

# Configure module logger
logger = logging.getLogger(__name__)

COMMIT_SEPARATOR = '---END---'
FIELD_SEPARATOR = '|||'


class GitError(Exception):
    """Raised when a git command required by the release fails."""


class GitHelper:
    """Helper class for git operations."""

    def __init__(self, repo_path: str = '.'):
        """
        Initialize git helper.

        Args:
            repo_path: Path to git repository (default: current directory)
        """
        self.repo_path = repo_path

    def _run_git(self, *args, capture_output=True, check=True) -> subprocess.CompletedProcess:
        """
        Run a git command.

        Args:
            *args: Git command arguments
            capture_output: Whether to capture stdout/stderr
            check: Whether to raise exception on non-zero exit

        Returns:
            CompletedProcess instance
        """
        cmd = ['git', '-C', self.repo_path] + list(args)
        return subprocess.run(
            cmd,
            capture_output=capture_output,
            text=True,
            check=check
        )

    def get_tags(self) -> List[str]:
        """
        List all tag names.

        Raises:
            GitError: If tags cannot be enumerated
        """
        try:
            result = self._run_git('tag', '-l')
        except subprocess.CalledProcessError as e:
            raise GitError(f"Could not enumerate tags: {e.stderr or e}") from e
        return [t for t in result.stdout.strip().split('\n') if t]

    def get_latest_version(self) -> Optional[Version]:
        """
        Get the highest semantic version tag.

        Returns:
            Version or None if no tag is a semantic version
        """
        return latest_version(self.get_tags())

    def get_commits_since_tag(self, tag: Optional[str] = None) -> List[Tuple[str, str]]:
        """
        Get commits since a specific tag.

        Args:
            tag: Tag name (if None, gets all commits)

        Returns:
            List of (sha, message) tuples, newest first

        Raises:
            GitError: If the log cannot be read
        """
        rev_range = f'{tag}..HEAD' if tag else 'HEAD'

        try:
            # Format: <sha>|||<raw message>---END---
            result = self._run_git(
                'log',
                rev_range,
                f'--format=%H{FIELD_SEPARATOR}%B{COMMIT_SEPARATOR}',
                '--no-merges'
            )
        except subprocess.CalledProcessError as e:
            raise GitError(f"Error reading commits: {e.stderr or e}") from e

        commits = []
        for raw in result.stdout.split(COMMIT_SEPARATOR):
            raw = raw.strip()
            if not raw:
                continue

            parts = raw.split(FIELD_SEPARATOR, 1)
            if len(parts) == 2:
                commits.append((parts[0].strip(), parts[1].strip()))

        return commits

    def create_tag(self, tag: str, message: str, sha: str = 'HEAD'):
        """
        Create an annotated git tag.

        Args:
            tag: Tag name
            message: Tag annotation message
            sha: Commit SHA (default: HEAD)

        Raises:
            GitError: If the tag cannot be created
        """
        try:
            self._run_git('tag', '-a', tag, '-m', message, sha)
        except subprocess.CalledProcessError as e:
            raise GitError(f"Error tagging {tag}: {e.stderr or e}") from e
        logger.info(f"Created git tag: {tag}")

    def push_tag(self, tag: str, token: str, repository: str):
        """
        Push a tag to GitHub using token authentication.

        The remote configuration is left untouched; the tag is pushed to an
        authenticated URL built from ``GITHUB_SERVER_URL`` and ``repository``.

        Args:
            tag: Tag name
            token: GitHub token
            repository: Repository in 'owner/repo' format

        Raises:
            GitError: If the push fails
        """
        server_url = os.environ.get('GITHUB_SERVER_URL', 'https://github.com')
        # GitHub accepts x-access-token as username with the token as password
        auth_url = f"{server_url.replace('://', f'://x-access-token:{token}@')}/{repository}.git"
        refspec = f'+refs/tags/{tag}:refs/tags/{tag}'

        try:
            self._run_git('push', auth_url, refspec)
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or '').replace(token, '***')
            raise GitError(f"Error pushing tag {tag}: {stderr or e.returncode}") from e
        logger.info(f"Pushed tag to {repository}: {tag}")

    def delete_tag(self, tag: str):
        """
        Delete a local tag.

        Raises:
            GitError: If the tag cannot be deleted
        """
        try:
            self._run_git('tag', '-d', tag)
        except subprocess.CalledProcessError as e:
            raise GitError(f"Error deleting tag {tag}: {e.stderr or e}") from e
        logger.info(f"Deleted local git tag: {tag}")
