"""
GitHub API integration for releases.

This module provides a client for the GitHub REST API to:
- Create a release for a pushed tag
"""

import os
import logging
from typing import Optional, Dict

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    """Custom exception for GitHub API errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Dict] = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


def _response_json(response) -> Optional[Dict]:
    try:
        return response.json()
    except ValueError:
        return None


class GitHubAPI:
    """GitHub API client for release management."""

    # API configuration
    API_VERSION = "2022-11-28"
    DEFAULT_TIMEOUT = (10, 30)  # 10s connect, 30s read

    # Retry configuration
    MAX_RETRIES = 3
    RETRY_BACKOFF_FACTOR = 0.3
    RETRY_STATUS_CODES = [429, 500, 502, 503, 504]

    def __init__(
        self,
        token: str,
        repo: str,
        api_url: Optional[str] = None,
        timeout: Optional[tuple] = None
    ):
        """
        Initialize GitHub API client.

        Args:
            token: GitHub token
            repo: Repository in 'owner/repo' format
            api_url: API base URL (defaults to GITHUB_API_URL or https://api.github.com)
            timeout: Tuple of (connect_timeout, read_timeout) in seconds

        Raises:
            GitHubAPIError: If token or repository is missing
        """
        if not token:
            raise GitHubAPIError("GitHub token is required")
        if not repo:
            raise GitHubAPIError("Repository is required in 'owner/repo' format")

        self.token = token
        self.repo = repo
        self.api_url = (api_url or os.environ.get(
            "GITHUB_API_URL", "https://api.github.com"
        )).rstrip("/")
        self.timeout = timeout or self.DEFAULT_TIMEOUT

        # Create session with connection pooling and retry logic
        self.session = self._create_session()

        logger.info(f"GitHub API initialized for repository {self.repo}")

    def _create_session(self) -> requests.Session:
        """
        Create requests Session with connection pooling and retry logic.

        Returns:
            Configured requests.Session
        """
        session = requests.Session()

        retry_strategy = Retry(
            total=self.MAX_RETRIES,
            backoff_factor=self.RETRY_BACKOFF_FACTOR,
            status_forcelist=self.RETRY_STATUS_CODES,
            allowed_methods=["GET", "POST"]
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        # Set default headers per GitHub API requirements
        session.headers.update({
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.API_VERSION,
            "User-Agent": "semver-releaser/2.0"
        })

        return session

    def create_release(self, tag_name: str, body: str) -> bool:
        """
        Create a published GitHub release named after its tag.

        Args:
            tag_name: Git tag name (also used as release name)
            body: Release notes (markdown)

        Returns:
            True if the release was created or already exists

        Raises:
            GitHubAPIError: If release creation fails
        """
        url = f"{self.api_url}/repos/{self.repo}/releases"

        data = {
            "tag_name": tag_name,
            "name": tag_name,
            "body": body,
            "draft": False,
            "prerelease": False
        }

        try:
            logger.info(f"Creating GitHub release for {tag_name}")
            response = self.session.post(url, json=data, timeout=self.timeout)
            response.raise_for_status()

            logger.info(f"Created GitHub release: {tag_name}")
            return True

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code
            error_data = _response_json(e.response)

            # Handle duplicate release (422 with "already_exists")
            if status_code == 422 and error_data:
                errors = error_data.get("errors", [])
                if any(err.get("code") == "already_exists" for err in errors):
                    logger.warning(f"Release {tag_name} already exists")
                    return True

            logger.error(f"HTTP error creating release: {status_code} - {e.response.text}")
            raise GitHubAPIError(
                f"Failed to create release: {e}",
                status_code=status_code,
                response_data=error_data
            ) from e

        except requests.exceptions.Timeout as e:
            logger.error(f"Timeout creating release after {self.timeout}s: {e}")
            raise GitHubAPIError(f"Request timeout: {e}") from e

        except requests.exceptions.RequestException as e:
            logger.error(f"Network error creating release: {e}")
            raise GitHubAPIError(f"Network error: {e}") from e

    def close(self) -> None:
        """Close the session and release resources."""
        if self.session:
            self.session.close()
            logger.debug("GitHub API session closed")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
