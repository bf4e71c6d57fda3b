"""
Configuration loader and accessors for semver-releaser.

This module:
- Loads an optional YAML settings file on top of defaults
- Applies environment variable overrides (GitHub Action inputs)
- Applies explicit overrides (command-line flags)
- Parses the EQL ``rules``/``categories`` strings and validates severities
"""

import os
import copy
import logging
import yaml
from typing import Any, Dict, List, Optional

from semver_releaser import eql
from semver_releaser.bump import Severity, parse_rules

# Configure module logger
logger = logging.getLogger(__name__)

CANDIDATE_PATHS = [
    ".semver-releaser.yaml",
    "semver-releaser.yaml",
]


class SettingsError(ValueError):
    """Raised when settings are missing or cannot be loaded."""


def _to_mapping(value: Any) -> Dict[str, str]:
    """Accept either an EQL string or a YAML mapping."""
    if value is None:
        return {}
    if isinstance(value, dict):
        return {str(k).strip(): str(v).strip() for k, v in value.items()}
    return eql.parse(str(value))


def _to_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if str(v).strip()]
    return str(value).split()


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


class Config:
    """Main configuration class."""

    DEFAULT_CONFIG = {
        "rules": "fix=patch feat=minor bang=major",
        "categories": 'feat="New Features" fix="Bug Fixes"',
        "ignore": "",
        "push": False,
        "repo_path": ".",
        "repository": None,
        "token": None,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        env_overrides: bool = True,
        overrides: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML settings file (optional)
            env_overrides: Whether to allow environment variable overrides
            overrides: Explicit values (e.g. from CLI flags); None entries are skipped

        Raises:
            SettingsError: If the settings file is invalid or no rules are set
            ConfigSyntaxError: If rules or categories are malformed EQL
            InvalidSeverityError: If a rule maps to an unknown severity
        """
        # Start with defaults
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)

        # Auto-discover config file if not provided
        if config_path is None:
            for path in CANDIDATE_PATHS:
                if os.path.exists(path):
                    config_path = path
                    break
        elif not os.path.exists(config_path):
            raise SettingsError(f"Configuration file not found: {config_path}")

        if config_path:
            self._load_file(config_path)

        if env_overrides:
            self._apply_env_overrides()

        if overrides:
            self._merge_config({k: v for k, v in overrides.items() if v is not None})

        # Parse into structured values, failing before any commit is read
        self.rules: Dict[str, Severity] = parse_rules(_to_mapping(self.config["rules"]))
        if not self.rules:
            raise SettingsError("No bump rules configured")

        self.categories: Dict[str, str] = _to_mapping(self.config["categories"])
        if not self.categories:
            logger.warning("No release-notes categories configured; notes will be empty")
        else:
            logger.debug(f"Release-notes categories: {eql.dump(self.categories)}")

        self.ignore: List[str] = _to_list(self.config["ignore"])

    def _load_file(self, config_path: str):
        try:
            with open(config_path, "r") as f:
                user_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SettingsError(f"Invalid YAML in configuration file {config_path}: {e}")
        except (IOError, OSError) as e:
            raise SettingsError(f"Error reading configuration file {config_path}: {e}")

        if user_config is None:
            return
        if not isinstance(user_config, dict):
            raise SettingsError(f"Configuration file {config_path} must contain a mapping")

        logger.debug(f"Loaded settings from {config_path}")
        self._merge_config(user_config)

    def _merge_config(self, user_config: dict):
        """Merge user configuration with current values."""
        for key, value in user_config.items():
            if key not in self.config:
                logger.warning(f"Unknown configuration key '{key}' ignored")
                continue
            self.config[key] = value

    def _apply_env_overrides(self):
        """Apply environment variable overrides."""
        if rules := os.getenv("INPUT_RULES"):
            self.config["rules"] = rules

        if categories := os.getenv("INPUT_CATEGORIES"):
            self.config["categories"] = categories

        if ignore := os.getenv("INPUT_IGNORE"):
            self.config["ignore"] = ignore

        if push := os.getenv("INPUT_PUSH"):
            self.config["push"] = push

        if workspace := os.getenv("GITHUB_WORKSPACE"):
            self.config["repo_path"] = workspace

        if repository := os.getenv("GITHUB_REPOSITORY"):
            self.config["repository"] = repository

        if token := self.get_github_token():
            self.config["token"] = token

    @property
    def push(self) -> bool:
        """Whether to create and push the tag and release."""
        return _to_bool(self.config["push"])

    @property
    def repo_path(self) -> str:
        return self.config["repo_path"]

    @property
    def repository(self) -> Optional[str]:
        """Repository in 'owner/repo' format."""
        return self.config["repository"]

    @property
    def token(self) -> Optional[str]:
        return self.config["token"]

    def require_push_settings(self):
        """
        Ensure everything needed to push a release is available.

        Raises:
            SettingsError: If the token or repository is missing
        """
        if not self.token:
            raise SettingsError(
                "GitHub token not found. Set GITHUB_TOKEN, GH_TOKEN or pass --token."
            )
        if not self.repository or "/" not in self.repository:
            raise SettingsError(
                "Repository not found. Set GITHUB_REPOSITORY in 'owner/repo' format."
            )

    @staticmethod
    def get_github_token(explicit_token: Optional[str] = None) -> Optional[str]:
        """
        Get GitHub token from environment variables with fallback chain.

        Priority:
        1. Explicitly provided token parameter
        2. INPUT_TOKEN environment variable (GitHub Action input)
        3. GITHUB_TOKEN environment variable
        4. GH_TOKEN environment variable (GitHub CLI convention)

        Args:
            explicit_token: Optional token provided directly

        Returns:
            Token string or None if not found
        """
        return (
            explicit_token
            or os.getenv("INPUT_TOKEN")
            or os.getenv("GITHUB_TOKEN")
            or os.getenv("GH_TOKEN")
        )
