#!/usr/bin/env python3
"""
semver-releaser - Semantic versioning and GitHub releases from conventional commits.

This script wires together configuration, commit parsing, bump rules, release
notes, git operations, and the GitHub release API. It:
- reads the latest vX.Y.Z tag and the commits made since then
- computes the next version from the configured bump rules
- optionally tags, pushes, and publishes a GitHub release with grouped notes

Example:
    release.py --rules "fix=patch feat=minor bang=major" \\
               --categories 'feat="New Features" fix="Bug Fixes" *="Other"' \\
               --ignore "chore ci" --no-push
"""

import os
import sys
import logging
import argparse
from pathlib import Path
from typing import Optional

# Make the package importable when run as a plain script
sys.path.insert(0, str(Path(__file__).parent))

from semver_releaser.bump import InvalidSeverityError
from semver_releaser.config import Config, SettingsError
from semver_releaser.eql import ConfigSyntaxError
from semver_releaser.git_helper import GitHelper, GitError
from semver_releaser.github_api import GitHubAPI, GitHubAPIError
from semver_releaser.notes import WILDCARD
from semver_releaser.planner import ReleasePlan, plan_release

logger = logging.getLogger(__name__)


class Colors:
    """ANSI color codes for terminal output."""

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    MAGENTA = "\033[35m"
    RESET = "\033[0m"


def info(message: str):
    print(f"{Colors.GREEN}+{Colors.RESET} {message}")


def warn(message: str):
    print(f"{Colors.YELLOW}!{Colors.RESET} {message}")


class ReleaseOrchestrator:
    """Compute the next version and, when enabled, publish it on GitHub."""

    def __init__(self, config: Config, dry_run: bool = False, git: Optional[GitHelper] = None):
        """
        Initialize release orchestrator.

        Args:
            config: Loaded configuration
            dry_run: If True, never tag, push or create releases
            git: Git helper (defaults to one bound to config.repo_path)
        """
        self.config = config
        self.dry_run = dry_run
        self.git = git or GitHelper(config.repo_path)

    @property
    def will_push(self) -> bool:
        return self.config.push and not self.dry_run

    def print_run_info(self):
        """Print the effective settings before doing any work."""
        lines = [
            f"{Colors.BLUE}{'=' * 60}{Colors.RESET}",
            f"{Colors.CYAN}Run information{Colors.RESET}",
            f"{Colors.BLUE}{'=' * 60}{Colors.RESET}",
            f"Working on {self.config.repo_path}",
            f"Will push changes? {self.will_push}",
            "",
            "Rules",
            "-----",
        ]
        for name, severity in self.config.rules.items():
            lines.append(f"    '{name.lower()}' commits bump {severity.word}")

        lines += ["", "When writing release notes..."]
        for key, title in self.config.categories.items():
            if key != WILDCARD:
                lines.append(f"    ...group all '{key.lower()}' commits under '{title}';")
        if WILDCARD in self.config.categories:
            lines.append(f"    ...and all other commits under '{self.config.categories[WILDCARD]}';")

        if self.config.ignore:
            lines += ["", "Ignore commits with the following types:"]
            lines += [f" - {kind}" for kind in self.config.ignore]

        print("\n".join(lines))
        print()

    def plan(self) -> ReleasePlan:
        """
        Read the repository and plan the release.

        Returns:
            ReleasePlan for the commits since the latest version tag
        """
        latest = self.git.get_latest_version()
        if latest:
            info(f"Latest version is {latest}")
            since_tag = str(latest)
        else:
            warn("No SemVer tag found. Assuming first release...")
            since_tag = None

        commits = self.git.get_commits_since_tag(since_tag)
        messages = [message for _, message in commits]

        plan = plan_release(
            messages,
            self.config.rules,
            self.config.categories,
            ignore=self.config.ignore,
            previous_version=latest,
        )

        return plan

    def run(self) -> dict:
        """
        Run the release workflow.

        Returns:
            Dictionary with release information
        """
        plan = self.plan()

        if not plan.commits:
            info("No new commits to release.")
            return {"status": "skipped", "last_version": str(plan.previous_version)}

        info(f"Processing {len(plan.commits)} commit(s) since {plan.previous_version}")

        if not plan.should_release:
            info("No need to bump version.")
            return {"status": "skipped", "last_version": str(plan.previous_version)}

        next_version = str(plan.next_version)
        info(f"Releasing {Colors.MAGENTA}{next_version}{Colors.RESET} ({plan.severity.word} bump)")
        write_step_output("version", next_version)

        result = {
            "status": "dry-run",
            "next_version": next_version,
            "last_version": str(plan.previous_version),
            "severity": plan.severity.word,
            "notes": plan.notes,
        }

        if not self.will_push:
            return result

        self.publish(next_version, plan.notes)
        result["status"] = "success"
        return result

    def publish(self, tag_name: str, notes: str):
        """Create and push the tag, then create the GitHub release."""
        self.config.require_push_settings()

        self.git.create_tag(tag_name, f"Release {tag_name}")
        info(f"Created tag {tag_name}")

        try:
            self.git.push_tag(tag_name, self.config.token, self.config.repository)
        except GitError:
            self.git.delete_tag(tag_name)
            raise
        info("Pushed tag")

        with GitHubAPI(self.config.token, self.config.repository) as api:
            api.create_release(tag_name, notes)
        info(f"Created release {tag_name}")


def write_step_output(name: str, value: str):
    """Expose a value as a GitHub Actions step output, when running in Actions."""
    output_path = os.getenv("GITHUB_OUTPUT")
    if not output_path:
        return
    with open(output_path, "a") as f:
        f.write(f"{name}={value}\n")


def write_dotenv(path: str, result: dict):
    """Write version info in dotenv format."""
    with open(path, "w") as f:
        f.write(f"NEXT_RELEASE_VERSION={result.get('next_version', '')}\n")
        f.write(f"LAST_RELEASE_VERSION={result.get('last_version', '')}\n")
        f.write(f"RELEASE_SEVERITY={result.get('severity', 'none')}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute the next semantic version and GitHub release from conventional commits"
    )

    parser.add_argument(
        "--config",
        help="Path to YAML settings file (default: .semver-releaser.yaml if present)",
        default=None,
    )
    parser.add_argument("--repo-path", help="Path to the git repository", default=None)
    parser.add_argument(
        "--rules",
        help="Bump rules, e.g. 'fix=patch feat=minor bang=major'",
        default=None,
    )
    parser.add_argument(
        "--categories",
        help="Release-notes categories, e.g. 'feat=\"New Features\" *=Other'",
        default=None,
    )
    parser.add_argument(
        "--ignore",
        help="Space-separated commit types to exclude",
        default=None,
    )
    parser.add_argument("--token", help="GitHub token used to push and create the release", default=None)
    parser.add_argument(
        "--push",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Create and push the tag and GitHub release",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute the version only; never tag, push or release",
    )
    parser.add_argument(
        "--output", help="Output file for version info (dotenv format)", default=None
    )
    return parser


def configure_logging():
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Console output
        ],
    )

    # Optionally add file handler if LOG_FILE environment variable is set
    if log_file := os.getenv("LOG_FILE"):
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logging.getLogger().addHandler(file_handler)


def main(argv=None):
    """Main entry point."""
    configure_logging()
    args = build_parser().parse_args(argv)

    try:
        config = Config(
            args.config,
            overrides={
                "rules": args.rules,
                "categories": args.categories,
                "ignore": args.ignore,
                "push": args.push,
                "repo_path": args.repo_path,
                "token": args.token,
            },
        )
        orchestrator = ReleaseOrchestrator(config, dry_run=args.dry_run)
        orchestrator.print_run_info()
        result = orchestrator.run()
    except (ConfigSyntaxError, InvalidSeverityError, SettingsError) as e:
        logger.error(f"Invalid configuration: {e}")
        print(f"{Colors.RED}- {e}{Colors.RESET}", file=sys.stderr)
        sys.exit(1)
    except (GitError, GitHubAPIError) as e:
        logger.error(f"Release failed: {e}")
        print(f"{Colors.RED}- {e}{Colors.RESET}", file=sys.stderr)
        sys.exit(1)

    if args.output:
        write_dotenv(args.output, result)
        info(f"Version info written to {args.output}")

    sys.exit(0)


if __name__ == "__main__":
    main()
