"""semver-releaser: next semantic version and release notes from conventional commits."""

__version__ = "2.0.0"
