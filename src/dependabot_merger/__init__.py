"""Auto-approve and auto-merge Dependabot pull requests that match a repository's allowlist."""

from dependabot_merger.version import API_VERSION

__all__ = ["API_VERSION"]
