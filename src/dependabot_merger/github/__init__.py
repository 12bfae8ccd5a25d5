"""GitHub REST API access."""

from .client import GitHubApiError, GitHubClient, GitHubNotFound

__all__ = ["GitHubApiError", "GitHubClient", "GitHubNotFound"]
