"""Repositories to scan, loaded from a YAML file.

Format:
- owner: organisation or user that owns every listed repo
- repos: list of repository names
"""

from __future__ import annotations

import logging
from pathlib import Path

from dependabot_merger.github import GitHubClient
from dependabot_merger.helpers import load_yaml_file
from dependabot_merger.merger.pull_request import PullRequest

log = logging.getLogger(__name__)

DEPENDABOT_LOGIN = "dependabot[bot]"


class Repo:
    def __init__(self, full_name: str, client: GitHubClient) -> None:
        self.full_name = full_name
        self.client = client

    def __repr__(self) -> str:
        return f"Repo({self.full_name})"

    def dependabot_pull_requests(self) -> list[PullRequest]:
        """Open PRs authored by Dependabot, oldest first."""
        open_prs = self.client.pull_requests(self.full_name)
        prs = [
            PullRequest(api_response, self.client, repo=self.full_name)
            for api_response in open_prs
            if (api_response.get("user") or {}).get("login") == DEPENDABOT_LOGIN
        ]
        log.debug("%s: %d open PRs, %d from Dependabot", self.full_name, len(open_prs), len(prs))
        return prs


def load_repo_names(path: Path) -> list[str]:
    """Full "owner/name" repo names from the repos YAML. Raises ValueError if malformed."""
    data = load_yaml_file(path) or {}

    owner = data.get("owner") if isinstance(data, dict) else None
    names = data.get("repos") if isinstance(data, dict) else None
    if not owner or not isinstance(names, list):
        msg = f"{path} must define 'owner' and a 'repos' list"
        raise ValueError(msg)
    return [name if "/" in name else f"{owner}/{name}" for name in (str(n) for n in names)]


def all_repos(path: Path, client: GitHubClient) -> list[Repo]:
    return [Repo(name, client) for name in load_repo_names(path)]
