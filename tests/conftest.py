"""Pytest fixtures for dependabot-merger tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest

from dependabot_merger.github import GitHubClient, GitHubNotFound

REPO = "my-org/example-app"

COMMIT_MESSAGE = """Bump rails from 6.0.0 to 6.0.1

Bumps [rails](https://github.com/rails/rails) from 6.0.0 to 6.0.1.
- [Release notes](https://github.com/rails/rails/releases)

---
updated-dependencies:
- dependency-name: rails
  dependency-type: direct:production
  update-type: version-update:semver-patch
...

Signed-off-by: dependabot[bot] <support@github.com>"""

GEMFILE_LOCK_PATCH = """@@ -210,7 +210,7 @@ GEM
     rack-test (2.1.0)
       rack (>= 1.3)
-    rails (6.0.0)
+    rails (6.0.1)
       actioncable (= 6.0.0)
     rake (13.0.6)"""

CONFIG_TEXT = """api_version: "0.0.1"
auto_merge:
  - dependency: rails
    allowed_semver_bumps:
      - patch
      - minor
"""


@pytest.fixture
def pr_api_response() -> dict[str, Any]:
    """Open Dependabot PR as returned by GET /repos/{repo}/pulls."""
    return {
        "number": 42,
        "title": "Bump rails from 6.0.0 to 6.0.1",
        "user": {"login": "dependabot[bot]"},
        "head": {"sha": "abc123", "repo": {"name": "example-app"}},
        "base": {"repo": {"name": "example-app", "full_name": REPO}},
    }


@pytest.fixture
def make_client() -> Callable[..., MagicMock]:
    """Factory for a GitHubClient mock whose defaults describe a fully mergeable PR."""

    def _make(
        *,
        commits: int = 1,
        message: str = COMMIT_MESSAGE,
        patch: str = GEMFILE_LOCK_PATCH,
        files: list[dict[str, Any]] | None = None,
        workflow_runs: dict[str, Any] | None = None,
        jobs: dict[str, Any] | None = None,
        config_text: str | None = CONFIG_TEXT,
        review_status: int = 200,
    ) -> MagicMock:
        client = MagicMock(spec=GitHubClient)
        client.pull_request_commits.return_value = [{"sha": f"sha{i}"} for i in range(commits)]
        client.commit.return_value = {
            "commit": {"message": message},
            "files": files if files is not None else [{"filename": "Gemfile.lock", "patch": patch}],
        }
        client.workflow_runs.return_value = (
            workflow_runs
            if workflow_runs is not None
            else {"total_count": 2, "workflow_runs": [{"id": 7, "name": "Lint"}, {"id": 99, "name": "CI"}]}
        )
        client.workflow_jobs.return_value = (
            jobs
            if jobs is not None
            else {
                "jobs": [
                    {"status": "completed", "conclusion": "success"},
                    {"status": "completed", "conclusion": "skipped"},
                ]
            }
        )
        if config_text is None:
            client.contents.side_effect = GitHubNotFound("not found", status=404)
        else:
            client.contents.return_value = config_text
        client.post_review.return_value = review_status
        client.merge_pull_request.return_value = {"merged": True}
        return client

    return _make
