"""Decide whether one Dependabot PR may be auto-merged, then approve and merge it.

Gates run in a fixed order and stop at the first failure. Each failure adds
exactly one line to reasons_not_to_merge; an empty list means mergeable.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import cached_property
from typing import Any

from dependabot_merger.github import GitHubApiError, GitHubClient, GitHubNotFound
from dependabot_merger.helpers import VersionFormatError
from dependabot_merger.policy import (
    BUNDLER,
    CONFIG_FILENAME,
    ConfigFound,
    ConfigNotFound,
    ConfigParseError,
    DependencyManager,
    LockfileGrammar,
    RemoteConfig,
    extract_proposed_changes,
    parse_remote_config,
    structure_errors,
)
from dependabot_merger.policy.remote_config import allow_entries

log = logging.getLogger(__name__)

CI_WORKFLOW_NAME = "CI"
PASSING_CONCLUSIONS = ("success", "skipped")

APPROVAL_MESSAGE = (
    "This PR has been scanned and automatically approved by dependabot-merger.\n"
)

REASON_MULTIPLE_COMMITS = "PR contains more than one commit."
REASON_UNEXPECTED_FILES = "PR changes files that should not be changed."
REASON_NO_CI_WORKFLOW = "CI workflow doesn't exist."
REASON_CI_FAILING = "CI workflow is failing."
REASON_CONFIG_MISSING = f"The remote {CONFIG_FILENAME} file is missing."
REASON_CONFIG_MALFORMED = f"The remote {CONFIG_FILENAME} file does not have the expected YAML structure."
REASON_INVALID_VERSION = "PR contains a version that is not valid semver."
REASON_NOT_ON_ALLOWLIST = "PR bumps a dependency that is not on the allowlist."
REASON_SEMVER_NOT_ALLOWED = "PR bumps a dependency to a higher semver than is allowed."


class CannotApproveException(Exception):
    """Posting the approval review failed. The tool misbehaved; the PR was not rejected."""


class UnexpectedGitHubApiResponse(Exception):
    """GitHub returned a payload without a field the merger depends on."""


class PullRequest:
    """One open Dependabot PR. Fetched data is memoized for the lifetime of the instance."""

    def __init__(
        self,
        api_response: dict[str, Any],
        client: GitHubClient,
        repo: str | None = None,
        dependency_manager: DependencyManager | None = None,
        lockfile: LockfileGrammar = BUNDLER,
    ) -> None:
        self.api_response = api_response
        self.client = client
        self.repo = repo or api_response["base"]["repo"]["full_name"]
        self.dependency_manager = dependency_manager or DependencyManager()
        self.lockfile = lockfile
        self.reasons_not_to_merge: list[str] = []
        self._evaluated = False

    @property
    def number(self) -> int:
        return self.api_response["number"]

    @property
    def head_sha(self) -> str:
        return self.api_response["head"]["sha"]

    def __repr__(self) -> str:
        return f"PullRequest({self.repo}#{self.number})"

    # --- Gate chain ---

    def _gates(self) -> list[tuple[Callable[[], bool], str]]:
        return [
            (self.validate_single_commit, REASON_MULTIPLE_COMMITS),
            (self.validate_files_changed, REASON_UNEXPECTED_FILES),
            (self.validate_ci_workflow_exists, REASON_NO_CI_WORKFLOW),
            (self.validate_ci_passes, REASON_CI_FAILING),
            (self.validate_external_config_file_exists, REASON_CONFIG_MISSING),
            (self.validate_external_config_file_contents, REASON_CONFIG_MALFORMED),
            (self.populate_dependency_manager, REASON_CONFIG_MALFORMED),
            (self.dependency_manager.all_proposed_dependencies_on_allowlist, REASON_NOT_ON_ALLOWLIST),
            (self.dependency_manager.all_proposed_updates_semver_allowed, REASON_SEMVER_NOT_ALLOWED),
        ]

    def is_auto_mergeable(self) -> bool:
        """Run the gates once; later calls return the stored verdict."""
        if self._evaluated:
            return not self.reasons_not_to_merge

        for check, reason in self._gates():
            try:
                passed = check()
            except VersionFormatError as e:
                log.debug("%r: %s", self, e)
                self.reasons_not_to_merge.append(REASON_INVALID_VERSION)
                break
            if not passed:
                self.reasons_not_to_merge.append(reason)
                break

        self._evaluated = True
        return not self.reasons_not_to_merge

    def validate_single_commit(self) -> bool:
        return len(self.commits) == 1

    def validate_files_changed(self) -> bool:
        # TODO: support lock files for other ecosystems (e.g. package-lock.json) via LockfileGrammar.
        files_changed = [f["filename"] for f in self.head_commit.get("files", [])]
        return files_changed == [self.lockfile.filename]

    def validate_ci_workflow_exists(self) -> bool:
        return self.ci_workflow_run_id is not None

    def validate_ci_passes(self) -> bool:
        response = self.client.workflow_jobs(self.repo, self.ci_workflow_run_id)
        jobs = response.get("jobs") if isinstance(response, dict) else None
        if jobs is None:
            msg = f"No jobs in workflow run {self.ci_workflow_run_id} for {self.repo}\n{response}"
            raise UnexpectedGitHubApiResponse(msg)

        unfinished_jobs = [job for job in jobs if job.get("status") != "completed"]
        failed_jobs = [job for job in jobs if job.get("conclusion") not in PASSING_CONCLUSIONS]
        return not unfinished_jobs and not failed_jobs

    def validate_external_config_file_exists(self) -> bool:
        return not isinstance(self.remote_config, ConfigNotFound)

    def validate_external_config_file_contents(self) -> bool:
        config = self.remote_config
        return isinstance(config, ConfigFound) and not structure_errors(config.data)

    def populate_dependency_manager(self) -> bool:
        """Load the allowlist from the remote config and the proposals from the head commit."""
        if not isinstance(self.remote_config, ConfigFound):
            return False
        self.tell_dependency_manager_what_dependencies_are_allowed()
        self.tell_dependency_manager_what_dependabot_is_changing()
        return True

    # --- Side effects ---

    def approve(self) -> None:
        status = self.client.post_review(self.repo, self.number, APPROVAL_MESSAGE, event="APPROVE")
        if not 200 <= status < 300:
            msg = f"Could not approve {self.repo}#{self.number}: HTTP {status}"
            raise CannotApproveException(msg)
        log.info("Approved %s#%s", self.repo, self.number)

    def merge(self) -> bool:
        """Request the merge. Failures are logged and reported as False, never raised."""
        try:
            self.client.merge_pull_request(self.repo, self.number)
        except GitHubApiError as e:
            log.error("Error merging pull request %s#%s: %s", self.repo, self.number, e)
            return False
        log.info("Merged %s#%s", self.repo, self.number)
        return True

    # --- Memoized fetches ---

    @cached_property
    def commits(self) -> list[dict[str, Any]]:
        return self.client.pull_request_commits(self.repo, self.number)

    @cached_property
    def head_commit(self) -> dict[str, Any]:
        return self.client.commit(self.repo, self.head_sha)

    @property
    def commit_message(self) -> str:
        return self.head_commit["commit"]["message"]

    @property
    def lockfile_changes(self) -> str:
        for f in self.head_commit.get("files", []):
            if f["filename"] == self.lockfile.filename:
                return f.get("patch") or ""
        return ""

    @cached_property
    def ci_workflow_run_id(self) -> int | None:
        response = self.client.workflow_runs(self.repo, self.head_sha)
        runs = response.get("workflow_runs") if isinstance(response, dict) else None
        if runs is None:
            msg = f"Error fetching CI workflow runs for {self.repo}@{self.head_sha}\n{response}"
            raise UnexpectedGitHubApiResponse(msg)

        for run in runs:
            if run.get("name") == CI_WORKFLOW_NAME:
                return run["id"]
        return None

    @cached_property
    def remote_config(self) -> RemoteConfig:
        try:
            text = self.client.contents(self.repo, CONFIG_FILENAME)
        except GitHubNotFound:
            return ConfigNotFound()
        except UnicodeDecodeError as e:
            return ConfigParseError(str(e))
        return parse_remote_config(text)

    # --- Policy wiring ---

    def tell_dependency_manager_what_dependencies_are_allowed(self) -> None:
        for name, bumps in allow_entries(self.remote_config):
            self.dependency_manager.allow_dependency_update(name=name, allowed_semver_bumps=bumps)

    def tell_dependency_manager_what_dependabot_is_changing(self) -> None:
        changes = extract_proposed_changes(self.commit_message, self.lockfile_changes, self.lockfile)
        for change in changes:
            self.dependency_manager.propose_dependency_update(
                name=change.name,
                previous_version=change.previous_version,
                next_version=change.next_version,
            )
