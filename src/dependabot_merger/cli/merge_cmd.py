"""CLI for merging: dependabot-merger merge | check | validate-config."""

from __future__ import annotations

import functools
import sys
from pathlib import Path

import yaml

from dependabot_merger.cli.parse_common import parse_flags, path_resolver
from dependabot_merger.config import ConfigError, load_settings
from dependabot_merger.github import GitHubApiError, GitHubClient
from dependabot_merger.helpers import load_yaml_file
from dependabot_merger.merger import (
    AutoMerger,
    BankHolidayLookupError,
    CannotApproveException,
    PullRequest,
    UnexpectedGitHubApiResponse,
    all_repos,
    is_bank_holiday,
)
from dependabot_merger.policy import CONFIG_FILENAME, structure_errors


def run_merge(repos_path: Path | None = None, dry_run: bool = False) -> int:
    """Evaluate and merge Dependabot PRs across all configured repos. Returns 0 or 1."""
    try:
        settings = load_settings(repos_path)
        client = GitHubClient(settings.token, timeout=settings.http_timeout)
        repos = all_repos(settings.repos_path, client)
    except (ConfigError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    holiday_checker = functools.partial(
        is_bank_holiday,
        division=settings.holiday_division,
        timeout=settings.http_timeout,
    )
    merger = AutoMerger(repos, holiday_checker=holiday_checker, dry_run=dry_run)
    try:
        summary = merger.invoke_merge_script()
    except (BankHolidayLookupError, CannotApproveException, UnexpectedGitHubApiResponse, GitHubApiError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if summary.skipped_holiday:
        print("Today is a bank holiday. Skipping auto-merge.")
        return 0
    print(
        f"Merged {len(summary.merged)}, rejected {len(summary.rejected)}, "
        f"merge failures {len(summary.merge_failed)}"
    )
    return 0


def run_check(repo: str, number: int) -> int:
    """Evaluate a single PR without approving or merging. 0 if mergeable, 1 otherwise."""
    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    client = GitHubClient(settings.token, timeout=settings.http_timeout)
    try:
        api_response = client.pull_request(repo, number)
        pr = PullRequest(api_response, client, repo=repo)
        mergeable = pr.is_auto_mergeable()
    except (GitHubApiError, UnexpectedGitHubApiResponse) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if mergeable:
        print(f"{repo}#{number} is auto-mergeable")
        return 0
    print(f"{repo}#{number} is not auto-mergeable:")
    for reason in pr.reasons_not_to_merge:
        print(f"  - {reason}")
    return 1


def run_validate_config(path: Path) -> int:
    """Check a local .dependabot_merger.yml. Returns 0 if valid."""
    if not path.is_file():
        print(f"Error: {path} not found", file=sys.stderr)
        return 1
    try:
        data = load_yaml_file(path)
    except yaml.YAMLError as e:
        print(f"Error: {path} is not valid YAML: {e}", file=sys.stderr)
        return 1

    errors = structure_errors(data)
    if errors:
        for err in errors:
            print(f"  {err}", file=sys.stderr)
        print(f"{path}: {len(errors)} problem(s)", file=sys.stderr)
        return 1
    print(f"{path}: OK")
    return 0


def run_merge_argv() -> None:
    """Dispatch dependabot-merger merge [--repos PATH] [--dry-run]."""
    parsed, _ = parse_flags(
        sys.argv[2:],
        ("repos", "--repos", None, path_resolver),
        switches=("--dry-run",),
    )
    sys.exit(run_merge(parsed["repos"], dry_run=parsed["dry_run"]))


def run_check_argv() -> None:
    """Dispatch dependabot-merger check <owner/repo> <pr-number>."""
    _, positionals = parse_flags(sys.argv[2:])
    if len(positionals) != 2 or not positionals[1].isdigit():
        print("Usage: dependabot-merger check <owner/repo> <pr-number>", file=sys.stderr)
        sys.exit(1)
    sys.exit(run_check(positionals[0], int(positionals[1])))


def run_validate_config_argv() -> None:
    """Dispatch dependabot-merger validate-config [path]."""
    _, positionals = parse_flags(sys.argv[2:])
    path = Path(positionals[0]) if positionals else Path(CONFIG_FILENAME)
    sys.exit(run_validate_config(path))
