"""Scan every configured repo and merge the Dependabot PRs that pass all gates."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from dependabot_merger.merger.bank_holidays import is_bank_holiday
from dependabot_merger.merger.pull_request import PullRequest
from dependabot_merger.merger.repos import Repo

log = logging.getLogger(__name__)


@dataclass
class MergeSummary:
    merged: list[str] = field(default_factory=list)
    rejected: dict[str, list[str]] = field(default_factory=dict)
    merge_failed: list[str] = field(default_factory=list)
    skipped_holiday: bool = False


class AutoMerger:
    """Runs once per invocation; PRs are processed one at a time in listing order."""

    def __init__(
        self,
        repos: list[Repo],
        *,
        holiday_checker: Callable[[date], bool] = is_bank_holiday,
        today: date | None = None,
        dry_run: bool = False,
    ) -> None:
        self.repos = repos
        self.holiday_checker = holiday_checker
        self.today = today
        self.dry_run = dry_run

    def invoke_merge_script(self) -> MergeSummary:
        """Merge eligible PRs unless today is a bank holiday."""
        today = self.today or date.today()
        if self.holiday_checker(today):
            log.info("Today is a bank holiday. Skipping auto-merge.")
            return MergeSummary(skipped_holiday=True)
        return self.merge_dependabot_prs()

    def merge_dependabot_prs(self) -> MergeSummary:
        summary = MergeSummary()
        for repo in self.repos:
            log.info("Checking %s", repo.full_name)
            for pr in repo.dependabot_pull_requests():
                self.process_pull_request(pr, summary)
        log.info(
            "Done: %d merged, %d rejected, %d merge failures",
            len(summary.merged),
            len(summary.rejected),
            len(summary.merge_failed),
        )
        return summary

    def process_pull_request(self, pr: PullRequest, summary: MergeSummary) -> None:
        key = f"{pr.repo}#{pr.number}"
        if not pr.is_auto_mergeable():
            summary.rejected[key] = list(pr.reasons_not_to_merge)
            for reason in pr.reasons_not_to_merge:
                log.info("%s not merged: %s", key, reason)
            return

        if self.dry_run:
            log.info("%s would be approved and merged (dry run)", key)
            summary.merged.append(key)
            return

        pr.approve()
        if pr.merge():
            summary.merged.append(key)
        else:
            summary.merge_failed.append(key)
