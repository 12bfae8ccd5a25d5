"""Pull request validation and the merge loop over configured repositories."""

from .auto_merger import AutoMerger, MergeSummary
from .bank_holidays import BankHolidayLookupError, fetch_bank_holidays, is_bank_holiday
from .pull_request import CannotApproveException, PullRequest, UnexpectedGitHubApiResponse
from .repos import DEPENDABOT_LOGIN, Repo, all_repos, load_repo_names

__all__ = [
    "DEPENDABOT_LOGIN",
    "AutoMerger",
    "BankHolidayLookupError",
    "CannotApproveException",
    "MergeSummary",
    "PullRequest",
    "Repo",
    "UnexpectedGitHubApiResponse",
    "all_repos",
    "fetch_bank_holidays",
    "is_bank_holiday",
    "load_repo_names",
]
