"""Runtime settings from the environment.

- GITHUB_TOKEN / GH_TOKEN: token used for every GitHub API call
- DEPENDABOT_MERGER_REPOS: repos YAML (default config/repos.yml)
- DEPENDABOT_MERGER_HOLIDAY_DIVISION: GOV.UK bank holiday division (default england-and-wales)
- DEPENDABOT_MERGER_HTTP_TIMEOUT: seconds per HTTP request (default 30)
- DEPENDABOT_MERGER_LOG_LEVEL: logging level name (default INFO), read by the CLI
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dependabot_merger.merger.bank_holidays import DEFAULT_DIVISION

DEFAULT_REPOS_PATH = Path("config/repos.yml")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class Settings:
    token: str
    repos_path: Path = DEFAULT_REPOS_PATH
    holiday_division: str = DEFAULT_DIVISION
    http_timeout: float = 30


def get_github_token() -> str:
    """Get the GitHub token from environment. Raises ConfigError if unset."""
    token = os.getenv("GITHUB_TOKEN") or os.getenv("GH_TOKEN")
    if not token:
        msg = "GITHUB_TOKEN or GH_TOKEN environment variable is required"
        raise ConfigError(msg)
    return token


def load_settings(repos_path: Path | None = None) -> Settings:
    """Build Settings from the environment; repos_path overrides DEPENDABOT_MERGER_REPOS."""
    timeout_raw = os.getenv("DEPENDABOT_MERGER_HTTP_TIMEOUT", "30")
    try:
        timeout = float(timeout_raw)
    except ValueError as e:
        msg = f"DEPENDABOT_MERGER_HTTP_TIMEOUT must be a number, got {timeout_raw!r}"
        raise ConfigError(msg) from e

    return Settings(
        token=get_github_token(),
        repos_path=repos_path or Path(os.getenv("DEPENDABOT_MERGER_REPOS", str(DEFAULT_REPOS_PATH))),
        holiday_division=os.getenv("DEPENDABOT_MERGER_HOLIDAY_DIVISION", DEFAULT_DIVISION),
        http_timeout=timeout,
    )
