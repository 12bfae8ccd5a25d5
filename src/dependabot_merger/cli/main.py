"""Main CLI entry point for dependabot-merger."""

import logging
import os
import sys

from dependabot_merger.cli import merge_cmd
from dependabot_merger.version import API_VERSION


def configure_logging() -> None:
    """Log to stderr; --verbose forces DEBUG, else DEPENDABOT_MERGER_LOG_LEVEL (default INFO)."""
    level = "DEBUG" if "--verbose" in sys.argv else os.getenv("DEPENDABOT_MERGER_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if "--verbose" in sys.argv:
        sys.argv.remove("--verbose")


def main() -> None:
    """Main CLI entry point."""
    configure_logging()
    if len(sys.argv) < 2:
        print("Usage: dependabot-merger <command> [args...] [--verbose]", file=sys.stderr)
        print("Commands:", file=sys.stderr)
        print(
            "  merge [--repos PATH] [--dry-run]  - Approve and merge eligible Dependabot PRs",
            file=sys.stderr,
        )
        print(
            "  check <owner/repo> <pr-number>    - Explain whether one PR would be merged",
            file=sys.stderr,
        )
        print(
            "  validate-config [path]            - Check a .dependabot_merger.yml file",
            file=sys.stderr,
        )
        print("  version                           - Print the supported api_version", file=sys.stderr)
        sys.exit(1)

    command = sys.argv[1]

    if command == "merge":
        merge_cmd.run_merge_argv()
    elif command == "check":
        merge_cmd.run_check_argv()
    elif command == "validate-config":
        merge_cmd.run_validate_config_argv()
    elif command == "version":
        print(API_VERSION)
    else:
        print(f"Error: Unknown command: {command}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
