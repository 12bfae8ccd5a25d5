"""Merge policy: allowlist checks, change extraction from commits, remote config parsing."""

from dependabot_merger.helpers import BumpType, VersionFormatError, classify_bump

from .changes import BUNDLER, LockfileGrammar, extract_proposed_changes
from .dependency_manager import AllowlistEntry, DependencyManager, ProposedChange
from .remote_config import (
    CONFIG_FILENAME,
    ConfigFound,
    ConfigNotFound,
    ConfigParseError,
    RemoteConfig,
    parse_remote_config,
    structure_errors,
)

__all__ = [
    "BUNDLER",
    "CONFIG_FILENAME",
    "AllowlistEntry",
    "BumpType",
    "ConfigFound",
    "ConfigNotFound",
    "ConfigParseError",
    "DependencyManager",
    "LockfileGrammar",
    "ProposedChange",
    "RemoteConfig",
    "VersionFormatError",
    "classify_bump",
    "extract_proposed_changes",
    "parse_remote_config",
    "structure_errors",
]
